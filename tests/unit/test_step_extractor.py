"""Tests for bootstrapping the knowledge base from step files."""
import json

import pytest

from core.domain.step import StepKeyword
from core.services.steps import StepExtractor

LOGIN_STEPS = """import { Given, When, Then } from '@cucumber/cucumber';

Given('the login page is displayed', async function () {
  await this.page.goto('/login');
});

When('I sign in as {string}', async function (user: string) {
  await this.page.locator('#user').fill(user);
});

// Then('an old assertion', async function () {});
Then('the dashboard is displayed', async function () {
  await this.page.locator('#dashboard').waitFor({ state: 'visible' });
});
"""

CART_STEPS = """import { Given, Then } from '@cucumber/cucumber';

Given('the login page is displayed', async function () {
  // duplicated in another file
});

Then('the cart is empty', async function () {});
"""


@pytest.fixture
def populated_steps(steps_dir):
    (steps_dir / "login.steps.ts").write_text(LOGIN_STEPS, encoding="utf-8")
    nested = steps_dir / "shop" / "cart"
    nested.mkdir(parents=True)
    (nested / "cart.steps.ts").write_text(CART_STEPS, encoding="utf-8")
    # Not a step file: ignored by the glob
    (steps_dir / "helpers.ts").write_text("Given('not scanned', () => {});", encoding="utf-8")
    return steps_dir


class TestScan:
    """Read-only scanning."""

    def test_finds_nested_step_files_sorted(self, knowledge_base, populated_steps):
        extractor = StepExtractor(knowledge_base)
        files = extractor.find_step_files(populated_steps)

        assert files == [
            populated_steps / "login.steps.ts",
            populated_steps / "shop" / "cart" / "cart.steps.ts",
        ]

    def test_declarations_deduplicated(self, knowledge_base, populated_steps):
        result = StepExtractor(knowledge_base).scan(populated_steps)
        patterns = [pattern for _, pattern in result.declarations]

        assert result.files_scanned == 2
        assert sorted(patterns) == sorted([
            "the login page is displayed",
            "I sign in as {string}",
            "the dashboard is displayed",
            "the cart is empty",
        ])
        assert "an old assertion" not in patterns
        assert "not scanned" not in patterns

    def test_scan_does_not_write(self, knowledge_base, kb_path, populated_steps):
        StepExtractor(knowledge_base).scan(populated_steps)
        assert not kb_path.exists()

    def test_first_declaration_keyword_wins(self, knowledge_base, steps_dir):
        (steps_dir / "a.steps.ts").write_text("When('shared step', async function () {});", encoding="utf-8")
        (steps_dir / "b.steps.ts").write_text("Then('shared step', async function () {});", encoding="utf-8")

        result = StepExtractor(knowledge_base).scan(steps_dir)
        assert result.declarations == [(StepKeyword.WHEN, "shared step")]

    def test_file_without_steps(self, knowledge_base, steps_dir):
        (steps_dir / "empty.steps.ts").write_text("export const nothing = 1;\n", encoding="utf-8")

        result = StepExtractor(knowledge_base).scan(steps_dir)
        assert result.files_scanned == 1
        assert result.declarations == []


class TestExtract:
    """Extraction into the knowledge base."""

    def test_inserts_stub_entries(self, knowledge_base, kb_path, populated_steps):
        result = StepExtractor(knowledge_base).extract(populated_steps)

        stored = json.loads(kb_path.read_text(encoding="utf-8"))
        assert len(result.inserted) == 4
        assert set(stored) == set(result.inserted)
        assert stored["the login page is displayed"] == (
            "Given('the login page is displayed', async function () { /* Existing step logic */ });"
        )

    def test_repeated_extraction_is_a_fixed_point(self, knowledge_base, kb_path, populated_steps):
        extractor = StepExtractor(knowledge_base)
        extractor.extract(populated_steps)
        before = kb_path.read_bytes()

        again = extractor.extract(populated_steps)

        assert again.inserted == []
        assert kb_path.read_bytes() == before

    def test_existing_definitions_are_kept(self, knowledge_base, kb_path, populated_steps):
        kb_path.parent.mkdir(parents=True)
        kb_path.write_text(
            json.dumps({"the cart is empty": "Then('the cart is empty', real implementation);"}),
            encoding="utf-8"
        )

        result = StepExtractor(knowledge_base).extract(populated_steps)
        stored = json.loads(kb_path.read_text(encoding="utf-8"))

        assert "the cart is empty" not in result.inserted
        assert stored["the cart is empty"] == "Then('the cart is empty', real implementation);"

    def test_missing_directory_is_a_no_op(self, knowledge_base, kb_path, tmp_path):
        result = StepExtractor(knowledge_base).extract(tmp_path / "does-not-exist")

        assert result.directory_missing is True
        assert result.inserted == []
        assert not kb_path.exists()

    def test_pattern_with_quote_is_stored_escaped(self, knowledge_base, kb_path, steps_dir):
        (steps_dir / "q.steps.ts").write_text(
            "Then('the user\\'s name is shown', async function () {});",
            encoding="utf-8"
        )

        StepExtractor(knowledge_base).extract(steps_dir)
        stored = json.loads(kb_path.read_text(encoding="utf-8"))

        assert stored["the user's name is shown"].startswith("Then('the user\\'s name is shown',")
