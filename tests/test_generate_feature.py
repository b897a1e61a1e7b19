"""Tests for the feature generation use case and the command-line entry points."""
import json

import pytest

import extract_steps
import generate_feature
import lint_gherkin
from core.application.context import GenerationContext
from core.application.use_cases import GenerateFeatureUseCase
from core.config import AppConfig, GenerationConfig, LLMSettings, LoggingConfig, PathsConfig
from core.domain.errors import GenerationFailure
from tests.conftest import FakeProvider

RAW_FEATURE = """```gherkin
@login
Feature: Login

  Scenario: Valid credentials
    Given I go to the login page
    When I sign in as "alice"
    Then the dashboard is displayed
```"""

RAW_STEPS = """```typescript
import { page } from 'playwright';

Given('the login page is displayed', async function () {
  await page.goto('/login');
});

When('I sign in as {string}', async function (user: string) {
  await this.page.locator('#user').fill(user);
});

Then('the dashboard is displayed', async function () {
  await expect(page.locator('#dashboard')).toBeVisible();
});

And('the welcome banner is shown', async function () {
  await this.page.locator('#welcome').waitFor({ state: 'visible' });
});
```
Please note that selectors may need adjusting."""


@pytest.fixture
def config(tmp_path):
    return AppConfig(
        llm=LLMSettings(),
        generation=GenerationConfig(),
        paths=PathsConfig(
            features_dir=str(tmp_path / "features"),
            steps_dir=str(tmp_path / "steps"),
            knowledge_base_path=str(tmp_path / "ai" / "knowledgeBase.json"),
        ),
        logging=LoggingConfig(),
    )


def _use_case(config, responses):
    provider = FakeProvider(responses)
    context = GenerationContext.from_config(config, provider=provider)
    return GenerateFeatureUseCase(context), provider


def _kb(config):
    with open(config.paths.knowledge_base_path, encoding="utf-8") as f:
        return json.load(f)


class TestGenerateFeatureUseCase:

    def test_generates_and_writes_both_files(self, config, tmp_path):
        use_case, provider = _use_case(config, [RAW_FEATURE, RAW_STEPS])

        result = use_case.execute("User Login Flow", 2)

        feature_file = tmp_path / "features" / "UserLoginFlow.feature"
        steps_file = tmp_path / "steps" / "userLoginFlow.steps.ts"
        assert result.feature_path == str(feature_file)
        assert result.steps_path == str(steps_file)

        feature_text = feature_file.read_text(encoding="utf-8")
        assert feature_text.startswith("@userLoginFlow\nFeature: User Login Flow\n\n")
        assert "Given the login page is displayed" in feature_text
        assert "@login\n" not in feature_text

        steps_text = steps_file.read_text(encoding="utf-8")
        assert "import { page }" not in steps_text
        assert "await this.page.goto('/login');" in steps_text
        assert "Then('the welcome banner is shown'" in steps_text
        assert "Please note" not in steps_text
        assert "```" not in steps_text

    def test_sampling_parameters(self, config):
        use_case, provider = _use_case(config, [RAW_FEATURE, RAW_STEPS])
        use_case.execute("User Login Flow", 3)

        feature_call, steps_call = provider.calls
        assert (feature_call["temperature"], feature_call["max_tokens"]) == (0.3, 1500)
        assert (steps_call["temperature"], steps_call["max_tokens"]) == (0.2, 2000)
        assert "with 3 scenarios" in feature_call["prompt"]
        assert "@userLoginFlow\nFeature: User Login Flow" in steps_call["prompt"]
        assert feature_call["system_prompt"].startswith("You are an expert in BDD and Gherkin syntax.")

    def test_new_patterns_recorded(self, config):
        use_case, _ = _use_case(config, [RAW_FEATURE, RAW_STEPS])

        result = use_case.execute("User Login Flow", 2)

        assert result.new_patterns == [
            "the login page is displayed",
            "I sign in as {string}",
            "the dashboard is displayed",
            "the welcome banner is shown",
        ]
        stored = _kb(config)
        assert stored["the dashboard is displayed"].startswith("Then('the dashboard is displayed'")

    def test_known_steps_offered_and_reused(self, config, tmp_path):
        kb_file = tmp_path / "ai" / "knowledgeBase.json"
        kb_file.parent.mkdir(parents=True)
        kb_file.write_text(json.dumps({"the login page is displayed": "ORIGINAL"}), encoding="utf-8")
        use_case, provider = _use_case(config, [RAW_FEATURE, RAW_STEPS])

        result = use_case.execute("User Login Flow", 2)

        assert "- the login page is displayed" in provider.calls[0]["prompt"]
        assert "ALREADY IMPLEMENTED" in provider.calls[1]["prompt"]
        assert "the login page is displayed" not in result.new_patterns
        assert _kb(config)["the login page is displayed"] == "ORIGINAL"

    @pytest.mark.parametrize("title, count", [
        ("", 2),
        ("   ", 2),
        ("!!!", 2),
        ("3D printing", 2),
        ("  42 ", 2),
        ("Login", 1),
        ("Login", 7),
    ])
    def test_invalid_requests_rejected_before_generation(self, config, title, count):
        use_case, provider = _use_case(config, [RAW_FEATURE, RAW_STEPS])

        with pytest.raises(ValueError):
            use_case.execute(title, count)
        assert provider.calls == []

    def test_digits_after_first_word_are_allowed(self, config):
        use_case, _ = _use_case(config, [])

        assert use_case.validate("Printing in 3D", 2) == "Printing in 3D"

    def test_provider_failure_writes_nothing(self, config, tmp_path):
        use_case, _ = _use_case(config, [RAW_FEATURE, GenerationFailure("timeout", provider="fake")])

        with pytest.raises(GenerationFailure):
            use_case.execute("User Login Flow", 2)

        assert not (tmp_path / "features").exists()
        assert not (tmp_path / "steps").exists()
        assert not (tmp_path / "ai" / "knowledgeBase.json").exists()

    @pytest.mark.parametrize("responses", [
        ["   ", RAW_STEPS],
        [RAW_FEATURE, ""],
        [RAW_FEATURE, "```typescript\n```"],
    ])
    def test_empty_payload_is_a_failure(self, config, tmp_path, responses):
        use_case, _ = _use_case(config, responses)

        with pytest.raises(GenerationFailure):
            use_case.execute("User Login Flow", 2)
        assert not (tmp_path / "features").exists()

    def test_bootstrap_seeds_knowledge_base(self, config, tmp_path):
        steps = tmp_path / "steps"
        steps.mkdir()
        (steps / "common.steps.ts").write_text(
            "Given('the home page is displayed', async function () {});",
            encoding="utf-8"
        )
        use_case, _ = _use_case(config, [])

        result = use_case.bootstrap()

        assert result.inserted == ["the home page is displayed"]
        assert "the home page is displayed" in _kb(config)


@pytest.fixture
def project_env(monkeypatch, tmp_path):
    """Point the CLIs at a throwaway project layout."""
    monkeypatch.chdir(tmp_path)
    for name, value in {
        "FEATURES_DIR": str(tmp_path / "features"),
        "STEPS_DIR": str(tmp_path / "steps"),
        "KNOWLEDGE_BASE_PATH": str(tmp_path / "ai" / "knowledgeBase.json"),
        "LLM_PROVIDER": "openai",
        "OPENAI_API_KEY": "sk-test",
    }.items():
        monkeypatch.setenv(name, value)
    return tmp_path


class TestGenerateCli:

    def _patch_provider(self, monkeypatch, responses):
        real_from_config = GenerationContext.from_config
        provider = FakeProvider(responses)
        monkeypatch.setattr(
            GenerationContext,
            "from_config",
            staticmethod(lambda config: real_from_config(config, provider=provider))
        )
        return provider

    def test_success(self, project_env, monkeypatch, capsys):
        self._patch_provider(monkeypatch, [RAW_FEATURE, RAW_STEPS])

        exit_code = generate_feature.main(["User Login Flow", "--scenarios", "2"])

        assert exit_code == 0
        assert (project_env / "features" / "UserLoginFlow.feature").exists()
        assert "@userLoginFlow" in capsys.readouterr().out

    def test_generation_failure_exit_code(self, project_env, monkeypatch, capsys):
        self._patch_provider(monkeypatch, [GenerationFailure("service down", provider="fake")])

        assert generate_feature.main(["User Login Flow"]) == 1
        assert "service down" in capsys.readouterr().out

    def test_invalid_scenario_count(self, project_env, monkeypatch):
        provider = self._patch_provider(monkeypatch, [RAW_FEATURE, RAW_STEPS])

        assert generate_feature.main(["Login", "--scenarios", "9"]) == 1
        assert provider.calls == []

    def test_interactive_prompts(self, project_env, monkeypatch):
        self._patch_provider(monkeypatch, [RAW_FEATURE, RAW_STEPS])
        answers = iter(["Checkout", "3"])
        monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))

        assert generate_feature.main([]) == 0
        assert (project_env / "features" / "Checkout.feature").exists()


class TestScriptClis:

    def test_extract_steps(self, project_env, capsys):
        steps = project_env / "steps"
        steps.mkdir()
        (steps / "a.steps.ts").write_text("Then('it works', async function () {});", encoding="utf-8")

        assert extract_steps.main([]) == 0
        assert "+ it works" in capsys.readouterr().out

        assert extract_steps.main([]) == 0
        assert "already up to date" in capsys.readouterr().out

    def test_extract_missing_directory(self, project_env):
        assert extract_steps.main(["--steps-dir", str(project_env / "nope")]) == 0
        assert not (project_env / "ai" / "knowledgeBase.json").exists()

    def test_lint_exit_codes(self, project_env, capsys):
        features = project_env / "features"
        features.mkdir()
        (features / "ok.feature").write_text("@ok\nFeature: Ok\n", encoding="utf-8")
        assert lint_gherkin.main([]) == 0

        (features / "bad.feature").write_text("@Bad_Tag\nFeature: Bad\n", encoding="utf-8")
        assert lint_gherkin.main([]) == 1
        assert "bad.feature:1" in capsys.readouterr().out

    def test_lint_missing_directory(self, project_env):
        assert lint_gherkin.main(["--features-dir", str(project_env / "missing")]) == 2
