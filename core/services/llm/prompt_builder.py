#!/usr/bin/env python3
"""
Prompt Builder for Gherkin Feature and Step Definition Generation

Contract-first prompt architecture:
- SYSTEM prompt: Short, stable role + output contract
- FEATURE prompt: Title, scenario count, dialect rules, reusable steps
- STEP prompt: Gherkin to implement, Playwright/Cucumber rules, and the
  steps that are already implemented and must not be redefined

The knowledge base inventory is rendered into both user prompts so the
generator reuses existing step phrasing instead of inventing duplicates.
"""
from dataclasses import dataclass, field
from typing import List, Optional


# =============================================================================
# DETERMINISTIC PREPROCESSING HELPERS
# =============================================================================

TRUNCATION_MARKER = "…[truncated]"


def safe_truncate(text: str, max_chars: int) -> str:
    """
    Truncate text at a line boundary, never mid-word.
    Appends "…[truncated]" when truncation occurs.
    """
    if not text or len(text) <= max_chars:
        return text

    truncate_at = max_chars - len(TRUNCATION_MARKER) - 1
    if truncate_at <= 0:
        return TRUNCATION_MARKER

    cut = text.rfind("\n", 0, truncate_at)
    if cut == -1:
        cut = text.rfind(" ", 0, truncate_at)
    if cut <= 0:
        cut = truncate_at

    return text[:cut].rstrip() + "\n" + TRUNCATION_MARKER


def format_inventory(patterns: List[str], max_steps: int) -> str:
    """Render known step patterns as a bullet list, capped at ``max_steps``."""
    if not patterns:
        return ""
    shown = patterns[:max_steps] if max_steps > 0 else []
    lines = [f"- {pattern}" for pattern in shown]
    hidden = len(patterns) - len(shown)
    if hidden > 0:
        lines.append(f"- …and {hidden} more existing steps")
    return "\n".join(lines)


# =============================================================================
# PROMPT CONTEXT
# =============================================================================

@dataclass
class PromptContext:
    """Context for building generation prompts."""
    title: str
    tag: str
    scenario_count: int = 2

    # Step patterns already implemented in the suite
    existing_steps: List[str] = field(default_factory=list)
    max_inventory_steps: int = 200

    # Caps the Gherkin embedded in the step prompt
    max_feature_chars: int = 12000


# =============================================================================
# PROMPT BUILDER
# =============================================================================

class GherkinPromptBuilder:
    """
    Builds prompts for feature file and step definition generation.

    Architecture:
    - SYSTEM prompt: stable role + output contract
    - USER prompts: one per generation, carrying the step inventory
    """

    SYSTEM_PROMPT = """You are an expert in BDD and Gherkin syntax.

## OUTPUT CONTRACT
- Return ONLY the requested artifact: Gherkin for feature requests, TypeScript for step definition requests.
- No explanations, no notes, no markdown commentary.
- Reuse the wording of existing steps exactly whenever a step with the same meaning is needed."""

    def __init__(self, context: PromptContext):
        self.ctx = context

    def build_system_prompt(self) -> str:
        """Stable system prompt shared by both generations."""
        return self.SYSTEM_PROMPT

    def build_feature_prompt(self) -> str:
        """User prompt requesting the feature file body."""
        sections = [
            f'Generate a Cucumber BDD feature file titled "{self.ctx.title}" '
            f'with {self.ctx.scenario_count} scenarios.',
            self._build_dialect_rules(),
        ]
        inventory = self._build_inventory_section(
            "## EXISTING STEPS (reuse this exact wording where it fits)"
        )
        if inventory:
            sections.append(inventory)
        return "\n\n".join(sections)

    def build_step_definitions_prompt(self, gherkin_content: str) -> str:
        """User prompt requesting step definitions for ``gherkin_content``."""
        gherkin = safe_truncate(gherkin_content, self.ctx.max_feature_chars)
        sections = [
            "Convert the following **Gherkin scenarios** into **TypeScript Cucumber step definitions** using Playwright:",
            gherkin,
            self._build_step_rules(),
        ]
        inventory = self._build_inventory_section(
            "## ALREADY IMPLEMENTED (do NOT define these steps again)"
        )
        if inventory:
            sections.append(inventory)
        sections.append(self._build_step_example())
        sections.append(
            "**IMPORTANT:** Only output valid TypeScript code. "
            "Do not include explanations, comments, or notes."
        )
        return "\n\n".join(sections)

    def _build_dialect_rules(self) -> str:
        return f"""## RULES
1. Write steps in declarative style: describe what the user sees, not how ("the login page is displayed", not "I go to the login page").
2. Tag the feature and scenarios with lowerCamelCase tags only (e.g. @{self.ctx.tag}); no underscores, no hyphens.
3. Use a Scenario Outline with an Examples table for data-driven scenarios; every <placeholder> must be a column of that Examples table.
4. Use Given for preconditions, When for actions, Then for outcomes, And to continue the previous step type.
5. Do not include a "Feature:" heading; it is added automatically."""

    def _build_step_rules(self) -> str:
        return """**Rules for Step Definitions:**
1. **Use Playwright's Built-in Locators:**
   - Use **locator()** instead of $eval.
   - Example: `await this.page.locator('#errorMessage').textContent();`

2. **Ensure Implicit Waits:**
   - Use **waitFor({ state: 'visible' })** before interacting with elements.
   - Example: `await inputField.waitFor({ state: 'visible' });`

3. **Use Dynamic Selectors for Flexibility:**
   - **Inputs:** `input[name="{fieldName}"], input[placeholder="{fieldName}"], input:has-text("{fieldName}")`
   - **Buttons:** `button:has-text("{buttonName}"), [aria-label="{buttonName}"]`
   - **Links:** `a:has-text("{linkText}")`

4. **Ensure Step Definitions are in Declarative Style:**
   - Focus on **what the step does, not how it works internally.**
   - Keep logic **modular and reusable**.

5. **Use 'this.page' instead of importing Playwright's page:**
   - Replace **'await page.'** with **'await this.page.'** for Cucumber compatibility.

6. **Ensure Complete Test Coverage:**
   - Every 'Then' step in the feature file must have a corresponding step definition, unless it is already implemented.

7. **Handle 'And' Steps:**
   - Replace 'And' with the previous step keyword ('Given', 'When', or 'Then') for Cucumber TypeScript compatibility."""

    @staticmethod
    def _build_step_example() -> str:
        return """**Output Format Example (TypeScript Only):**
```typescript
Then('I should see an error message {string}', async function (message: string) {
    const errorMessage = this.page.locator('#errorMessage');
    await expect(errorMessage).toHaveText(message);
});

When('I click the {string} button', async function (buttonName: string) {
    const button = this.page.getByRole('button', { name: buttonName });
    await button.click();
});

Given('I fill in {string} with {string}', async function (fieldName: string, value: string) {
    const input = this.page.getByPlaceholder(fieldName);
    await input.fill(value);
});
```"""

    def _build_inventory_section(self, heading: str) -> Optional[str]:
        inventory = format_inventory(self.ctx.existing_steps, self.ctx.max_inventory_steps)
        if not inventory:
            return None
        return f"{heading}\n{inventory}"
