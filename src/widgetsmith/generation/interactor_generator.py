"""
GENERATE_INTERACTOR step: page-object classes for widgets and pages.
"""
from widgetsmith.generation.llm_client import call_llm, extract_code_block
from widgetsmith.generation.prompt_formatter import (
    format_analysis,
    format_page_analysis,
    format_page_info,
    format_unit_info,
    format_unit_sources,
)
from widgetsmith.support.models import Examples, LLMConfig, PageAnalysis, Unit, WidgetAnalysis

INTERACTOR_SYSTEM_PROMPT = """You are an expert TypeScript developer specializing in Playwright Page Object Model (POM) patterns.
Generate clean, well-documented interactor classes for UI testing.

CRITICAL RULES:
- ONLY generate methods for UI elements that ACTUALLY EXIST in the widget
- If there is NO table, do NOT generate table methods
- If there is NO search, do NOT generate search methods
- Base your interactor ONLY on the provided analysis"""

PAGE_INTERACTOR_SYSTEM_PROMPT = """You are an expert at generating Playwright Page Object Model (POM) classes.
Generate clean, well-documented TypeScript code for page interactors.
Follow the existing patterns and conventions in the codebase.
Use proper Playwright locators and methods."""

DEFAULT_PAGE_INTERACTOR_EXAMPLE = """import type { Locator, Page } from "@playwright/test";

export class ExamplePage {
  page: Page;

  constructor(page: Page) {
    this.page = page;
  }

  async goToPage(id: string): Promise<void> {
    await this.page.goto(`/example/${id}`);
    await this.page.waitForLoadState("networkidle");
  }

  getHeader(): Locator {
    return this.page.locator("[data-testid='header']");
  }

  async waitForPageLoad(): Promise<void> {
    await this.page.waitForLoadState("networkidle");
  }
}"""


def build_interactor_prompt(widget: Unit, analysis: WidgetAnalysis, examples: Examples) -> str:
    return f"""## Task
Generate a Playwright interactor class. ONLY include methods for elements that exist.

{format_unit_info(widget)}

{format_analysis(analysis)}

## Widget Source Code
{format_unit_sources(widget)}

## Example Interactor (reference only)
```typescript
{examples.interactor}
```

Generate the TypeScript interactor class:"""


def build_page_interactor_prompt(page: Unit, analysis: PageAnalysis, examples: Examples) -> str:
    example = examples.interactor or DEFAULT_PAGE_INTERACTOR_EXAMPLE
    return f"""## Task
Generate a Playwright Page Object Model (POM) interactor class for the following page.

{format_page_info(page)}

{format_page_analysis(analysis)}

## Example Interactor (follow this pattern)
```typescript
{example}
```

## Requirements
1. Create a class named `{page.name}` (e.g., TargetPage, DiseasePage)
2. Include navigation methods (goTo{{PageName}})
3. Include tab navigation methods if page has tabs
4. Include methods for external links if present
5. Include methods for header elements
6. Include waitForPageLoad and isPageLoaded methods
7. Use proper TypeScript types
8. Add JSDoc comments for all methods
9. Use data-testid selectors when available, fall back to role/text selectors
10. Return Locator objects for element getters, use async methods for actions

## Output
Generate ONLY the TypeScript code, no explanations:"""


def generate_interactor(widget: Unit, analysis: WidgetAnalysis, config: LLMConfig, examples: Examples) -> str:
    """Generate the interactor class for a widget."""
    response = call_llm(
        INTERACTOR_SYSTEM_PROMPT,
        build_interactor_prompt(widget, analysis, examples),
        config,
    )
    return extract_code_block(response, "typescript")


def generate_page_interactor(page: Unit, analysis: PageAnalysis, config: LLMConfig, examples: Examples) -> str:
    response = call_llm(
        PAGE_INTERACTOR_SYSTEM_PROMPT,
        build_page_interactor_prompt(page, analysis, examples),
        config,
    )
    return extract_code_block(response, "typescript")
