"""
ANALYZE step: ask the generation service what a widget or page contains.
"""
from widgetsmith.generation.llm_client import call_llm, extract_json
from widgetsmith.generation.prompt_formatter import format_page_info, format_page_sources, format_unit_info, format_unit_sources
from widgetsmith.support.models import LLMConfig, PageAnalysis, Unit, WidgetAnalysis

ANALYSIS_SYSTEM_PROMPT = """You are an expert code analyst specializing in React components and UI testing.
Your task is to carefully analyze React component code and identify exactly what UI elements are present.
Be precise and thorough. Do NOT assume elements exist if they are not explicitly in the code.
IMPORTANT: Analyze ALL provided source files including imported local components."""

PAGE_ANALYSIS_SYSTEM_PROMPT = """You are an expert at analyzing React page components for test generation.
Your task is to analyze page source code and identify:
1. Navigation patterns (tabs, routes)
2. External links
3. GraphQL queries
4. URL parameters
5. Header elements
6. Existing data-testid attributes

Be precise and thorough in your analysis."""


def build_widget_prompt(widget: Unit) -> str:
    return f"""## Task
Carefully analyze the following React widget/section code and ALL its imported local components.

{format_unit_info(widget)}

## Widget Source Code
{format_unit_sources(widget)}

## Instructions
Analyze ALL provided source files and output JSON:

```json
{{
  "uiComponents": ["list", "of", "all", "components", "found"],
  "hasTable": true/false,
  "hasChart": true/false,
  "hasSearch": true/false,
  "hasPagination": true/false,
  "hasExternalLinks": true/false,
  "hasDownloader": true/false,
  "customInteractions": ["list", "of", "interactions"],
  "existingTestIds": ["list", "of", "existing", "testids"],
  "reasoning": "Brief explanation of your analysis"
}}
```"""


def build_page_prompt(page: Unit) -> str:
    return f"""## Task
Analyze the following React page component and extract information for test generation.

{format_page_info(page, include_path=True)}

## Page Source Files
{format_page_sources(page)}

## Instructions
Analyze the page code and output JSON:

```json
{{
  "components": ["list", "of", "imported", "components"],
  "hasTabs": true/false,
  "tabs": [
    {{ "name": "Profile", "route": "/target/:id", "label": "Profile" }},
    {{ "name": "Associations", "route": "/target/:id/associations", "label": "Associated diseases" }}
  ],
  "hasExternalLinks": true/false,
  "hasQuery": true/false,
  "urlParams": ["ensgId", "efoId"],
  "headerElements": ["symbol", "name", "external links"],
  "routePattern": "/target/:ensgId",
  "entityType": "target",
  "existingTestIds": ["data-testid-1", "data-testid-2"],
  "reasoning": "Brief explanation of your analysis"
}}
```

Focus on:
1. Tab navigation (look for Tabs, Tab components and Route definitions)
2. External links in the header (identifiers.org, ensembl, uniprot, etc.)
3. GraphQL queries (useQuery imports)
4. URL parameters (useParams)
5. Header content (title, subtitle, external links section)"""


def all_sources_text(unit: Unit) -> str:
    return "\n".join(unit.sources.values())


def analyze_widget(widget: Unit, config: LLMConfig) -> WidgetAnalysis:
    """
    Analyze a widget's sources.

    An unparseable or malformed reply falls back to keyword matching over
    the sources; only client failures propagate.
    """
    response = call_llm(
        ANALYSIS_SYSTEM_PROMPT,
        build_widget_prompt(widget),
        config,
        max_tokens=config.analysis_max_tokens,
    )

    analysis = WidgetAnalysis.from_payload(extract_json(response))
    if analysis is None:
        return WidgetAnalysis.fallback(all_sources_text(widget))
    return analysis


def analyze_page(page: Unit, config: LLMConfig) -> PageAnalysis:
    """Analyze a page's sources, with the same fallback behaviour as widgets."""
    response = call_llm(
        PAGE_ANALYSIS_SYSTEM_PROMPT,
        build_page_prompt(page),
        config,
        max_tokens=config.analysis_max_tokens,
    )

    analysis = PageAnalysis.from_payload(extract_json(response))
    if analysis is None:
        return PageAnalysis.fallback(all_sources_text(page), page)
    return analysis
