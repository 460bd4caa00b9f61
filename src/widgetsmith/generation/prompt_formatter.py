"""
Prompt sections shared by the analysis and generation steps.
"""
import json

from widgetsmith.core.source_reader import MAIN_FILES, QUERY_EXTENSION, UI_SOURCE_PREFIX, is_ui_source
from widgetsmith.support.models import PageAnalysis, Unit, WidgetAnalysis


def _fence(code: str, language: str) -> str:
    return f"```{language}\n{code}\n```"


def format_unit_sources(unit: Unit) -> str:
    """
    Main files first, then imported local components, then shared UI
    package components, then GraphQL queries.
    """
    sources = unit.sources
    parts = []

    for name in MAIN_FILES:
        if name in sources:
            parts.append(f"### {name}.tsx\n{_fence(sources[name], 'typescript')}\n\n")

    components = [
        k for k in sources
        if k not in MAIN_FILES and not k.endswith(QUERY_EXTENSION) and not is_ui_source(k)
    ]
    if components:
        parts.append("### Imported Local Components\n\n")
        for name in components:
            parts.append(f"#### {name}.tsx\n{_fence(sources[name], 'typescript')}\n\n")

    ui_components = [k for k in sources if is_ui_source(k)]
    if ui_components:
        parts.append("### UI Package Components\n\n")
        for name in ui_components:
            parts.append(f"#### {name[len(UI_SOURCE_PREFIX):]}\n{_fence(sources[name], 'typescript')}\n\n")

    queries = [k for k in sources if k.endswith(QUERY_EXTENSION)]
    if queries:
        parts.append("### GraphQL Queries\n\n")
        for name in queries:
            parts.append(f"#### {name}\n{_fence(sources[name], 'graphql')}\n\n")

    return "".join(parts)


def format_unit_info(unit: Unit) -> str:
    return (
        "## Widget Information\n"
        f"- **Name**: {unit.name}\n"
        f"- **Entity**: {unit.category}\n"
        f"- **Section ID**: {unit.section_id}"
    )


def _yes_no(flag: bool) -> str:
    return "YES" if flag else "NO"


def format_analysis(analysis: WidgetAnalysis) -> str:
    return (
        "## Widget Analysis\n"
        f"{_fence(json.dumps(analysis.to_payload(), indent=2), 'json')}\n\n"
        "## What to include based on analysis:\n"
        f"- Table methods: {_yes_no(analysis.has_table)}\n"
        f"- Search methods: {_yes_no(analysis.has_search)}\n"
        f"- Pagination methods: {_yes_no(analysis.has_pagination)}\n"
        f"- Chart methods: {_yes_no(analysis.has_chart)}\n"
        f"- External link methods: {_yes_no(analysis.has_external_links)}\n"
        f"- Download methods: {_yes_no(analysis.has_downloader)}"
    )


def format_page_sources(page: Unit) -> str:
    if not page.sources:
        return "No source files available."
    return "".join(
        f"### {name}\n{_fence(code, 'tsx')}\n\n" for name, code in page.sources.items()
    )


def format_page_info(page: Unit, include_path: bool = False) -> str:
    lines = ["## Page Information", f"- **Name:** {page.name}"]
    if include_path:
        lines.append(f"- **Path:** {page.root_path}")
    lines.append(f"- **Route:** {page.route or 'unknown'}")
    lines.append(f"- **Entity Type:** {page.category or 'unknown'}")
    return "\n".join(lines)


def format_page_analysis(analysis: PageAnalysis, include_test_ids: bool = True) -> str:
    payload = analysis.to_payload()
    lines = [
        "## Analysis Results",
        f"- **Has Tabs:** {json.dumps(analysis.has_tabs)}",
        f"- **Tabs:** {json.dumps(payload['tabs'])}",
        f"- **Has External Links:** {json.dumps(analysis.has_external_links)}",
        f"- **Has Query:** {json.dumps(analysis.has_query)}",
        f"- **URL Parameters:** {json.dumps(analysis.url_params)}",
        f"- **Header Elements:** {json.dumps(analysis.header_elements)}",
    ]
    if include_test_ids:
        lines.append(f"- **Existing Test IDs:** {json.dumps(analysis.existing_test_ids)}")
    return "\n".join(lines)
