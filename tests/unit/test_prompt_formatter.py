from widgetsmith.generation.prompt_formatter import (
    format_analysis,
    format_page_analysis,
    format_page_info,
    format_page_sources,
    format_unit_info,
    format_unit_sources,
)
from widgetsmith.support.models import PAGE, WIDGET, PageAnalysis, PageTab, Unit, WidgetAnalysis


def make_unit(sources, kind=WIDGET, name="KnownDrugs", **kwargs):
    return Unit(
        kind=kind,
        name=name,
        category="drug",
        root_path="/ws",
        sources=sources,
        source_paths={k: f"/ws/{k}" for k in sources},
        **kwargs,
    )


def test_format_unit_sources_orders_sections():
    unit = make_unit({
        "Table": "table()",
        "KnownDrugs.gql": "query Q { id }",
        "Body": "body()",
        "index": "index()",
    })

    text = format_unit_sources(unit)

    assert text.index("### index.tsx") < text.index("### Body.tsx")
    assert text.index("### Body.tsx") < text.index("### Imported Local Components")
    assert text.index("#### Table.tsx") < text.index("### GraphQL Queries")
    assert "```graphql\nquery Q { id }\n```" in text


def test_format_unit_info_section_id():
    assert "- **Section ID**: knowndrugs" in format_unit_info(make_unit({}))
    assert "- **Section ID**: drugs" in format_unit_info(make_unit({}, declared_id="drugs"))


def test_format_analysis_yes_no():
    analysis = WidgetAnalysis(
        has_table=True,
        has_chart=False,
        has_search=True,
        has_pagination=False,
        has_external_links=False,
        has_downloader=True,
    )

    text = format_analysis(analysis)

    assert '"hasTable": true' in text
    assert "- Table methods: YES" in text
    assert "- Chart methods: NO" in text
    assert "- Download methods: YES" in text


def test_page_sections():
    page = make_unit({"TargetPage": "<Tabs />"}, kind=PAGE, name="TargetPage")
    assert "- **Route:** unknown" in format_page_info(page)
    assert "- **Path:**" not in format_page_info(page)
    assert "- **Path:** /ws" in format_page_info(page, include_path=True)
    assert "### TargetPage\n```tsx\n<Tabs />\n```" in format_page_sources(page)
    assert format_page_sources(make_unit({}, kind=PAGE)) == "No source files available."

    analysis = PageAnalysis(
        has_tabs=True,
        has_external_links=False,
        has_query=True,
        tabs=[PageTab(name="Profile", route="/t", label="Profile")],
        url_params=["ensgId"],
    )
    text = format_page_analysis(analysis)
    assert "- **Has Tabs:** true" in text
    assert '"route": "/t"' in text
    assert "Existing Test IDs" in text
    assert "Existing Test IDs" not in format_page_analysis(analysis, include_test_ids=False)


def test_format_unit_sources_shows_ui_components_separately():
    unit = make_unit({
        "Body": "body()",
        "Table": "table()",
        "ui/OtTable": "otTable()",
        "KnownDrugs.gql": "query Q { id }",
    })

    text = format_unit_sources(unit)

    assert text.index("#### Table.tsx") < text.index("### UI Package Components")
    assert text.index("### UI Package Components") < text.index("### GraphQL Queries")
    assert "#### OtTable\n```typescript\notTable()\n```" in text
    assert "#### ui/OtTable.tsx" not in text
