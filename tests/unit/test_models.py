import pytest

from widgetsmith.support.models import (
    PAGE,
    WIDGET,
    ImportRecord,
    PageAnalysis,
    PageTab,
    TargetPolicy,
    Unit,
    WidgetAnalysis,
)


def test_unit_requires_paths_for_sources():
    with pytest.raises(ValueError):
        Unit(kind=WIDGET, name="Foo", category="target", root_path="/ws", sources={"Body": "x"})


def test_unit_with_sources_returns_copy():
    unit = Unit(
        kind=WIDGET,
        name="Foo",
        category="target",
        root_path="/ws",
        sources={"Body": "a", "Summary": "b"},
        source_paths={"Body": "/ws/Body.tsx", "Summary": "/ws/Summary.tsx"},
    )

    updated = unit.with_sources({"Body": "changed"})

    assert updated.sources == {"Body": "changed", "Summary": "b"}
    assert unit.sources["Body"] == "a"
    assert updated.section_id == "foo"


def test_unit_dict_round_trip_for_pages():
    page = Unit(
        kind=PAGE,
        name="TargetPage",
        category="target",
        root_path="/ws/TargetPage",
        sources={"TargetPage": "x"},
        source_paths={"TargetPage": "/ws/TargetPage/TargetPage.tsx"},
        route="/target/:ensgId",
        tabs=[PageTab(name="Profile", route="/target/:ensgId", label="Profile")],
    )

    data = page.to_dict()

    assert data["type"] == "page"
    assert data["entity"] == "target"
    assert data["sourcePaths"] == {"TargetPage": "/ws/TargetPage/TargetPage.tsx"}
    assert Unit.from_dict(data) == page


def test_import_record_drops_redundant_original_name():
    assert ImportRecord("Link", "ui", original_name="Link").original_name is None
    assert ImportRecord("Table", "ui", original_name="OtTable").original_name == "OtTable"


def test_target_policy_injects():
    assert TargetPolicy(name="Box", test_id_pattern="{id}-box").injects
    assert not TargetPolicy(name="Tooltip", test_id_pattern=None).injects
    assert not TargetPolicy(name="SectionItem", test_id_pattern="{id}-x", has_built_in_test_id=True).injects


def test_widget_analysis_payload_validation():
    payload = {key: False for key in WidgetAnalysis.FLAG_KEYS.values()}
    payload["hasTable"] = True
    payload["customInteractions"] = ["sort", 3, None]

    analysis = WidgetAnalysis.from_payload(payload)

    assert analysis.has_table
    assert analysis.custom_interactions == ["sort", "3"]
    assert WidgetAnalysis.from_payload({"hasTable": True}) is None
    assert WidgetAnalysis.from_payload(["not", "a", "dict"]) is None


def test_widget_analysis_fallback_has_every_flag():
    analysis = WidgetAnalysis.fallback("")
    for attr in WidgetAnalysis.FLAG_KEYS:
        assert getattr(analysis, attr) is False
    assert set(analysis.summary()) == {"hasTable", "hasChart", "hasSearch", "hasPagination", "customInteractions"}


def test_page_analysis_from_payload():
    analysis = PageAnalysis.from_payload({
        "hasTabs": True,
        "hasExternalLinks": False,
        "hasQuery": True,
        "tabs": [{"name": "Profile", "route": "/t"}, "junk"],
    })

    assert analysis.tabs == [PageTab(name="Profile", route="/t", label="Profile")]
    assert PageAnalysis.from_payload({"hasTabs": True}) is None
