"""
Data models for WidgetSmith.
"""
import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

WIDGET = "widget"
PAGE = "page"


@dataclass
class FileChanges:
    """Repository-relative paths grouped by diff status."""
    added: list[str] = field(default_factory=list)
    modified: list[str] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)
    renamed: list[str] = field(default_factory=list)


@dataclass
class PageTab:
    """A tab/route exposed by a page."""
    name: str
    route: str
    label: str


@dataclass(frozen=True)
class Unit:
    """
    A detected widget or page awaiting test generation.

    Pipeline stages never mutate a Unit; they build a new one with
    `with_sources`.
    """
    kind: str  # "widget" or "page"
    name: str
    category: str  # entity for widgets, entity type for pages
    root_path: str
    declared_id: str | None = None
    display_name: str | None = None
    sources: dict[str, str] = field(default_factory=dict)
    source_paths: dict[str, str] = field(default_factory=dict)
    route: str | None = None
    tabs: list[PageTab] = field(default_factory=list)

    def __post_init__(self):
        missing = [key for key in self.sources if key not in self.source_paths]
        if missing:
            raise ValueError(f"Sources without a path in unit {self.name}: {', '.join(missing)}")

    @property
    def section_id(self) -> str:
        return self.declared_id or self.name.lower()

    def with_sources(self, updates: dict[str, str]) -> "Unit":
        """Return a copy with some sources replaced."""
        return replace(self, sources={**self.sources, **updates})

    def to_dict(self) -> dict[str, Any]:
        data = {
            "type": self.kind,
            "name": self.name,
            "entity": self.category,
            "path": self.root_path,
            "id": self.declared_id,
            "displayName": self.display_name,
            "sources": dict(self.sources),
            "sourcePaths": dict(self.source_paths),
        }
        if self.kind == PAGE:
            data["route"] = self.route
            data["tabs"] = [
                {"name": t.name, "route": t.route, "label": t.label} for t in self.tabs
            ]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Unit":
        return cls(
            kind=data.get("type", WIDGET),
            name=data["name"],
            category=data.get("entity") or data.get("entityType") or "",
            root_path=data.get("path", ""),
            declared_id=data.get("id"),
            display_name=data.get("displayName"),
            sources=dict(data.get("sources") or {}),
            source_paths=dict(data.get("sourcePaths") or {}),
            route=data.get("route"),
            tabs=[PageTab(**t) for t in data.get("tabs") or []],
        )


@dataclass
class ImportRecord:
    """One import binding extracted from a source file."""
    local_name: str
    source: str
    original_name: str | None = None
    is_default: bool = False
    is_namespace: bool = False

    def __post_init__(self):
        if self.original_name == self.local_name:
            self.original_name = None


@dataclass
class ImportBucket:
    """Imports of one file partitioned by origin."""
    ui_components: list[ImportRecord] = field(default_factory=list)
    local_components: list[ImportRecord] = field(default_factory=list)
    other_imports: list[ImportRecord] = field(default_factory=list)

    @property
    def all(self) -> list[ImportRecord]:
        return self.ui_components + self.local_components + self.other_imports


@dataclass
class TargetPolicy:
    """How a tag/component name is treated when scanning for missing test hooks."""
    name: str
    test_id_pattern: str | None  # None suppresses injection
    only_external: bool = False
    skip_unless_special: bool = False
    has_built_in_test_id: bool = False
    is_non_rendering: bool = False
    source: str | None = None

    @property
    def injects(self) -> bool:
        return (
            self.test_id_pattern is not None
            and not self.has_built_in_test_id
            and not self.is_non_rendering
        )


@dataclass
class TestHookSuggestion:
    """One proposed test-hook insertion."""
    __test__ = False

    element_name: str
    test_id: str
    line: int
    column: int
    element: Any = field(default=None, repr=False, compare=False)


@dataclass
class TransformResult:
    """Outcome of running the transformer over one file."""
    code: str
    suggestions: list[TestHookSuggestion]
    applied_count: int
    was_modified: bool


@dataclass
class FileHookResult:
    """Per-file report of a unit-level injection pass."""
    name: str
    path: str
    suggestions: int = 0
    applied: int = 0
    modified: bool = False


@dataclass
class TestHookSummary:
    """Aggregated test-hook injection counts for one unit."""
    __test__ = False

    applied: int = 0
    failed: int = 0
    modified_files: list[str] = field(default_factory=list)
    method: str = "none"  # "ast" or "none"


def _flag(payload: dict, key: str) -> bool | None:
    value = payload.get(key)
    return value if isinstance(value, bool) else None


def _strings(payload: dict, key: str) -> list[str]:
    value = payload.get(key)
    if not isinstance(value, list):
        return []
    return [str(v) for v in value if isinstance(v, (str, int, float))]


@dataclass
class WidgetAnalysis:
    """Structured analysis of a widget's sources."""
    has_table: bool
    has_chart: bool
    has_search: bool
    has_pagination: bool
    has_external_links: bool
    has_downloader: bool
    ui_components: list[str] = field(default_factory=list)
    custom_interactions: list[str] = field(default_factory=list)
    existing_test_ids: list[str] = field(default_factory=list)
    reasoning: str = ""

    FLAG_KEYS = {
        "has_table": "hasTable",
        "has_chart": "hasChart",
        "has_search": "hasSearch",
        "has_pagination": "hasPagination",
        "has_external_links": "hasExternalLinks",
        "has_downloader": "hasDownloader",
    }

    @classmethod
    def from_payload(cls, payload: Any) -> "WidgetAnalysis | None":
        """Validate a decoded JSON payload; None if any flag is missing or mistyped."""
        if not isinstance(payload, dict):
            return None
        flags = {}
        for attr, key in cls.FLAG_KEYS.items():
            value = _flag(payload, key)
            if value is None:
                return None
            flags[attr] = value
        reasoning = payload.get("reasoning")
        return cls(
            **flags,
            ui_components=_strings(payload, "uiComponents"),
            custom_interactions=_strings(payload, "customInteractions"),
            existing_test_ids=_strings(payload, "existingTestIds"),
            reasoning=reasoning if isinstance(reasoning, str) else "",
        )

    @classmethod
    def fallback(cls, text: str) -> "WidgetAnalysis":
        """Keyword-matching analysis used when the generated payload is unusable."""
        return cls(
            has_table="OtTable" in text or "<Table" in text,
            has_chart="Chart" in text or "Plot" in text,
            has_search="showGlobalFilter" in text or "Search" in text,
            has_pagination="pagination" in text,
            has_external_links="Link external" in text,
            has_downloader="dataDownloader" in text,
            reasoning="Fallback analysis based on keyword matching",
        )

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"uiComponents": self.ui_components}
        for attr, key in self.FLAG_KEYS.items():
            payload[key] = getattr(self, attr)
        payload["customInteractions"] = self.custom_interactions
        payload["existingTestIds"] = self.existing_test_ids
        payload["reasoning"] = self.reasoning
        return payload

    def summary(self) -> dict[str, Any]:
        return {
            "hasTable": self.has_table,
            "hasChart": self.has_chart,
            "hasSearch": self.has_search,
            "hasPagination": self.has_pagination,
            "customInteractions": self.custom_interactions,
        }


@dataclass
class PageAnalysis:
    """Structured analysis of a page's sources."""
    has_tabs: bool
    has_external_links: bool
    has_query: bool
    tabs: list[PageTab] = field(default_factory=list)
    components: list[str] = field(default_factory=list)
    url_params: list[str] = field(default_factory=list)
    header_elements: list[str] = field(default_factory=list)
    route_pattern: str = ""
    entity_type: str = ""
    existing_test_ids: list[str] = field(default_factory=list)
    reasoning: str = ""

    @classmethod
    def from_payload(cls, payload: Any) -> "PageAnalysis | None":
        if not isinstance(payload, dict):
            return None
        has_tabs = _flag(payload, "hasTabs")
        has_links = _flag(payload, "hasExternalLinks")
        has_query = _flag(payload, "hasQuery")
        if has_tabs is None or has_links is None or has_query is None:
            return None

        tabs = []
        for raw in payload.get("tabs") or []:
            if isinstance(raw, dict) and isinstance(raw.get("name"), str):
                tabs.append(PageTab(
                    name=raw["name"],
                    route=str(raw.get("route", "")),
                    label=str(raw.get("label", raw["name"])),
                ))

        def text(key: str) -> str:
            value = payload.get(key)
            return value if isinstance(value, str) else ""

        return cls(
            has_tabs=has_tabs,
            has_external_links=has_links,
            has_query=has_query,
            tabs=tabs,
            components=_strings(payload, "components"),
            url_params=_strings(payload, "urlParams"),
            header_elements=_strings(payload, "headerElements"),
            route_pattern=text("routePattern"),
            entity_type=text("entityType"),
            existing_test_ids=_strings(payload, "existingTestIds"),
            reasoning=text("reasoning"),
        )

    @classmethod
    def fallback(cls, text: str, page: Unit) -> "PageAnalysis":
        url_params = []
        for match in re.finditer(r"\{([^}]*)\}\s*=\s*useParams", text):
            for name in match.group(1).split(","):
                name = name.split(":")[0].strip()
                if name and name not in url_params:
                    url_params.append(name)
        return cls(
            has_tabs="<Tabs" in text or "<Tab " in text,
            has_external_links="Link external" in text or "ExternalLink" in text,
            has_query="useQuery" in text,
            tabs=list(page.tabs),
            url_params=url_params,
            route_pattern=page.route or "",
            entity_type=page.category,
            reasoning="Fallback analysis based on keyword matching",
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "components": self.components,
            "hasTabs": self.has_tabs,
            "tabs": [{"name": t.name, "route": t.route, "label": t.label} for t in self.tabs],
            "hasExternalLinks": self.has_external_links,
            "hasQuery": self.has_query,
            "urlParams": self.url_params,
            "headerElements": self.header_elements,
            "routePattern": self.route_pattern,
            "entityType": self.entity_type,
            "existingTestIds": self.existing_test_ids,
            "reasoning": self.reasoning,
        }

    def summary(self) -> dict[str, Any]:
        return {
            "hasTabs": self.has_tabs,
            "tabs": [t.name for t in self.tabs],
            "hasExternalLinks": self.has_external_links,
            "urlParams": self.url_params,
        }


@dataclass
class Examples:
    """Few-shot reference files handed to the generation steps."""
    interactor: str = ""
    test: str = ""
    fixtures: str = ""


@dataclass
class ArtifactPaths:
    """Conventional output locations of a unit's generated files."""
    interactor_path: Path
    test_path: Path


@dataclass
class GenerationResult:
    """Terminal record of one unit's pipeline run."""
    unit: str
    category: str
    kind: str = WIDGET
    success: bool = False
    error: str | None = None
    analysis: dict[str, Any] = field(default_factory=dict)
    test_hooks: TestHookSummary | None = None
    interactor_path: Path | None = None
    test_path: Path | None = None


@dataclass
class LLMConfig:
    """Configuration for the external generation client."""
    model: str = "claude-sonnet-4-20250514"
    max_tokens: int = 4096
    analysis_max_tokens: int = 2048
    temperature: float = 0.2
    api_key_env_var: str = "ANTHROPIC_API_KEY"


@dataclass
class DetectionResult:
    """Units found in one detection pass."""
    widgets: list[Unit] = field(default_factory=list)
    pages: list[Unit] = field(default_factory=list)
    added_files: list[str] = field(default_factory=list)

    @property
    def units(self) -> list[Unit]:
        return self.widgets + self.pages
