"""
Detection of newly added widgets and pages from a list of added files.
"""
import re
from pathlib import Path, PurePosixPath

from widgetsmith.core.element_locator import get_element_name, get_string_attribute
from widgetsmith.core.git_diff import get_changed_files
from widgetsmith.core.source_reader import read_page_sources, read_unit_sources
from widgetsmith.core.syntax_tree import parse_code
from widgetsmith.generation.artifact_writer import derive_artifact_paths
from widgetsmith.support.config import WidgetSmithConfig
from widgetsmith.support.exceptions import SourceParseError
from widgetsmith.support.models import PAGE, WIDGET, DetectionResult, PageTab, Unit

ENTRY_FILES = ("index.ts", "index.tsx")

ID_RE = re.compile(r"""id:\s*['"]([^'"]+)['"]""")
NAME_RE = re.compile(r"""name:\s*['"]([^'"]+)['"]""")
ROUTE_RE = re.compile(r"""path\s*[=:]\s*\{?\s*['"]([^'"]+)['"]""")


def _relative_parts(file_path: str, root: str) -> tuple[str, ...] | None:
    try:
        return PurePosixPath(file_path).relative_to(PurePosixPath(root)).parts
    except ValueError:
        return None


def find_entry_file(unit_path: Path) -> Path | None:
    for name in ENTRY_FILES:
        candidate = unit_path / name
        if candidate.is_file():
            return candidate
    return None


def extract_unit_info(unit_path: Path) -> tuple[str | None, str | None]:
    """
    Read the declared `id: "..."` and `name: "..."` from a unit's entry file.
    """
    entry = find_entry_file(unit_path)
    if entry is None:
        return None, None

    try:
        content = entry.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None, None

    id_match = ID_RE.search(content)
    name_match = NAME_RE.search(content)
    return (
        id_match.group(1) if id_match else None,
        name_match.group(1) if name_match else None,
    )


def parse_widget_path(file_path: str, config: WidgetSmithConfig) -> tuple[str, str, str] | None:
    """
    Split `<sections_root>/<entity>/<Widget>/...` into (entity, name, widget_root).
    Unknown entities and shallow paths give None.
    """
    parts = _relative_parts(file_path, config.sections_root)
    if parts is None or len(parts) < 2:
        return None

    entity, name = parts[0], parts[1]
    if entity not in config.entity_types:
        return None

    return entity, name, str(PurePosixPath(config.sections_root) / entity / name)


def unit_root_for(file_path: str, config: WidgetSmithConfig) -> str | None:
    """Repository-relative root of the widget or page a file belongs to."""
    parsed = parse_widget_path(file_path, config)
    if parsed is not None:
        return parsed[2]

    parts = _relative_parts(file_path, config.pages_root)
    if parts is not None and len(parts) >= 2:
        return str(PurePosixPath(config.pages_root) / parts[0])
    return None


def artifacts_exist(unit: Unit, config: WidgetSmithConfig) -> bool:
    """True if the unit's interactor or spec already exists."""
    paths = derive_artifact_paths(unit, config)
    return paths.interactor_path.exists() or paths.test_path.exists()


def detect_new_widgets(added_files: list[str], config: WidgetSmithConfig) -> list[Unit]:
    """
    Detect widget sections introduced by the added files.
    Widgets that already have generated tests are left out.
    """
    widgets = []
    seen = set()

    for file_path in added_files:
        parsed = parse_widget_path(file_path, config)
        if parsed is None:
            continue

        entity, name, widget_root = parsed
        if widget_root in seen:
            continue
        seen.add(widget_root)

        unit_path = config.resolve(widget_root)
        if find_entry_file(unit_path) is None:
            continue

        declared_id, display_name = extract_unit_info(unit_path)
        sources, source_paths = read_unit_sources(unit_path, config.resolve(config.ui_package_root))

        widget = Unit(
            kind=WIDGET,
            name=name,
            category=entity,
            root_path=str(unit_path),
            declared_id=declared_id,
            display_name=display_name,
            sources=sources,
            source_paths=source_paths,
        )

        if artifacts_exist(widget, config):
            if config.verbose:
                print(f"Skipping {name} ({entity}): tests already exist")
            continue

        widgets.append(widget)

    return widgets


def page_entity_type(page_name: str) -> str:
    """TargetPage -> target."""
    return re.sub(r"page$", "", page_name.lower())


def extract_route(sources: dict[str, str]) -> str | None:
    for name, code in sources.items():
        if name.endswith(".gql"):
            continue
        match = ROUTE_RE.search(code)
        if match:
            return match.group(1)
    return None


def extract_tabs(sources: dict[str, str], source_paths: dict[str, str] | None = None) -> list[PageTab]:
    """
    Collect `<Tab label="..." value="..."/>` (or `to=`) declarations.
    Files that do not parse are skipped.
    """
    tabs = []
    for name, code in sources.items():
        if name.endswith(".gql"):
            continue
        try:
            tree = parse_code(code, (source_paths or {}).get(name, name))
        except SourceParseError:
            continue

        for element in tree.jsx_elements():
            if get_element_name(tree, element) != "Tab":
                continue
            label = get_string_attribute(tree, element, "label")
            route = get_string_attribute(tree, element, "value") or get_string_attribute(tree, element, "to")
            if label and route is not None:
                tabs.append(PageTab(name=label, route=route, label=label))

    return tabs


def detect_new_pages(added_files: list[str], config: WidgetSmithConfig) -> list[Unit]:
    """
    Detect page directories introduced by the added files.
    """
    pages = []
    seen = set()

    for file_path in added_files:
        parts = _relative_parts(file_path, config.pages_root)
        if parts is None or len(parts) < 2:
            continue

        page_name = parts[0]
        page_root = str(PurePosixPath(config.pages_root) / page_name)
        if page_root in seen:
            continue
        seen.add(page_root)

        page_path = config.resolve(page_root)
        if not page_path.is_dir():
            continue

        sources, source_paths = read_page_sources(page_path)
        if not any(not key.endswith(".gql") for key in sources):
            continue

        page = Unit(
            kind=PAGE,
            name=page_name,
            category=page_entity_type(page_name),
            root_path=str(page_path),
            sources=sources,
            source_paths=source_paths,
            route=extract_route(sources),
            tabs=extract_tabs(sources, source_paths),
        )

        if artifacts_exist(page, config):
            if config.verbose:
                print(f"Skipping page {page_name}: tests already exist")
            continue

        pages.append(page)

    return pages


def detect(config: WidgetSmithConfig) -> DetectionResult:
    """
    Detect new widgets and pages on the current branch.
    """
    cwd = Path(config.workspace_root) if config.workspace_root else None
    changes = get_changed_files(config.base_branch, cwd=cwd)
    return detect_from_files(changes.added, config)


def detect_from_files(added_files: list[str], config: WidgetSmithConfig) -> DetectionResult:
    return DetectionResult(
        widgets=detect_new_widgets(added_files, config),
        pages=detect_new_pages(added_files, config),
        added_files=list(added_files),
    )
