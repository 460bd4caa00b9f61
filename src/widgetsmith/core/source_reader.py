"""
Reading a unit's source files into a flat name -> source map.

The import scanning here is a regex fast path: it only needs the
specifiers of plain `import X from "./y"` statements and tolerates
missing unusual import syntax. Full import analysis lives in
`import_classifier`, which works on the syntax tree.
"""
import re
from pathlib import Path, PurePosixPath

from widgetsmith.support.file_operations import read_optional

EXTENSIONS = [".ts", ".tsx", ".js", ".jsx"]
MAIN_FILES = ["index", "Body", "Summary", "Description"]
QUERY_EXTENSION = ".gql"

# Specifiers pointing at these are infrastructure, not UI structure
NOISE_FRAGMENTS = ("context", "utils")
NON_SOURCE_SUFFIXES = (".gql", ".graphql", ".css", ".scss", ".json", ".svg", ".png")

UI_SOURCE_PREFIX = "ui/"
UI_IMPORT_RE = re.compile(r"""import\s+\{([^}]+)\}\s+from\s+['"]ui['"]""")

# Thin wrappers around MUI; their sources say nothing about the widget
MUI_REEXPORTS = frozenset({
    "Box", "Grid", "Stack", "Paper", "Container", "Typography",
    "Button", "IconButton", "Fab", "TextField", "Select", "Checkbox",
    "Table", "TableBody", "TableCell", "TableHead", "TableRow",
    "List", "ListItem", "Card", "CardContent", "Divider",
    "Dialog", "DialogTitle", "DialogContent", "DialogActions",
    "Tooltip", "Popover", "Menu", "MenuItem", "Tabs", "Tab",
    "CircularProgress", "LinearProgress", "Skeleton", "Alert", "Snackbar",
})

LOCAL_IMPORT_RE = re.compile(
    r"""import\s+(?:(?:\{[^}]*\})|(?:[^{}\s]+))\s+from\s+['"](\.[^'"]+)['"]"""
)


def extract_local_imports(source_code: str) -> list[str]:
    """
    Extract relative import specifiers that may point at local components.
    """
    if not source_code:
        return []

    imports = []
    for match in LOCAL_IMPORT_RE.finditer(source_code):
        specifier = match.group(1)
        if specifier.endswith(NON_SOURCE_SUFFIXES):
            continue
        if any(fragment in specifier for fragment in NOISE_FRAGMENTS):
            continue
        imports.append(specifier)

    return imports


def resolve_import_path(base_path: Path, specifier: str) -> Path | None:
    """
    Resolve a relative specifier to a file, trying each extension as a
    direct file and then as an index file in a same-named directory.
    """
    clean = specifier[2:] if specifier.startswith("./") else specifier

    for ext in EXTENSIONS:
        direct = base_path / f"{clean}{ext}"
        if direct.is_file():
            return direct
        index = base_path / clean / f"index{ext}"
        if index.is_file():
            return index

    return None


def read_file_with_extension(base_path: Path, file_name: str) -> tuple[str, Path] | None:
    """Read `<base_path>/<file_name><ext>` for the first extension that exists."""
    for ext in EXTENSIONS:
        path = base_path / f"{file_name}{ext}"
        if path.is_file():
            content = read_optional(path)
            if content is not None:
                return content, path
    return None


def read_query_files(base_path: Path, sources: dict, source_paths: dict) -> None:
    """Add query-definition files directly inside base_path, keyed by full file name."""
    if not base_path.is_dir():
        return
    for path in sorted(base_path.iterdir()):
        if path.suffix != QUERY_EXTENSION or not path.is_file():
            continue
        content = read_optional(path)
        if content is not None:
            sources[path.name] = content
            source_paths[path.name] = str(path)


def extract_ui_imports(source_code: str) -> list[str]:
    """
    Names imported from the shared "ui" package. Aliased bindings report
    the exported name; type-only bindings are dropped.
    """
    if not source_code:
        return []

    names = []
    for match in UI_IMPORT_RE.finditer(source_code):
        for binding in match.group(1).split(","):
            binding = binding.strip()
            if not binding or binding.startswith("type "):
                continue
            name = binding.split(" as ")[0].strip()
            if name not in names:
                names.append(name)
    return names


def find_ui_component_source(component_name: str, ui_root: Path) -> Path | None:
    """
    Locate a component's file in the UI package: components, providers and
    hooks, as a direct file or a same-named folder. Section and Summary
    building blocks are also looked up in their own subfolders.
    """
    components = ui_root / "components"
    providers = ui_root / "providers"
    hooks = ui_root / "hooks"

    candidates = [
        components / f"{component_name}.tsx",
        components / f"{component_name}.ts",
        components / component_name / "index.tsx",
        components / component_name / f"{component_name}.tsx",
        providers / f"{component_name}.tsx",
        providers / f"{component_name}.ts",
        providers / component_name / "index.tsx",
        providers / component_name / f"{component_name}.tsx",
        hooks / f"{component_name}.tsx",
        hooks / f"{component_name}.ts",
    ]
    if "Section" in component_name or component_name == "SummaryItem":
        candidates += [
            components / "Section" / f"{component_name}.tsx",
            components / "Section" / f"{component_name}.ts",
            components / "Summary" / f"{component_name}.tsx",
        ]

    for candidate in candidates:
        if candidate.is_file():
            return candidate
    return None


def read_ui_component_sources(
    sources: dict[str, str], ui_root: Path
) -> tuple[dict[str, str], dict[str, str]]:
    """
    Read the UI package components a unit's sources import, keyed
    `ui/<Name>`. Plain MUI re-exports and components that cannot be found
    are left out.
    """
    ui_sources: dict[str, str] = {}
    ui_paths: dict[str, str] = {}

    names = []
    for code in sources.values():
        for name in extract_ui_imports(code):
            if name not in names:
                names.append(name)

    for name in names:
        if name in MUI_REEXPORTS:
            continue
        path = find_ui_component_source(name, ui_root)
        if path is None:
            continue
        content = read_optional(path)
        if content is not None:
            ui_sources[UI_SOURCE_PREFIX + name] = content
            ui_paths[UI_SOURCE_PREFIX + name] = str(path)

    return ui_sources, ui_paths


def is_ui_source(name: str) -> bool:
    """True for sources read from the shared UI package."""
    return name.startswith(UI_SOURCE_PREFIX)


def read_unit_sources(
    unit_path: Path, ui_root: Path | None = None
) -> tuple[dict[str, str], dict[str, str]]:
    """
    Read a widget's canonical files, the local components its Body imports,
    the UI package components it uses (when ui_root is given) and its query
    files. Never raises; unreadable files are left out.
    """
    unit_path = Path(unit_path)
    sources: dict[str, str] = {}
    source_paths: dict[str, str] = {}

    for file_name in MAIN_FILES:
        found = read_file_with_extension(unit_path, file_name)
        if found:
            content, path = found
            sources[file_name] = content
            source_paths[file_name] = str(path)

    body = sources.get("Body")
    if body:
        for specifier in extract_local_imports(body):
            resolved = resolve_import_path(unit_path, specifier)
            if resolved is None:
                continue
            key = PurePosixPath(specifier).name
            if key in sources:
                continue
            content = read_optional(resolved)
            if content is not None:
                sources[key] = content
                source_paths[key] = str(resolved)

    if ui_root is not None and Path(ui_root).is_dir():
        ui_sources, ui_paths = read_ui_component_sources(sources, Path(ui_root))
        sources.update(ui_sources)
        source_paths.update(ui_paths)

    read_query_files(unit_path, sources, source_paths)

    return sources, source_paths


def read_page_sources(page_path: Path) -> tuple[dict[str, str], dict[str, str]]:
    """
    Read every source file directly inside a page directory, keyed by stem,
    followed by its query files.
    """
    page_path = Path(page_path)
    sources: dict[str, str] = {}
    source_paths: dict[str, str] = {}

    if not page_path.is_dir():
        return sources, source_paths

    for path in sorted(page_path.iterdir()):
        if path.suffix not in EXTENSIONS or not path.is_file():
            continue
        if path.stem in sources:
            continue
        content = read_optional(path)
        if content is not None:
            sources[path.stem] = content
            source_paths[path.stem] = str(path)

    read_query_files(page_path, sources, source_paths)

    return sources, source_paths
