"""
Extraction of JSX/TS import bindings and their classification by origin.
"""
from widgetsmith.core.syntax_tree import SourceTree, parse_code
from widgetsmith.support.exceptions import SourceParseError
from widgetsmith.support.models import ImportBucket, ImportRecord

# Module specifiers treated as the UI library (prefix or exact match)
UI_LIBRARY_SPECIFIERS = ("@ot/ui", "ui", "@mui")


def _unquote(text: str) -> str:
    return text.strip("'\"")


def _records_from_statement(tree: SourceTree, statement) -> list[ImportRecord]:
    source_node = statement.child_by_field_name("source")
    if source_node is None:
        return []
    source = _unquote(tree.text(source_node))

    clause = next((c for c in statement.children if c.type == "import_clause"), None)
    if clause is None:
        # Side-effect import, e.g. import "./styles.css"
        return []

    records = []
    for child in clause.children:
        if child.type == "identifier":
            records.append(ImportRecord(
                local_name=tree.text(child),
                source=source,
                is_default=True,
            ))
        elif child.type == "namespace_import":
            name = next((c for c in child.children if c.type == "identifier"), None)
            if name is not None:
                records.append(ImportRecord(
                    local_name=tree.text(name),
                    source=source,
                    is_namespace=True,
                ))
        elif child.type == "named_imports":
            for specifier in child.children:
                if specifier.type != "import_specifier":
                    continue
                name = specifier.child_by_field_name("name")
                if name is None:
                    continue
                alias = specifier.child_by_field_name("alias")
                imported = _unquote(tree.text(name))
                local = tree.text(alias) if alias is not None else imported
                records.append(ImportRecord(
                    local_name=local,
                    source=source,
                    original_name=imported,
                ))

    return records


def extract_imports(code: str, file_path: str = "<string>") -> list[ImportRecord]:
    """
    Extract every import binding from source code.
    Unparseable code yields an empty list.
    """
    try:
        tree = parse_code(code, file_path)
    except SourceParseError:
        return []

    imports = []
    for node in tree.root_node.children:
        if node.type == "import_statement":
            imports.extend(_records_from_statement(tree, node))
    return imports


def is_ui_library(source: str, ui_specifiers: tuple[str, ...] = UI_LIBRARY_SPECIFIERS) -> bool:
    return any(source == s or source.startswith(s + "/") for s in ui_specifiers)


def is_local(source: str) -> bool:
    return source.startswith("./") or source.startswith("../")


def classify_import(record: ImportRecord, ui_specifiers: tuple[str, ...] = UI_LIBRARY_SPECIFIERS) -> str:
    """
    Classify a single import as 'ui', 'local', or 'other'.
    """
    if is_ui_library(record.source, ui_specifiers):
        return "ui"
    if is_local(record.source):
        return "local"
    return "other"


def categorize_imports(
    records: list[ImportRecord], ui_specifiers: tuple[str, ...] = UI_LIBRARY_SPECIFIERS
) -> ImportBucket:
    """
    Partition import records by origin.
    """
    bucket = ImportBucket()

    for record in records:
        category = classify_import(record, ui_specifiers)

        if category == "ui":
            bucket.ui_components.append(record)
        elif category == "local":
            bucket.local_components.append(record)
        else:
            bucket.other_imports.append(record)

    return bucket


def analyze_imports(code: str, file_path: str = "<string>") -> ImportBucket:
    """Extract and categorize the imports of one source file."""
    return categorize_imports(extract_imports(code, file_path))


def aggregate_imports(sources: dict[str, str], source_paths: dict[str, str] | None = None) -> ImportBucket:
    """
    Merge the imports of several files. UI-library bindings are kept once
    per local name (first file wins); the other buckets are concatenated.
    Each file is parsed with the grammar its path calls for.
    """
    aggregated = ImportBucket()
    seen_ui = set()

    for file_name, code in sources.items():
        if file_name.endswith(".gql"):
            continue

        bucket = analyze_imports(code, (source_paths or {}).get(file_name, file_name))
        for record in bucket.ui_components:
            if record.local_name not in seen_ui:
                seen_ui.add(record.local_name)
                aggregated.ui_components.append(record)
        aggregated.local_components.extend(bucket.local_components)
        aggregated.other_imports.extend(bucket.other_imports)

    return aggregated
