"""
Applying planned data-testid insertions to component sources.
"""
from widgetsmith.core.import_classifier import aggregate_imports
from widgetsmith.core.syntax_tree import generate_code, parse_code
from widgetsmith.core.element_locator import add_test_id
from widgetsmith.core.source_reader import is_ui_source
from widgetsmith.core.testid_planner import build_target_policies, build_target_policies_from_code, plan_test_ids
from widgetsmith.support.exceptions import SourceParseError
from widgetsmith.support.models import (
    PAGE,
    FileHookResult,
    TestHookSummary,
    TransformResult,
    Unit,
)

WIDGET_PRIMARY_FILES = ("Body", "Summary")
SKIP_FILES = ("index", "Description")


def add_test_ids(
    code: str,
    section_id: str,
    targets=None,
    file_path: str = "<string>",
    dry_run: bool = False,
) -> TransformResult:
    """
    Add data-testids to one component source.

    Targets default to policies derived from the file's own imports. The
    original text is returned untouched unless at least one insertion applied.
    Raises SourceParseError if the code cannot be parsed.
    """
    if targets is None:
        targets = build_target_policies_from_code(code, file_path)

    tree = parse_code(code, file_path)
    suggestions = plan_test_ids(tree, section_id, targets)

    if dry_run or not suggestions:
        return TransformResult(code=code, suggestions=suggestions, applied_count=0, was_modified=False)

    applied = 0
    for suggestion in suggestions:
        if add_test_id(tree, suggestion.element, suggestion.test_id):
            applied += 1

    if applied == 0:
        return TransformResult(code=code, suggestions=suggestions, applied_count=0, was_modified=False)

    return TransformResult(
        code=generate_code(tree),
        suggestions=suggestions,
        applied_count=applied,
        was_modified=True,
    )


def primary_files(unit: Unit) -> tuple[str, ...]:
    if unit.kind == PAGE:
        return (unit.name,) if unit.name in unit.sources else ("index",)
    return WIDGET_PRIMARY_FILES


def is_imported_component(name: str, primary: tuple[str, ...]) -> bool:
    return (
        name not in primary
        and name not in SKIP_FILES
        and not name.endswith(".gql")
        and not is_ui_source(name)
    )


def inject_unit_test_hooks(
    unit: Unit, dry_run: bool = False, verbose: bool = False
) -> tuple[Unit, TestHookSummary, list[FileHookResult]]:
    """
    Add data-testids across a unit's sources.

    Targets are derived once from the imports of every source so that a
    component imported in one file is recognised in all of them. Sources
    read from the shared UI package are context only: they neither add
    targets nor get rewritten. A parse failure in a primary file
    propagates; imported components that fail to parse are skipped.

    Returns the updated unit (sources rewritten, nothing written to disk),
    the summary counts and per-file reports.
    """
    section_id = unit.section_id
    own_sources = {name: code for name, code in unit.sources.items() if not is_ui_source(name)}
    targets = build_target_policies(aggregate_imports(own_sources, unit.source_paths))

    if verbose:
        names = ", ".join(targets) or "(none detected)"
        print(f"  {unit.name} uses components: {names}")

    primary = primary_files(unit)
    summary = TestHookSummary(method="ast")
    reports: list[FileHookResult] = []
    updates: dict[str, str] = {}

    def process(name: str, required: bool) -> None:
        code = unit.sources.get(name)
        path = unit.source_paths.get(name)
        if not code or not path:
            return

        try:
            result = add_test_ids(code, section_id, targets, file_path=path, dry_run=dry_run)
        except SourceParseError as e:
            if required:
                raise
            if verbose:
                print(f"    Skipping {name}: {e}")
            return

        if not required and not result.suggestions:
            return

        reports.append(FileHookResult(
            name=name,
            path=path,
            suggestions=len(result.suggestions),
            applied=result.applied_count,
            modified=result.was_modified,
        ))
        summary.applied += result.applied_count
        if not dry_run:
            summary.failed += len(result.suggestions) - result.applied_count

        if verbose:
            for s in result.suggestions:
                print(f"    {name}: {s.element_name} at line {s.line} -> {s.test_id}")

        if result.was_modified:
            updates[name] = result.code
            summary.modified_files.append(path)

    for name in primary:
        process(name, required=True)

    for name in [n for n in unit.sources if is_imported_component(n, primary)]:
        process(name, required=False)

    return unit.with_sources(updates), summary, reports
