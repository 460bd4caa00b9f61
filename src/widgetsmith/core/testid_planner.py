"""
Planning of data-testid insertions.

Target policies are derived from the UI-library components a unit imports.
Each imported component gets a `{id}-<kebab-name>` pattern unless the
override table below says otherwise.
"""
import re
from dataclasses import replace

from widgetsmith.core.element_locator import get_element_name, has_attribute, has_test_id
from widgetsmith.core.import_classifier import analyze_imports
from widgetsmith.core.syntax_tree import SourceTree
from widgetsmith.support.models import ImportBucket, TargetPolicy, TestHookSuggestion

SECTION_ID_PLACEHOLDER = "{id}"
EXTERNAL_MARKER = "external"
SPECIAL_ATTRIBUTES = ("className", "role")
NON_RENDERING_SUFFIXES = ("Provider", "Context")

LAYOUT_PRIMITIVES = ("Box", "Grid", "Stack", "Paper", "Container")

TARGET_OVERRIDES: dict[str, dict] = {
    **{name: {"skip_unless_special": True} for name in LAYOUT_PRIMITIVES},
    "Link": {"test_id_pattern": "{id}-link", "only_external": True},
    "OtTable": {"test_id_pattern": "{id}-table"},
    "DataDownloader": {"test_id_pattern": "{id}-downloader"},
    "SectionItem": {"has_built_in_test_id": True},
    "Typography": {"test_id_pattern": None},
    "Tooltip": {"test_id_pattern": None},
}


def to_kebab_case(name: str) -> str:
    """OtTable -> ot-table, HTMLTable -> html-table, Chart.Legend -> chart-legend."""
    name = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1-\2", name)
    name = re.sub(r"([a-z0-9])([A-Z])", r"\1-\2", name)
    return name.replace(".", "-").replace("_", "-").lower()


def default_pattern(name: str) -> str:
    return f"{SECTION_ID_PLACEHOLDER}-{to_kebab_case(name)}"


def build_target_policies(
    imports: ImportBucket, overrides: dict[str, dict] | None = None
) -> dict[str, TargetPolicy]:
    """
    One policy per UI-library component, keyed by the name used in JSX.
    """
    if overrides is None:
        overrides = TARGET_OVERRIDES

    policies: dict[str, TargetPolicy] = {}
    for record in imports.ui_components:
        name = record.local_name
        if record.is_namespace or name in policies:
            continue

        policy = TargetPolicy(
            name=name,
            test_id_pattern=default_pattern(name),
            source=record.source,
        )
        override = overrides.get(record.original_name or name)
        if override is not None:
            policy = replace(policy, **override)
        elif name.endswith(NON_RENDERING_SUFFIXES):
            policy.is_non_rendering = True

        policies[name] = policy

    return policies


def build_target_policies_from_code(code: str, file_path: str = "<string>") -> dict[str, TargetPolicy]:
    return build_target_policies(analyze_imports(code, file_path))


def _as_policy_map(targets) -> dict[str, TargetPolicy]:
    if isinstance(targets, dict):
        return targets
    return {policy.name: policy for policy in targets}


def _passes_guards(tree: SourceTree, element, policy: TargetPolicy) -> bool:
    if policy.only_external and not has_attribute(tree, element, EXTERNAL_MARKER):
        return False
    if policy.skip_unless_special and not any(
        has_attribute(tree, element, attr) for attr in SPECIAL_ATTRIBUTES
    ):
        return False
    return True


def plan_test_ids(tree: SourceTree, section_id: str, targets) -> list[TestHookSuggestion]:
    """
    Walk every JSX element in document order and propose a data-testid for
    each one a target policy accepts. Repeats of a tag get `-2`, `-3`, ...
    """
    policies = _as_policy_map(targets)
    suggestions = []
    occurrences: dict[str, int] = {}

    for element in tree.jsx_elements():
        name = get_element_name(tree, element)
        if name is None:
            continue

        policy = policies.get(name)
        if policy is None or not policy.injects:
            continue
        if has_test_id(tree, element):
            continue
        if not _passes_guards(tree, element, policy):
            continue

        occurrences[name] = occurrences.get(name, 0) + 1
        test_id = policy.test_id_pattern.replace(SECTION_ID_PLACEHOLDER, section_id)
        if occurrences[name] > 1:
            test_id = f"{test_id}-{occurrences[name]}"

        suggestions.append(TestHookSuggestion(
            element_name=name,
            test_id=test_id,
            line=element.start_point[0] + 1,
            column=element.start_point[1],
            element=element,
        ))

    return suggestions
