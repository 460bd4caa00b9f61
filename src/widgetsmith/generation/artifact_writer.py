"""
Conventional artifact locations, few-shot example loading and the WRITE step.
"""
import re
from pathlib import Path

from widgetsmith.support.config import WidgetSmithConfig
from widgetsmith.support.file_operations import read_optional, safe_write
from widgetsmith.support.models import PAGE, ArtifactPaths, Examples, Unit


def lower_first(name: str) -> str:
    return name[:1].lower() + name[1:]


def page_interactor_stem(page_name: str) -> str:
    """TargetPage -> target: the module name of a page interactor."""
    return lower_first(page_name[:1] + re.sub(r"Page$", "", page_name[1:]))


def derive_artifact_paths(unit: Unit, config: WidgetSmithConfig) -> ArtifactPaths:
    """
    Widgets: <interactor_root>/<Name>/<name>Section.ts and
    <test_root>/<entity>/<name lowercased>.spec.ts.
    Pages: <page_interactor_root>/<entity>/<name without Page>.ts and
    <page_test_root>/<entity>/<name>.spec.ts.
    """
    if unit.kind == PAGE:
        stem = lower_first(unit.name)
        interactor_stem = page_interactor_stem(unit.name)
        return ArtifactPaths(
            interactor_path=config.resolve(config.page_interactor_root) / unit.category / f"{interactor_stem}.ts",
            test_path=config.resolve(config.page_test_root) / unit.category / f"{stem}.spec.ts",
        )

    return ArtifactPaths(
        interactor_path=config.resolve(config.interactor_root) / unit.name / f"{lower_first(unit.name)}Section.ts",
        test_path=config.resolve(config.test_root) / unit.category / f"{unit.name.lower()}.spec.ts",
    )


def load_examples(config: WidgetSmithConfig) -> Examples:
    """Read the widget reference files; missing ones are empty strings."""
    interactor_root = config.resolve(config.interactor_root)
    test_root = config.resolve(config.test_root)
    paths = {
        "interactor": interactor_root / "KnownDrugs" / "knownDrugsSection.ts",
        "test": test_root / "drug" / "drugIndications.spec.ts",
        "fixtures": config.resolve(config.fixtures_path),
    }
    return Examples(**{key: read_optional(path) or "" for key, path in paths.items()})


def load_page_examples(config: WidgetSmithConfig) -> Examples:
    interactor = read_optional(config.resolve(config.page_interactor_root) / "target" / "target.ts")
    test = read_optional(config.resolve(config.page_test_root) / "target" / "targetPage.spec.ts")
    return Examples(interactor=interactor or "", test=test or "")


def load_examples_for(unit: Unit, config: WidgetSmithConfig) -> Examples:
    if unit.kind == PAGE:
        return load_page_examples(config)
    return load_examples(config)


def write_artifacts(
    unit: Unit,
    interactor_code: str,
    test_code: str,
    config: WidgetSmithConfig,
    modified_sources: list[str] | None = None,
) -> ArtifactPaths:
    """
    Write the generated interactor and spec, and any sources rewritten by
    test-hook injection. Existing artifacts are overwritten. Nothing is
    written in dry-run mode; the paths are returned either way.
    """
    paths = derive_artifact_paths(unit, config)
    if config.dry_run:
        return paths

    for source_path in modified_sources or []:
        name = source_name_for_path(unit, source_path)
        if name is not None:
            safe_write(Path(source_path), unit.sources[name], overwrite=True)

    safe_write(paths.interactor_path, interactor_code, overwrite=True)
    safe_write(paths.test_path, test_code, overwrite=True)
    return paths


def source_name_for_path(unit: Unit, source_path: str) -> str | None:
    for name, path in unit.source_paths.items():
        if path == source_path:
            return name
    return None
