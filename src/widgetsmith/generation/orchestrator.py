"""
Per-unit generation pipeline and the sequential batch driver.

ANALYZE -> INJECT_TEST_HOOKS -> LOAD_EXAMPLES -> GENERATE_INTERACTOR
-> GENERATE_TEST -> WRITE. Any exception moves the unit to a failed
GenerationResult; nothing is written unless every step before WRITE succeeded.
"""
from widgetsmith.core.testid_transformer import inject_unit_test_hooks
from widgetsmith.generation.analyzer import analyze_page, analyze_widget
from widgetsmith.generation.artifact_writer import load_examples_for, write_artifacts
from widgetsmith.generation.interactor_generator import generate_interactor, generate_page_interactor
from widgetsmith.generation.test_generator import generate_page_test, generate_test
from widgetsmith.support.config import WidgetSmithConfig
from widgetsmith.support.models import PAGE, GenerationResult, TestHookSummary, Unit


def run_analysis(unit: Unit, config: WidgetSmithConfig):
    if unit.kind == PAGE:
        analysis = analyze_page(unit, config.llm)
        if config.verbose:
            print(f"  Analysis: tabs={analysis.has_tabs}, externalLinks={analysis.has_external_links}")
            if analysis.tabs:
                print(f"  Tabs: {', '.join(t.name for t in analysis.tabs)}")
        return analysis

    analysis = analyze_widget(unit, config.llm)
    if config.verbose:
        print(f"  Analysis: table={analysis.has_table}, chart={analysis.has_chart}")
    return analysis


def run_test_hooks(unit: Unit, config: WidgetSmithConfig) -> tuple[Unit, TestHookSummary]:
    if config.skip_test_hooks:
        return unit, TestHookSummary()

    updated, summary, _ = inject_unit_test_hooks(unit, dry_run=config.dry_run, verbose=config.verbose)
    if config.verbose and summary.applied > 0:
        print(f"  Added {summary.applied} data-testid(s) in {len(summary.modified_files)} file(s)")
    return updated, summary


def generate_tests_for_unit(unit: Unit, config: WidgetSmithConfig) -> GenerationResult:
    """
    Run the whole pipeline for one widget or page.
    Never raises; failures are reported in the returned result.
    """
    result = GenerationResult(unit=unit.name, category=unit.category, kind=unit.kind)

    try:
        analysis = run_analysis(unit, config)
        unit, hooks = run_test_hooks(unit, config)
        examples = load_examples_for(unit, config)

        if unit.kind == PAGE:
            if config.verbose:
                print("  Generating interactor...")
            interactor_code = generate_page_interactor(unit, analysis, config.llm, examples)
            if config.verbose:
                print("  Generating tests...")
            test_code = generate_page_test(unit, analysis, interactor_code, config.llm, examples)
        else:
            interactor_code = generate_interactor(unit, analysis, config.llm, examples)
            test_code = generate_test(unit, analysis, interactor_code, config.llm, examples)

        paths = write_artifacts(unit, interactor_code, test_code, config, hooks.modified_files)

        if config.verbose and not config.dry_run:
            print(f"  Written: {paths.interactor_path}")
            print(f"  Written: {paths.test_path}")

        result.success = True
        result.analysis = analysis.summary()
        result.test_hooks = hooks
        result.interactor_path = paths.interactor_path
        result.test_path = paths.test_path
    except Exception as e:
        result.error = str(e)
        if config.verbose:
            print(f"  Error processing {unit.name}: {e}")

    return result


def run_batch(units: list[Unit], config: WidgetSmithConfig) -> list[GenerationResult]:
    """Process units one at a time, in order."""
    results = []
    for index, unit in enumerate(units, start=1):
        label = "page" if unit.kind == PAGE else "widget"
        print(f"[{index}/{len(units)}] Generating tests for {label} {unit.name} ({unit.category})...")
        result = generate_tests_for_unit(unit, config)
        status = "✓" if result.success else "✗"
        print(f"  {status} {unit.name}" + ("" if result.success else f": {result.error}"))
        results.append(result)
    return results
