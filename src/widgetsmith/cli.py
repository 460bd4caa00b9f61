"""
WidgetSmith CLI Entry Point.
"""

import argparse
import json
import sys
from pathlib import Path

from widgetsmith import __version__
from widgetsmith.core.git_diff import get_current_branch, is_git_repository
from widgetsmith.core.unit_detector import detect, detect_from_files
from widgetsmith.generation.orchestrator import run_batch
from widgetsmith.support.config import WidgetSmithConfig, load_config
from widgetsmith.support.exceptions import ConfigError
from widgetsmith.support.models import DetectionResult, GenerationResult, Unit
from widgetsmith.watch import watch_workspace, workspace_relative


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="WidgetSmith: Playwright interactor and test generator for new UI widgets and pages."
    )

    parser.add_argument("--config", help="Path to pyproject.toml configuration file.")

    parser.add_argument(
        "--version", action="version", version=f"widgetsmith {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_common(sub: argparse.ArgumentParser) -> None:
        sub.add_argument(
            "--base-branch",
            help="Base branch to compare against (default: from config, else main).",
        )
        sub.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output."
        )

    detect_parser = subparsers.add_parser("detect", help="Detect new widgets and pages on this branch.")
    add_common(detect_parser)
    detect_parser.add_argument(
        "--output-file", help="Write detected units to a JSON file."
    )

    def add_generation(sub: argparse.ArgumentParser) -> None:
        sub.add_argument(
            "--dry-run", action="store_true", help="Simulate actions without writing files."
        )
        sub.add_argument(
            "--skip-test-hooks",
            action="store_true",
            help="Do not add data-testid attributes to component sources.",
        )

    generate_parser = subparsers.add_parser("generate", help="Generate interactors and tests.")
    add_common(generate_parser)
    add_generation(generate_parser)
    generate_parser.add_argument(
        "--units-file", help="Read units from a JSON file written by 'detect' instead of detecting."
    )

    watch_parser = subparsers.add_parser(
        "watch", help="Watch the sections and pages roots and generate for new sources."
    )
    add_common(watch_parser)
    add_generation(watch_parser)

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> WidgetSmithConfig:
    """Load the configuration file and apply CLI overrides."""
    config = load_config(Path(args.config) if args.config else None)

    if getattr(args, "base_branch", None):
        config.base_branch = args.base_branch
    config.verbose = config.verbose or getattr(args, "verbose", False)
    config.dry_run = config.dry_run or getattr(args, "dry_run", False)
    config.skip_test_hooks = config.skip_test_hooks or getattr(args, "skip_test_hooks", False)
    return config


def load_units(units_file: Path) -> list[Unit]:
    """
    Read units saved by `detect --output-file`. Accepts the saved
    {"widgets": [...], "pages": [...]} object or a bare list.
    """
    if not units_file.exists():
        raise ConfigError(f"Units file not found: {units_file}")

    try:
        data = json.loads(units_file.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigError(f"Units file is not valid JSON: {units_file}: {e}") from e

    if isinstance(data, dict):
        entries = list(data.get("widgets", [])) + list(data.get("pages", []))
    elif isinstance(data, list):
        entries = data
    else:
        raise ConfigError(f"Unexpected units file format: {units_file}")

    try:
        return [Unit.from_dict(entry) for entry in entries]
    except (KeyError, TypeError, ValueError) as e:
        raise ConfigError(f"Invalid unit entry in {units_file}: {e}") from e


def save_units(detection: DetectionResult, output_file: Path) -> None:
    payload = {
        "widgets": [w.to_dict() for w in detection.widgets],
        "pages": [p.to_dict() for p in detection.pages],
    }
    output_file.parent.mkdir(parents=True, exist_ok=True)
    output_file.write_text(json.dumps(payload, indent=2), encoding="utf-8")


def print_detection(detection: DetectionResult, verbose: bool) -> None:
    if not detection.units:
        print("No new widgets or pages detected.")
        return

    print(f"Found {len(detection.widgets)} new widget(s) and {len(detection.pages)} new page(s):\n")

    for unit in detection.units:
        print(f"  + {unit.name} ({unit.kind}, {unit.category})")
        if verbose:
            print(f"      Path:  {unit.root_path}")
            print(f"      Files: {', '.join(unit.sources)}")
            if unit.route:
                print(f"      Route: {unit.route}")


def print_batch_summary(results: list[GenerationResult], dry_run: bool) -> None:
    """Print the batch summary with totals and a failure list."""
    print("\nWidgetSmith Batch Summary")
    print("─────────────────────────")
    print(f"Processed {len(results)} unit(s)" + (" [DRY RUN]" if dry_run else ""))

    succeeded = [r for r in results if r.success]
    failed = [r for r in results if not r.success]
    hooks = sum(r.test_hooks.applied for r in succeeded if r.test_hooks)

    print(f"Succeeded: {len(succeeded)}")
    print(f"Test hooks added: {hooks}")
    if failed:
        print(f"Errors:    {len(failed)} unit(s) failed")

    if succeeded:
        print("\nGenerated:")
        for r in succeeded:
            print(f"  ✓ {r.unit}: {r.interactor_path}")
            print(f"  ✓ {r.unit}: {r.test_path}")

    if failed:
        print("\nFailures:")
        for r in failed:
            print(f"  ✗ {r.unit} ({r.category}): {r.error}")


def generate_units(units: list[Unit], config: WidgetSmithConfig) -> list[GenerationResult]:
    if not units:
        print("No widgets or pages to process.")
        return []

    print(f"Generating tests for {len(units)} unit(s)...\n")
    results = run_batch(units, config)
    print_batch_summary(results, config.dry_run)
    return results


def run(args: argparse.Namespace) -> int:
    """Main command logic.
    Returns exit code (0 for success, non-zero for error).
    """
    try:
        config = build_config(args)

        if config.verbose:
            cwd = Path(config.workspace_root) if config.workspace_root else None
            if is_git_repository(cwd):
                print(f"Branch: {get_current_branch(cwd)} (base: {config.base_branch})")
            else:
                print("Warning: not inside a git repository; no changes will be detected.")

        if args.command == "detect":
            detection = detect(config)
            print_detection(detection, config.verbose)
            if args.output_file:
                output_path = Path(args.output_file)
                save_units(detection, output_path)
                print(f"\nSaved unit info to {output_path}")
            return 0

        if args.command == "generate":
            if args.units_file:
                units = load_units(Path(args.units_file))
            else:
                units = detect(config).units
            results = generate_units(units, config)
            return 1 if any(not r.success for r in results) else 0

        if args.command == "watch":
            def process_new_file(file_path: Path) -> bool:
                units = detect_from_files([workspace_relative(file_path, config)], config).units
                results = generate_units(units, config)
                return all(r.success for r in results)

            watch_workspace(config, process_new_file)
            return 0

        print(f"Error: unknown command {args.command}")
        return 1

    except ConfigError as e:
        print(f"Error: {e}")
        return 1
    except KeyboardInterrupt:
        return 0
    except Exception as e:
        print(f"Unexpected error: {e}")
        import traceback

        traceback.print_exc()
        return 1


def main():
    """Entry point for console script."""
    sys.exit(run(parse_args()))


if __name__ == "__main__":
    main()
