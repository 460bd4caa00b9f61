"""
Configuration management for WidgetSmith.
"""

from dataclasses import dataclass, field
from pathlib import Path
import sys
from widgetsmith.support.models import LLMConfig

# Compat for Python < 3.11
if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib


DEFAULT_ENTITY_TYPES = [
    "target",
    "disease",
    "drug",
    "evidence",
    "variant",
    "study",
    "credibleSet",
]



@dataclass
class WidgetSmithConfig:
    """Configuration settings for WidgetSmith."""

    workspace_root: str | None = None
    sections_root: str = "packages/sections/src"
    ui_package_root: str = "packages/ui/src"
    interactor_root: str = "packages/platform-test/POM/objects/widgets"
    test_root: str = "packages/platform-test/e2e/pages"
    fixtures_path: str = "packages/platform-test/fixtures/testConfig.ts"
    pages_root: str = "apps/platform/src/pages"
    page_interactor_root: str = "packages/platform-test/POM/page"
    page_test_root: str = "packages/platform-test/e2e/pages"
    entity_types: list[str] = field(default_factory=lambda: list(DEFAULT_ENTITY_TYPES))
    base_branch: str = "main"
    skip_test_hooks: bool = False
    dry_run: bool = False
    verbose: bool = False
    watch_quiet_seconds: float = 2.0
    llm: LLMConfig = field(default_factory=LLMConfig)

    def resolve(self, relative: str) -> Path:
        """Resolve a configured path against the workspace root, if any."""
        path = Path(relative)
        if self.workspace_root and not path.is_absolute():
            return Path(self.workspace_root) / path
        return path


def load_config(path: Path | None = None) -> WidgetSmithConfig:
    """
    Load configuration.
    Args:
        path: Path to a TOML file OR a directory holding pyproject.toml.
              If None, the current working directory is used.
    """
    if path is None:
        path = Path.cwd()

    if path.is_dir():
        config_path = path / "pyproject.toml"
    else:
        config_path = path

    if not config_path.exists():
        return WidgetSmithConfig()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)

        config_data = dict(data.get("tool", {}).get("widgetsmith", {}))

        llm_data = config_data.pop("llm", {})
        llm_keys = LLMConfig.__annotations__.keys()
        llm_config = LLMConfig(**{k: v for k, v in llm_data.items() if k in llm_keys})

        valid_keys = WidgetSmithConfig.__annotations__.keys()
        filtered_data = {
            k: v for k, v in config_data.items() if k in valid_keys and k != "llm"
        }

        return WidgetSmithConfig(llm=llm_config, **filtered_data)
    except (OSError, tomllib.TOMLDecodeError, TypeError):
        # Malformed TOML or wrongly shaped tables fall back to defaults
        return WidgetSmithConfig()
