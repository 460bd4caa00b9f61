from pathlib import Path
from widgetsmith.support.config import WidgetSmithConfig, load_config


def test_default_config():
    cfg = WidgetSmithConfig()
    assert cfg.sections_root == "packages/sections/src"
    assert cfg.base_branch == "main"
    assert "credibleSet" in cfg.entity_types
    assert cfg.llm.model == "claude-sonnet-4-20250514"
    assert cfg.llm.api_key_env_var == "ANTHROPIC_API_KEY"


def test_load_config_defaults(tmp_path):
    # No pyproject.toml
    cfg = load_config(tmp_path)
    assert cfg.interactor_root == "packages/platform-test/POM/objects/widgets"


def test_load_config_from_file(tmp_path):
    pyproject = tmp_path / "pyproject.toml"
    pyproject.write_text("""
[tool.widgetsmith]
base_branch = "develop"
entity_types = ["target", "drug"]
not_a_setting = 1

[tool.widgetsmith.llm]
model = "claude-test"
max_tokens = 1000
""", encoding="utf-8")

    cfg = load_config(tmp_path)
    assert cfg.base_branch == "develop"
    assert cfg.entity_types == ["target", "drug"]
    assert cfg.llm.model == "claude-test"
    assert cfg.llm.max_tokens == 1000
    assert cfg.llm.temperature == 0.2


def test_load_config_malformed_file_gives_defaults(tmp_path):
    config_file = tmp_path / "widgetsmith.toml"
    config_file.write_text("[tool.widgetsmith\nbase_branch = ", encoding="utf-8")

    cfg = load_config(config_file)
    assert cfg == WidgetSmithConfig()


def test_resolve_against_workspace_root(tmp_path):
    cfg = WidgetSmithConfig(workspace_root=str(tmp_path))
    assert cfg.resolve("packages/sections/src") == tmp_path / "packages/sections/src"
    assert cfg.resolve("/abs/path") == Path("/abs/path")

    assert WidgetSmithConfig().resolve("a/b") == Path("a/b")
