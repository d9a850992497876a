"""Tests for configuration loading."""

import pytest

from drillmap.config import (
    DEFAULT_CONFIG,
    LabelConfig,
    LayoutConfig,
    VisualizationConfig,
    load_config,
)
from drillmap.exceptions import ConfigFileError, InvalidConfigError


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    """No user or project config files and no DRILLMAP_* variables."""
    home = tmp_path / "home"
    project = tmp_path / "project"
    home.mkdir()
    project.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(project)
    for name in ["WIDTH", "HEIGHT", "SENTINEL", "LEGEND_MAX_ITEMS", "RESIZE_DEBOUNCE_MS"]:
        monkeypatch.delenv(f"DRILLMAP_{name}", raising=False)
    return project


class TestDefaults:
    def test_defaults(self):
        config = load_config()
        assert config == DEFAULT_CONFIG
        assert config.layout.padding_top == 16
        assert config.layout.padding_outer == 3
        assert config.labels.group_min_width == 50
        assert config.labels.leaf_min_width == 30
        assert config.navigation.root_name == "All"
        assert config.sentinel == "Unknown"
        assert config.resize_debounce_seconds == pytest.approx(0.1)

    def test_validation(self):
        with pytest.raises(ValueError):
            LayoutConfig(padding_inner=-1)
        with pytest.raises(ValueError):
            LayoutConfig(min_share=1.0)
        with pytest.raises(ValueError):
            LabelConfig(font_size=0)
        with pytest.raises(ValueError):
            VisualizationConfig(sentinel="")


class TestSources:
    def test_overrides(self):
        config = load_config(width=800, legend_max_items=None)
        assert config.width == 800
        assert config.legend_max_items == 10

    def test_explicit_file(self, tmp_path):
        path = tmp_path / "custom.toml"
        path.write_text('legend_max_items = 5\n\n[layout]\npadding_inner = 2.0\n\n[navigation]\nroot_name = "Tout"\n')
        config = load_config(config_file=path)
        assert config.legend_max_items == 5
        assert config.layout.padding_inner == 2.0
        assert config.layout.padding_top == 16
        assert config.navigation.root_name == "Tout"

    def test_project_file_then_explicit(self, tmp_path, isolated):
        (isolated / "drillmap.toml").write_text('sentinel = "N/A"\n[layout]\nmargin = 4.0\n')
        explicit = tmp_path / "explicit.toml"
        explicit.write_text("[layout]\npadding_top = 20.0\n")
        config = load_config(config_file=explicit)
        assert config.sentinel == "N/A"
        assert config.layout.margin == 4.0
        assert config.layout.padding_top == 20.0

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("DRILLMAP_WIDTH", "640")
        monkeypatch.setenv("DRILLMAP_SENTINEL", "Missing")
        config = load_config()
        assert config.width == 640.0
        assert config.sentinel == "Missing"

    def test_override_beats_environment(self, monkeypatch):
        monkeypatch.setenv("DRILLMAP_LEGEND_MAX_ITEMS", "3")
        assert load_config(legend_max_items=7).legend_max_items == 7


class TestErrors:
    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigFileError):
            load_config(config_file=tmp_path / "nope.toml")

    def test_bad_toml(self, tmp_path):
        path = tmp_path / "bad.toml"
        path.write_text("width = = 3")
        with pytest.raises(ConfigFileError):
            load_config(config_file=path)

    def test_bad_env_value(self, monkeypatch):
        monkeypatch.setenv("DRILLMAP_LEGEND_MAX_ITEMS", "many")
        with pytest.raises(InvalidConfigError) as exc_info:
            load_config()
        assert exc_info.value.key == "DRILLMAP_LEGEND_MAX_ITEMS"

    def test_invalid_value(self):
        with pytest.raises(InvalidConfigError):
            load_config(legend_max_items=-1)

    def test_invalid_section_value(self):
        with pytest.raises(InvalidConfigError):
            load_config(layout={"min_share": 1.5})

    def test_unknown_key(self):
        with pytest.raises(InvalidConfigError):
            load_config(colour_mode="dark")

    def test_section_must_be_table(self):
        with pytest.raises(InvalidConfigError):
            load_config(layout=3)
