"""Configuration loading and management for drillmap.

Configuration sources are merged in priority order:
    1. Defaults (defined in VisualizationConfig)
    2. Global config (~/.drillmap.toml)
    3. Project config (./drillmap.toml)
    4. Explicit config file
    5. Environment variables (DRILLMAP_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(width=800, legend_max_items=5)
    >>> config.width
    800
    >>> config.layout.padding_inner
    1.0
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Optional, get_type_hints

from .exceptions import ConfigFileError, InvalidConfigError


@dataclass(frozen=True)
class LayoutConfig:
    """Spacing and view options for the treemap layout.

    Attributes:
        margin: Space between the surface edge and the tiled area
        padding_outer: Inset of nested children inside a group cell
        padding_top: Label band reserved at the top of a group cell
        padding_inner: Gap between sibling cells
        show_nested: Tile each group's children inside it (two-level view)
        min_share: Hide children below this share of the focus total (0 = keep all)
    """

    margin: float = 10.0
    padding_outer: float = 3.0
    padding_top: float = 16.0
    padding_inner: float = 1.0
    show_nested: bool = True
    min_share: float = 0.0

    def __post_init__(self) -> None:
        for name in ("margin", "padding_outer", "padding_top", "padding_inner"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative")
        if not 0.0 <= self.min_share < 1.0:
            raise ValueError("min_share must be in [0.0, 1.0)")


@dataclass(frozen=True)
class LabelConfig:
    """Label fitting thresholds.

    Group cells (those with children) need more room for their bold label
    than leaf cells do.
    """

    group_min_width: float = 50.0
    group_min_height: float = 20.0
    leaf_min_width: float = 30.0
    leaf_min_height: float = 20.0
    inset: float = 3.0
    font_size: float = 12.0
    ellipsis: str = "..."

    def __post_init__(self) -> None:
        for name in (
            "group_min_width",
            "group_min_height",
            "leaf_min_width",
            "leaf_min_height",
            "inset",
        ):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative")
        if self.font_size <= 0:
            raise ValueError("font_size must be positive")


@dataclass(frozen=True)
class NavigationConfig:
    """Breadcrumb and back-button behaviour."""

    root_name: str = "All"
    use_breadcrumbs: bool = True
    show_back_button: bool = True

    def __post_init__(self) -> None:
        if not self.root_name:
            raise ValueError("root_name must not be empty")


@dataclass(frozen=True)
class VisualizationConfig:
    """Configuration for one treemap visualization.

    Attributes:
        width, height: Initial surface size before any resize notification
        sentinel: Key used for records with a missing grouping value
        legend_max_items: Legend entries shown before folding into "Others"
        resize_debounce_ms: Burst window for coalescing resize events
        layout, labels, navigation: Nested sections ([layout], [labels], [navigation] in TOML)
    """

    width: float = 960.0
    height: float = 500.0
    sentinel: str = "Unknown"
    legend_max_items: int = 10
    resize_debounce_ms: int = 100

    layout: LayoutConfig = field(default_factory=LayoutConfig)
    labels: LabelConfig = field(default_factory=LabelConfig)
    navigation: NavigationConfig = field(default_factory=NavigationConfig)

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError("width and height must be non-negative")
        if not self.sentinel:
            raise ValueError("sentinel must not be empty")
        if self.legend_max_items < 0:
            raise ValueError("legend_max_items must be non-negative")
        if self.resize_debounce_ms < 0:
            raise ValueError("resize_debounce_ms must be non-negative")

    @property
    def resize_debounce_seconds(self) -> float:
        return self.resize_debounce_ms / 1000.0


DEFAULT_CONFIG = VisualizationConfig()

_SECTIONS = {
    "layout": LayoutConfig,
    "labels": LabelConfig,
    "navigation": NavigationConfig,
}


def load_config(config_file: Optional[Path] = None, **overrides) -> VisualizationConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). ``None``
            values are ignored so optional CLI flags can be passed through.

    Returns:
        Validated VisualizationConfig instance

    Raises:
        ConfigFileError: If a config file is missing or unreadable
        InvalidConfigError: If a value fails validation
    """
    merged: dict[str, Any] = {}

    global_config = Path.home() / ".drillmap.toml"
    if global_config.exists():
        _merge(merged, _load_toml_file(global_config))

    project_config = Path.cwd() / "drillmap.toml"
    if project_config.exists():
        _merge(merged, _load_toml_file(project_config))

    if config_file is not None:
        if not config_file.exists():
            raise ConfigFileError(config_file, "file not found")
        _merge(merged, _load_toml_file(config_file))

    _merge(merged, _load_env_vars())
    _merge(merged, {k: v for k, v in overrides.items() if v is not None})

    for section, cls in _SECTIONS.items():
        value = merged.pop(section, None)
        if value is None:
            continue
        if isinstance(value, cls):
            merged[section] = value
            continue
        if not isinstance(value, dict):
            raise InvalidConfigError(section, value, "expected a table")
        try:
            merged[section] = cls(**value)
        except TypeError as e:
            raise InvalidConfigError(section, value, str(e))
        except ValueError as e:
            raise InvalidConfigError(section, value, str(e))

    try:
        return VisualizationConfig(**merged)
    except TypeError as e:
        # Unknown field in config
        raise InvalidConfigError("config", sorted(merged), str(e))
    except ValueError as e:
        raise InvalidConfigError("config", sorted(merged), str(e))


def _merge(target: dict[str, Any], source: dict[str, Any]) -> None:
    """Merge ``source`` into ``target``, combining section tables key by key."""
    for key, value in source.items():
        if key in _SECTIONS and isinstance(value, dict) and isinstance(target.get(key), dict):
            target[key] = {**target[key], **value}
        else:
            target[key] = value


def _load_env_vars() -> dict[str, Any]:
    """Load scalar top-level fields from DRILLMAP_* environment variables.

    Supported environment variables:
        DRILLMAP_WIDTH: float
        DRILLMAP_HEIGHT: float
        DRILLMAP_SENTINEL: str
        DRILLMAP_LEGEND_MAX_ITEMS: int
        DRILLMAP_RESIZE_DEBOUNCE_MS: int
    """
    type_hints = get_type_hints(VisualizationConfig)
    result: dict[str, Any] = {}

    for f in fields(VisualizationConfig):
        if f.name in _SECTIONS:
            continue
        env_key = f"DRILLMAP_{f.name.upper()}"
        env_value = os.environ.get(env_key)
        if env_value is None:
            continue
        try:
            result[f.name] = _parse_env_value(env_value, type_hints[f.name])
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e))

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse an environment variable string to the field's type."""
    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        if lower in ("false", "0", "no", "off"):
            return False
        raise ValueError(f"expected true/false, got '{value}'")
    if type_hint is int:
        return int(value)
    if type_hint is float:
        return float(value)
    return value


def _load_toml_file(path: Path) -> dict:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigFileError(path, str(e))
