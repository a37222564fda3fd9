"""Configuration loading and chart settings."""

import json
import logging
import math
from dataclasses import dataclass, fields, replace
from pathlib import Path

from matplotlib.colors import is_color_like

from climb_profile.gradient import CANONICAL_BANDS, validate_bands
from climb_profile.models import Band

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".config" / "climb-profile"
CONFIG_PATH = CONFIG_DIR / "climb-profile.json"
LOCAL_CONFIG_PATH = Path("climb-profile.json")

# Default values for config keys and CLI options
DEFAULTS = {
    "output": "points.png",
    "title": "Elevation Profile",
    "window_width": None,  # None = derive from point count
    "legend": True,
    "show_axes": False,
    "fig_width": 16.0,  # inches
    "fig_height": 8.0,  # inches
    "dpi": 100,
    "y_max": None,  # meters; None = 110% of the highest point
    "bands": None,  # None = canonical bands
}


def load_config() -> dict:
    """Load configuration from config files.

    Merges config from global and local files:
    1. ~/.config/climb-profile/climb-profile.json (global, loaded first)
    2. ./climb-profile.json (local, overrides global)

    Returns:
        Dict with merged config values, empty dict if no files exist.
    """
    config = {}
    for config_path in [CONFIG_PATH, LOCAL_CONFIG_PATH]:
        if config_path.exists():
            try:
                with config_path.open() as f:
                    data = json.load(f)
            except (json.JSONDecodeError, OSError) as e:
                logger.warning("Skipping unreadable config %s: %s", config_path, e)
                continue
            if not isinstance(data, dict):
                logger.warning("Skipping config %s: expected a JSON object", config_path)
                continue
            config.update(data)
            logger.debug("Loaded config from %s", config_path)
    return config


def _bound(value, default: float) -> float:
    return default if value is None else float(value)


def parse_bands(raw: list | None) -> tuple[Band, ...]:
    """Build bands from config entries.

    Each entry is either [low, high, color] or a dict with low, high, color
    and an optional label. A null low or high means unbounded.

    Raises:
        ValueError: For malformed entries, unknown colors, or bands that do
            not form a contiguous partition.
    """
    if raw is None:
        return CANONICAL_BANDS

    bands = []
    for entry in raw:
        if isinstance(entry, dict):
            low, high, color = entry.get("low"), entry.get("high"), entry.get("color")
            label = entry.get("label")
        elif isinstance(entry, (list, tuple)) and len(entry) == 3:
            low, high, color = entry
            label = None
        else:
            raise ValueError(f"Invalid band entry: {entry!r}")
        if not is_color_like(color):
            raise ValueError(f"Invalid band color: {color!r}")
        bands.append(Band(_bound(low, -math.inf), _bound(high, math.inf), color, label))

    validate_bands(bands)
    return tuple(bands)


@dataclass(frozen=True)
class ProfileSettings:
    output: str = DEFAULTS["output"]
    title: str = DEFAULTS["title"]
    window_width: int | None = DEFAULTS["window_width"]
    legend: bool = DEFAULTS["legend"]
    show_axes: bool = DEFAULTS["show_axes"]
    fig_width: float = DEFAULTS["fig_width"]
    fig_height: float = DEFAULTS["fig_height"]
    dpi: int = DEFAULTS["dpi"]
    y_max: float | None = DEFAULTS["y_max"]
    bands: tuple[Band, ...] = CANONICAL_BANDS

    @classmethod
    def from_config(cls, config: dict | None = None, **overrides) -> "ProfileSettings":
        """Build settings from a config dict; non-None overrides win.

        Unknown config keys are ignored.
        """
        config = dict(config or {})
        known = {f.name for f in fields(cls)}
        values = {key: config[key] for key in known if key in config and key != "bands"}
        values["bands"] = parse_bands(config.get("bands"))

        settings = cls(**values)
        overrides = {key: value for key, value in overrides.items() if value is not None}
        settings = replace(settings, **overrides)
        settings.validate()
        return settings

    def validate(self) -> None:
        if self.window_width is not None and (
            isinstance(self.window_width, bool) or not isinstance(self.window_width, int) or self.window_width < 1
        ):
            raise ValueError(f"window_width must be a positive integer, got {self.window_width!r}")
        if self.fig_width <= 0 or self.fig_height <= 0:
            raise ValueError("Figure size must be positive")
        for name in ("legend", "show_axes"):
            if not isinstance(getattr(self, name), bool):
                raise ValueError(f"{name} must be true or false, got {getattr(self, name)!r}")
        if isinstance(self.dpi, bool) or not isinstance(self.dpi, int) or self.dpi < 1:
            raise ValueError(f"dpi must be a positive integer, got {self.dpi!r}")
        if self.y_max is not None and self.y_max <= 0:
            raise ValueError(f"y_max must be positive, got {self.y_max}")
