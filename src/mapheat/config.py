"""Read/store heatmap configuration.

Rendering and tiling parameters live in one immutable HeatmapConfig value
that is passed to every component; there is no module-level state beyond
the defaults below.  Configs can be built in code or read from a yaml
file such as:

    size: 3000
    radius: 2
    blur: 0
    degree: 0.1
    gradient:
      0.4: blue
      0.6: cyan
      0.7: lime
      0.8: yellow
      1.0: red
"""

import logging
import math
import os
from dataclasses import dataclass, field, fields, replace

import yaml
from PIL import ImageColor

from .errors import InvalidConfig
from .point import DISTANCES
from .util import safe_path

logger = logging.getLogger(__name__)

# don't rely on the cwd to find the default config file
CONFIGPATH = safe_path("../../config.yaml")

DEFAULT_GRADIENT = {
    0.4: "blue",
    0.6: "cyan",
    0.7: "lime",
    0.8: "yellow",
    1.0: "red",
}

@dataclass(frozen=True)
class HeatmapConfig:
    """Parameters for tiling and rendering.

    Attributes:
        size: edge in pixels of the padded raster; the written tile is size/3
        radius: radius in pixels of the circle stamped for each point
        blur: if > 0, stamp gaussian-softened circles of this blur instead
            of running the box blur pass
        gradient: weight (0..1) -> color stops, colors are anything
            PIL.ImageColor understands or RGB tuples
        degree: tile edge length in decimal degrees
        opacity: opacity of a single stamped point
        distance: distance primitive, "great_circle" or "geodesic"
    """
    size: int = 3000
    radius: float = 2
    blur: float = 0
    gradient: dict = field(default_factory=lambda: dict(DEFAULT_GRADIENT))
    degree: float = 0.1
    opacity: float = 0.05
    distance: str = "great_circle"

    def __post_init__(self):
        self.validate()

    def validate(self):
        """Raise InvalidConfig if any value is out of range."""
        if isinstance(self.size, bool) or not isinstance(self.size, int) or self.size <= 0:
            raise InvalidConfig(f"size must be a positive int, got {self.size!r}")
        if self.size % 3:
            raise InvalidConfig(f"size must be divisible by 3, got {self.size}")
        if not _finite(self.radius) or self.radius <= 0:
            raise InvalidConfig(f"radius must be positive, got {self.radius!r}")
        if not _finite(self.blur) or self.blur < 0:
            raise InvalidConfig(f"blur must be non-negative, got {self.blur!r}")
        if not _finite(self.degree) or self.degree <= 0 or self.degree > 10:
            raise InvalidConfig(f"degree must be in (0, 10], got {self.degree!r}")
        if not _finite(self.opacity) or not 0 < self.opacity <= 1:
            raise InvalidConfig(f"opacity must be in (0, 1], got {self.opacity!r}")
        if self.distance not in DISTANCES:
            raise InvalidConfig(f"Unknown distance method: {self.distance!r}")
        if not self.gradient:
            raise InvalidConfig("gradient needs at least one stop")
        for weight, color in self.gradient.items():
            if not _finite(weight) or not 0 <= weight <= 1:
                raise InvalidConfig(f"gradient weight must be in [0, 1], got {weight!r}")
            _check_color(color)

    def replace(self, **changes) -> "HeatmapConfig":
        """Return a copy with the given fields changed, validated."""
        changes.setdefault("gradient", dict(self.gradient))
        return replace(self, **changes)

    @classmethod
    def from_dict(cl, d: dict):
        """Build a config from a dict, e.g. loaded from yaml.  Omitted keys
        take the defaults; unknown keys are an error."""
        if d is None:
            return cl()
        if not isinstance(d, dict):
            raise InvalidConfig("config must be a mapping, got " + type(d).__name__)

        valid = {f.name for f in fields(cl)}
        nd = {}
        for k, v in d.items():
            if k not in valid:
                logger.error("Unknown config key: %s", k)
                raise InvalidConfig("Unknown config key: " + str(k))
            nd[k] = v

        if "gradient" in nd:
            nd["gradient"] = _parse_gradient(nd["gradient"])
        if "size" in nd and isinstance(nd["size"], float) and nd["size"].is_integer():
            nd["size"] = int(nd["size"])
        return cl(**nd)

    @classmethod
    def from_yaml(cl, fn):
        with open(fn, "r", encoding="utf-8") as f:
            try:
                yaml_data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise InvalidConfig(f"Config parse fail in {fn}: {e}") from e
        logger.info("Loaded config from %s", fn)
        return cl.from_dict(yaml_data)


def load_config(fn=None) -> HeatmapConfig:
    """Load the given yaml config, or the repository config.yaml if there
    is one, or fall back to the defaults."""
    if fn:
        return HeatmapConfig.from_yaml(fn)
    if os.path.exists(CONFIGPATH):
        return HeatmapConfig.from_yaml(CONFIGPATH)
    logger.debug("No config.yaml found, using defaults")
    return HeatmapConfig()

def _finite(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)

def _check_color(color):
    if isinstance(color, str):
        try:
            ImageColor.getrgb(color)
        except ValueError:
            raise InvalidConfig("Unknown gradient color: " + color) from None
        return
    if (not isinstance(color, tuple) or len(color) not in (3, 4) or
            not all(isinstance(c, int) and 0 <= c <= 255 for c in color)):
        raise InvalidConfig(f"gradient color must be a name or RGB tuple, got {color!r}")

def _parse_gradient(gradient) -> dict:
    """yaml may give us string keys ("0.4") or lists as colors"""
    if not isinstance(gradient, dict):
        raise InvalidConfig("gradient must be a mapping of weight to color")
    parsed = {}
    for weight, color in gradient.items():
        try:
            weight = float(weight)
        except (TypeError, ValueError):
            raise InvalidConfig("gradient weight is not a number: " + str(weight)) from None
        if isinstance(color, list):
            color = tuple(color)
        parsed[weight] = color
    return parsed
