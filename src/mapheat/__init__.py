"""Tile geographic points into heatmap png images."""

from .bounds import Boundary, BoundsCalculator
from .config import HeatmapConfig, load_config
from .errors import (DegenerateTile, InvalidConfig, InvalidPoint,
                     InvalidTileKey, MapHeatError)
from .geokey import Position, key, parse_key
from .mapheat import MapHeat
from .point import Point
from .renderer import DensityRenderer
from .tiles import Tile, TileIndex
from .writer import TileWriter
