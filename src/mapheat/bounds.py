"""Geometry of a tile, derived from its key.

A tile is rendered together with a padding ring one tile wide on every
side, so points just across an edge still contribute density.  The
padded box spans 3x3 tiles:

      nw ---- top ---- ne
      |                 |
     left    tile       |
      |                 |
      sw --- bottom --- se

Meridians converge toward the poles, so the top edge is shorter than the
bottom edge (in the northern hemisphere) and the padded box is really a
trapezoid.  `radians` is the skew of the left edge against a right angle,
asin((bottom - top) / left), which the renderer uses to put points back
on a square raster.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict

from .errors import DegenerateTile
from .geokey import DEFAULT_DEGREE, grid_precision, parse_key
from .point import Point, distance_km
from .util import decimal_adjust

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class Boundary:
    """Padded geometry of one tile.

    Attributes:
        min: south-west corner of the padding ring
        max: north-east corner of the padding ring
        radians: skew angle from meridian convergence
        size: length of the padded bottom edge, in km
        tile_min: south-west corner of the tile itself
        tile_max: north-east corner of the tile itself
    """
    min: Point
    max: Point
    radians: float
    size: float
    tile_min: Point
    tile_max: Point

    def contains(self, point: Point) -> bool:
        """True if point is strictly inside the tile's own (unpadded) box."""
        return (self.tile_min.latitude < point.latitude < self.tile_max.latitude and
                self.tile_min.longitude < point.longitude < self.tile_max.longitude)


class BoundsCalculator:
    """Computes and caches Boundary objects by tile key."""

    def __init__(self, degree: float = DEFAULT_DEGREE, distance: str = "great_circle"):
        self.degree = degree
        self.distance = distance
        self.exp = grid_precision(degree)
        self._cache: Dict[str, Boundary] = {}

    def __call__(self, tile_key: str) -> Boundary:
        return self.bounds(tile_key)

    def bounds(self, tile_key: str) -> Boundary:
        """Return the Boundary of the tile with the given key.

        Raises:
            InvalidTileKey: the key doesn't parse
            DegenerateTile: the padded box has no height
        """
        cached = self._cache.get(tile_key)
        if cached is not None:
            return cached

        key_min_x, key_min_y, key_max_x, key_max_y = parse_key(tile_key)

        min_x = decimal_adjust(key_min_x - self.degree, self.exp, "round")
        max_x = decimal_adjust(key_max_x + self.degree, self.exp, "round")
        min_y = decimal_adjust(key_min_y - self.degree, self.exp, "round")
        max_y = decimal_adjust(key_max_y + self.degree, self.exp, "round")

        nw = Point(max_y, min_x)
        ne = Point(max_y, max_x)
        sw = Point(min_y, min_x)
        se = Point(min_y, max_x)

        top = distance_km(nw, ne, self.distance)
        left = distance_km(nw, sw, self.distance)
        bottom = distance_km(sw, se, self.distance)

        if left == 0:
            raise DegenerateTile("Tile %s has a zero-length left edge" % tile_key)
        try:
            radians = math.asin((bottom - top) / left)
        except ValueError:
            raise DegenerateTile("Tile %s is too skewed to project: top %.3f km, "
                                 "bottom %.3f km, left %.3f km" %
                                 (tile_key, top, bottom, left)) from None

        boundary = Boundary(min=sw, max=ne, radians=radians, size=bottom,
                            tile_min=Point(key_min_y, key_min_x),
                            tile_max=Point(key_max_y, key_max_x))
        logger.debug("Bounds for %s: size %.3f km, skew %.6f rad",
                     tile_key, bottom, radians)
        self._cache[tile_key] = boundary
        return boundary
