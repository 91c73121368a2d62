"""Tile keys.

The earth is cut into squares of `degree` decimal degrees.  A tile is
identified by its own bounding box written as "minX,minY,maxX,maxY"
(longitude first), every field with the number of decimals the tile size
needs.  For the default 0.1 degree tiles the point (12.5231, 103.412)
lives in "103.4,12.5,103.5,12.6".

The key is the only identity a tile has; bounds.py parses it back into
geometry."""

from decimal import Decimal
from enum import Enum
from typing import Union

from .errors import InvalidTileKey
from .point import Point
from .util import decimal_places, snap_to_grid, to_decimal

DEFAULT_DEGREE = 0.1

class Position(Enum):
    """Which tile relative to the one containing a point."""
    CENTER = 0
    TOP = 1
    RIGHT = 2
    BOTTOM = 3
    LEFT = 4

    @classmethod
    def parse(cl, position) -> "Position":
        """Accept a Position, its name in any case, or its int value."""
        if position is None:
            return cl.CENTER
        if isinstance(position, cl):
            return position
        if isinstance(position, str):
            try:
                return cl[position.upper()]
            except KeyError:
                raise ValueError("Unknown position: " + position) from None
        return cl(position)

NEIGHBORS = (Position.TOP, Position.RIGHT, Position.BOTTOM, Position.LEFT)

def grid_precision(degree: float = DEFAULT_DEGREE) -> int:
    """Decimals used for every field of a key."""
    return decimal_places(degree)

def key(point: Point, position: Union[Position, str, int, None] = Position.CENTER,
        degree: float = DEFAULT_DEGREE) -> str:
    """Key of the tile containing point, or of one of its four neighbors.

    Args:
        point: the observation
        position: CENTER for the point's own tile, TOP/RIGHT/BOTTOM/LEFT
            for the neighbor one tile north/east/south/west of it
        degree: tile edge length in decimal degrees

    Returns:
        "minX,minY,maxX,maxY"
    """
    position = Position.parse(position)
    longitude = to_decimal(point.longitude)
    latitude = point.latitude

    # shift in decimal so a neighbor of 12.6 is exactly 12.7
    step = to_decimal(degree)
    if position is Position.TOP:
        latitude = to_decimal(latitude) + step
    elif position is Position.BOTTOM:
        latitude = to_decimal(latitude) - step
    elif position is Position.RIGHT:
        longitude += step
    elif position is Position.LEFT:
        longitude -= step

    min_x = snap_to_grid(wrap_longitude(longitude), degree)
    min_y = snap_to_grid(latitude, degree)
    return format_key(min_x, min_y, min_x + step, min_y + step, degree)

def wrap_longitude(longitude: Decimal) -> Decimal:
    """Bring a longitude at most one turn off into [-180, 180), so the
    neighbor east of 179.95 is the tile at -180.0."""
    if not longitude.is_finite():
        return longitude
    if longitude >= 180:
        return longitude - 360
    if longitude < -180:
        return longitude + 360
    return longitude

def format_key(min_x, min_y, max_x, max_y, degree: float = DEFAULT_DEGREE) -> str:
    exp = grid_precision(degree)
    return ",".join(f"{v:.{exp}f}" for v in (min_x, min_y, max_x, max_y))

def parse_key(tile_key: str) -> tuple[float, float, float, float]:
    """Split a key back into (min_x, min_y, max_x, max_y) floats."""
    parts = tile_key.split(",") if isinstance(tile_key, str) else []
    if len(parts) != 4:
        raise InvalidTileKey("Tile key must have 4 fields: " + repr(tile_key))
    try:
        min_x, min_y, max_x, max_y = (float(p) for p in parts)
    except ValueError:
        raise InvalidTileKey("Tile key field is not a number: " + repr(tile_key)) from None
    if not (min_x < max_x and min_y < max_y):
        raise InvalidTileKey("Tile key has an empty box: " + tile_key)
    return min_x, min_y, max_x, max_y
