"""Exceptions raised by the mapheat library."""


class MapHeatError(Exception):
    """Base class for all mapheat errors."""


class InvalidConfig(MapHeatError, ValueError):
    """A configuration value is missing, unknown or out of range."""


class InvalidPoint(MapHeatError, ValueError):
    """A point has non-finite or out of range coordinates."""


class InvalidTileKey(MapHeatError, ValueError):
    """A tile key does not parse into minX,minY,maxX,maxY."""


class DegenerateTile(MapHeatError):
    """Tile geometry has a zero-length reference edge.

    This can only happen when the tile size is misconfigured, so it is
    never handled per point."""
