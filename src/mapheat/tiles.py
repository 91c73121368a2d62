"""Storage for all Tile objects of one import, and assignment of points
to tiles."""
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Set

from .bounds import Boundary, BoundsCalculator
from .errors import InvalidPoint
from .geokey import DEFAULT_DEGREE, NEIGHBORS, Position, key
from .point import Point
from .stats import Stats
from .util import snap_to_grid, to_decimal

logger = logging.getLogger(__name__)

@dataclass
class Tile:
    """One tile and the points that influence it.

    members holds every point whose 5-tile neighborhood includes this tile
    and is what gets drawn.  core holds only points whose own tile this
    is; a tile is rendered only if core is non-empty."""
    key: str
    bounds: Boundary
    members: Set[Point] = field(default_factory=set)
    core: Set[Point] = field(default_factory=set)

    def is_empty(self) -> bool:
        return not self.core


class TileIndex:
    """all Tile objects in the system, indexed by tile key.

    Build the index completely with add_point() before rendering; after
    that it is only read, and can be read from several threads."""

    def __init__(self, degree: float = DEFAULT_DEGREE, distance: str = "great_circle",
                 bounds: Optional[BoundsCalculator] = None):
        self.tile_dict: Dict[str, Tile] = {}    # all tiles in the system.
        self.degree = degree
        self.bounds = bounds or BoundsCalculator(degree, distance)

        self.step = to_decimal(degree)

    def __len__(self):
        return len(self.tile_dict)

    def __contains__(self, tile_key):
        return tile_key in self.tile_dict

    def __getitem__(self, tile_key) -> Tile:
        return self.tile_dict[tile_key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.tile_dict)

    def get(self, tile_key, default=None) -> Optional[Tile]:
        return self.tile_dict.get(tile_key, default)

    def check_point(self, point: Point) -> None:
        """Raise InvalidPoint if point can't be tiled."""
        if not point.is_finite():
            raise InvalidPoint("Non-finite coordinates: %r" % (point,))
        # the padding rings of the TOP and BOTTOM neighbors must stay off
        # the poles; 90 need not be a multiple of the degree
        tile_min = snap_to_grid(point.latitude, self.degree)
        if tile_min + 3 * self.step > 90 or tile_min - 2 * self.step < -90:
            raise InvalidPoint("Latitude %s too close to a pole for %s degree tiles" %
                               (point.latitude, self.degree))
        if not -180 <= point.longitude <= 180:
            raise InvalidPoint("Longitude %s outside [-180, 180]" % point.longitude)

    def add_point(self, point: Point) -> str:
        """
        Add a point to the tile containing it and to its four neighbors.

        Adding the same coordinates again changes nothing.

        Args:
            point: observation to add

        Returns:
            key of the tile containing the point.

        Raises:
            InvalidPoint: the point has non-finite or out of range coordinates
        """
        try:
            self.check_point(point)
        except InvalidPoint:
            Stats.points_rejected += 1
            raise

        center_key = key(point, Position.CENTER, self.degree)
        keys = [center_key] + [key(point, p, self.degree) for p in NEIGHBORS]

        for tile_key in keys:
            tile = self.tile_dict.get(tile_key)
            if tile is None:
                tile = Tile(tile_key, self.bounds(tile_key))
                self.tile_dict[tile_key] = tile
                Stats.tiles_created += 1
                logger.debug("New tile %s", tile_key)
            tile.members.add(point)

        core = self.tile_dict[center_key].core
        if point not in core:
            core.add(point)
            Stats.points_added += 1
        return center_key

    def import_points(self, points: Iterable[Point]) -> int:
        """Add every point, returns how many were added."""
        count = 0
        for point in points:
            self.add_point(point)
            count += 1
        logger.info("Imported %d points into %d tiles (%d non-empty)",
                    count, len(self.tile_dict), len(self.non_empty_tiles()))
        return count

    def non_empty_tiles(self) -> List[Tile]:
        """Tiles with at least one point of their own; these are the ones
        that get rendered.  Tiles only reached by neighbor overlap are
        left out."""
        return [tile for tile in self.tile_dict.values() if not tile.is_empty()]
