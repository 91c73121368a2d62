"""Tests for assigning points to tiles."""

import math

import pytest

from mapheat.errors import InvalidPoint
from mapheat.point import Point
from mapheat.stats import Stats
from mapheat.tiles import TileIndex

from testinfra import LOCATION, LOCATION_KEY

NEIGHBOR_KEYS = ["103.4,12.4,103.5,12.5", "103.5,12.5,103.6,12.6",
                 "103.4,12.6,103.5,12.7", "103.3,12.5,103.4,12.6"]


class TestAddPoint:

    def setup_method(self):
        Stats.reset()
        self.index = TileIndex()
        self.center_key = self.index.add_point(LOCATION)

    def test_returns_center_key(self):
        assert self.center_key == LOCATION_KEY

    def test_adds_point_to_members_and_core_of_center(self):
        tile = self.index[LOCATION_KEY]
        assert tile.members == {LOCATION}
        assert tile.core == {LOCATION}

    def test_adds_point_to_members_of_neighbors(self):
        for tile_key in NEIGHBOR_KEYS:
            assert tile_key in self.index
            assert self.index[tile_key].members == {LOCATION}
            assert self.index[tile_key].core == set()

    def test_creates_five_tiles(self):
        assert len(self.index) == 5
        assert Stats.tiles_created == 5
        assert Stats.points_added == 1

    def test_same_point_twice(self):
        self.index.add_point(LOCATION)
        self.index.add_point(LOCATION)
        assert len(self.index) == 5
        for tile_key in [LOCATION_KEY] + NEIGHBOR_KEYS:
            assert len(self.index[tile_key].members) == 1
        assert len(self.index[LOCATION_KEY].core) == 1

    def test_equal_coordinates_are_the_same_point(self):
        """Deduplication is by value, not by object identity."""
        self.index.add_point(Point(latitude=12.5231, longitude=103.412))
        assert len(self.index[LOCATION_KEY].members) == 1
        assert len(self.index[LOCATION_KEY].core) == 1

    def test_bounds_computed_with_tile(self):
        tile = self.index[LOCATION_KEY]
        assert tile.bounds is self.index.bounds(LOCATION_KEY)
        assert tile.bounds.tile_min == Point(12.5, 103.4)


def test_non_empty_tiles_excludes_neighbor_only_tiles():
    index = TileIndex()
    index.add_point(LOCATION)
    tiles = index.non_empty_tiles()
    assert [t.key for t in tiles] == [LOCATION_KEY]


def test_adjacent_points():
    """Two points one tile apart share two tiles, each seeding the other."""
    index = TileIndex()
    lower = Point(12.55, 103.45)
    upper = Point(12.65, 103.45)
    index.add_point(lower)
    index.add_point(upper)

    assert len(index) == 8
    assert {t.key for t in index.non_empty_tiles()} == {
        "103.4,12.5,103.5,12.6", "103.4,12.6,103.5,12.7"}
    assert index["103.4,12.5,103.5,12.6"].members == {lower, upper}
    assert index["103.4,12.5,103.5,12.6"].core == {lower}
    assert index["103.4,12.6,103.5,12.7"].core == {upper}


def test_core_is_subset_of_members():
    index = TileIndex()
    index.import_points(Point(12.5 + i * 0.013, 103.4 + i * 0.017) for i in range(40))
    for tile_key in index:
        tile = index[tile_key]
        assert tile.core <= tile.members


def test_import_points_counts():
    index = TileIndex()
    assert index.import_points([LOCATION, LOCATION, Point(-33.8688, 151.2093)]) == 3
    assert len(index.non_empty_tiles()) == 2


def test_other_degree():
    index = TileIndex(degree=0.25)
    assert index.add_point(LOCATION) == "103.25,12.50,103.50,12.75"
    assert len(index) == 5


@pytest.mark.parametrize("point", [
    Point(math.nan, 103.4),
    Point(12.5, math.inf),
    Point(95.0, 10.0),
    Point(89.85, 10.0),
    Point(-89.9, 10.0),
    Point(12.5, 180.5),
    Point(12.5, -181.0),
])
def test_invalid_points_rejected(point):
    Stats.reset()
    index = TileIndex()
    with pytest.raises(InvalidPoint):
        index.add_point(point)
    assert len(index) == 0
    assert Stats.points_rejected == 1


def test_edge_of_valid_range():
    index = TileIndex()
    index.add_point(Point(89.79, 179.99))
    index.add_point(Point(-89.8, -180.0))
    assert len(index.non_empty_tiles()) == 2


@pytest.mark.parametrize("point", [
    Point(88.59, 10.0),
    Point(88.2, 10.0),
    Point(-88.3, 10.0),
])
def test_pole_limit_off_grid_degree(point):
    """90 isn't a multiple of 0.7, so the limit follows the tile grid."""
    index = TileIndex(degree=0.7)
    with pytest.raises(InvalidPoint):
        index.add_point(point)
    assert len(index) == 0


def test_highest_tile_off_grid_degree():
    index = TileIndex(degree=0.7)
    index.add_point(Point(88.19, 10.0))
    index.add_point(Point(-87.5, 10.0))
    assert len(index.non_empty_tiles()) == 2


def test_neighbors_wrap_at_antimeridian():
    index = TileIndex()
    east = Point(12.55, 179.95)
    west = Point(12.55, -179.95)
    index.add_point(east)
    index.add_point(west)

    assert index["-180.0,12.5,-179.9,12.6"].members == {east, west}
    assert index["179.9,12.5,180.0,12.6"].members == {east, west}
    assert not any(float(k.split(",")[2]) > 180 for k in index)
