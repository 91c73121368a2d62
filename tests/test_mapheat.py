"""Tests for the MapHeat API."""

import orjson
import pytest
from PIL import Image

from mapheat import HeatmapConfig, InvalidPoint, MapHeat, Point
from mapheat.stats import Stats

from testinfra import (FIXTURE_TILES, FIXTURE_UNIQUE_POINTS, LOCATION,
                       LOCATION_KEY, POINTS_JSON, load_json, small_config)


@pytest.fixture
def mapheat():
    Stats.reset()
    mh = MapHeat(small_config())
    mh.import_points(orjson.loads(load_json(POINTS_JSON)))
    return mh


def test_defaults():
    mh = MapHeat()
    assert mh.config == HeatmapConfig()
    assert mh.tiles() == []


def test_key_and_bounds_accept_dicts():
    mh = MapHeat()
    assert mh.key({"latitude": 12.5231, "longitude": 103.412}) == LOCATION_KEY
    assert mh.key({"lat": 12.5231, "lon": 103.412}, "top") == "103.4,12.6,103.5,12.7"
    assert mh.bounds(LOCATION_KEY).min == Point(12.4, 103.3)


def test_add_point():
    mh = MapHeat()
    assert mh.add_point(LOCATION) == LOCATION_KEY
    assert mh.add_point({"lat": 12.5231, "lon": 103.412}) == LOCATION_KEY
    assert [t.key for t in mh.tiles()] == [LOCATION_KEY]
    assert len(mh.tiles()[0].core) == 1


def test_add_invalid_point():
    mh = MapHeat()
    with pytest.raises(InvalidPoint):
        mh.add_point({"lat": 91.0, "lon": 0.0})


def test_import_fixture(mapheat):
    assert {t.key for t in mapheat.tiles()} == FIXTURE_TILES
    assert sum(len(t.core) for t in mapheat.tiles()) == FIXTURE_UNIQUE_POINTS
    assert Stats.points_added == FIXTURE_UNIQUE_POINTS


def test_render(mapheat):
    images = mapheat.render()
    assert set(images) == FIXTURE_TILES
    for img in images.values():
        assert isinstance(img, Image.Image)
        assert img.size == (100, 100)
        assert img.getextrema()[3][1] > 0
    assert Stats.tiles_rendered == 2


def test_draw(mapheat):
    tile = mapheat.tiles()[0]
    assert mapheat.draw(tile).size == (100, 100)


def test_write(mapheat, tmp_path):
    paths = mapheat.write(tmp_path)
    assert {p.name for p in paths} == {k + ".png" for k in FIXTURE_TILES}
    assert {p.name for p in tmp_path.iterdir()} == {k + ".png" for k in FIXTURE_TILES}


def test_write_threaded(mapheat, tmp_path):
    assert len(mapheat.write(tmp_path, workers=4)) == 2


def test_set_blur_keeps_points(mapheat):
    hard = mapheat.render()
    mapheat.set_blur(4)
    assert mapheat.config.blur == 4
    assert {t.key for t in mapheat.tiles()} == FIXTURE_TILES
    soft = mapheat.render()
    assert hard.keys() == soft.keys()
    assert any(hard[k].tobytes() != soft[k].tobytes() for k in hard)


def test_yaml_file(tmp_path):
    fn = tmp_path / "config.yaml"
    fn.write_text("size: 600\ndegree: 0.25\n")
    mh = MapHeat(yaml_file=fn)
    assert mh.config.size == 600
    assert mh.key(LOCATION) == "103.25,12.50,103.50,12.75"


def test_set_blur_does_not_share_gradient():
    mh = MapHeat(small_config())
    before = mh.config
    mh.set_blur(2)
    assert mh.config.gradient is not before.gradient
