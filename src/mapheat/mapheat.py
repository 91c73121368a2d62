"""This is the main API for the library.

The following code will tile a list of points and write one png per
tile that has points of its own:
    mapheat = MapHeat(HeatmapConfig(size=1500))
    mapheat.import_points(points)
    mapheat.write("tiles/")

Points can be Point objects or dicts with latitude/longitude keys.  The
configuration can also come from a yaml file:
    mapheat = MapHeat(yaml_file="config.yaml")

See config.py for the configuration options.
"""
import logging
from typing import Dict, Iterable, List, Union

from PIL import Image

from .bounds import Boundary, BoundsCalculator
from .config import HeatmapConfig
from .geokey import Position, key
from .point import Point
from .renderer import DensityRenderer
from .stats import Stats
from .tiles import Tile, TileIndex
from .writer import TileWriter

from .mapheat_logger import Logger

logger = logging.getLogger(__name__)
logger.level = logging.INFO
LOGGER = Logger()

class MapHeat:
    """Main API for the library."""

    def __init__(self, config: HeatmapConfig = None, yaml_file=None):
        """Either a config or a yaml_file may be given; with neither the
        defaults are used.

        Args:
            config: optional HeatmapConfig
            yaml_file: optional path to a yaml config to load
        """
        assert not (config and yaml_file), "Provide config or yaml_file, not both"
        if yaml_file:
            config = HeatmapConfig.from_yaml(yaml_file)
        self._setup(config or HeatmapConfig())

    def _setup(self, config: HeatmapConfig) -> None:
        self.config = config
        self.bounds_calculator = BoundsCalculator(config.degree, config.distance)
        self.index = TileIndex(config.degree, bounds=self.bounds_calculator)
        self.renderer = DensityRenderer(config)

    def set_blur(self, blur: float) -> None:
        """Change the blur for subsequent renders.  Tiles already imported
        are kept."""
        self.config = self.config.replace(blur=blur)
        self.renderer = DensityRenderer(self.config)

    def key(self, point: Union[Point, dict], position=Position.CENTER) -> str:
        """Key of the tile containing point, or one of its neighbors."""
        return key(_as_point(point), position, self.config.degree)

    def bounds(self, tile_key: str) -> Boundary:
        return self.bounds_calculator(tile_key)

    def add_point(self, point: Union[Point, dict]) -> str:
        """Add one point, returns the key of its own tile."""
        return self.index.add_point(_as_point(point))

    def import_points(self, data: Iterable[Union[Point, dict]]) -> int:
        """Add every point in data, returns the number added."""
        return self.index.import_points(_as_point(p) for p in data)

    def tiles(self) -> List[Tile]:
        """Tiles with data of their own, i.e. the ones that are rendered."""
        return self.index.non_empty_tiles()

    def draw(self, tile: Tile) -> Image.Image:
        """Render a single tile."""
        return self.renderer.render(tile)

    def render(self) -> Dict[str, Image.Image]:
        """Render every non-empty tile, keyed by tile key."""
        images = {tile.key: self.renderer.render(tile) for tile in self.tiles()}
        Stats.tiles_rendered += len(images)
        return images

    def write(self, directory, workers: int = 1) -> list:
        """Write every non-empty tile to directory/<key>.png.

        Returns:
            list of the paths written
        """
        writer = TileWriter(self.renderer, workers=workers)
        return writer.write(directory, self.tiles())


def _as_point(point) -> Point:
    if isinstance(point, Point):
        return point
    return Point.from_dict(point)
