"""Write rendered tiles to a directory as <tile key>.png files."""

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterable, List

from .renderer import DensityRenderer
from .stats import Stats
from .tiles import Tile

logger = logging.getLogger(__name__)

class TileWriter:
    """Persist tiles rendered by a DensityRenderer.

    Args:
        renderer: renders each tile
        workers: number of threads rendering/writing tiles at once;
            1 renders in the calling thread
    """

    def __init__(self, renderer: DensityRenderer, workers: int = 1):
        if workers < 1:
            raise ValueError("workers must be >= 1, got %r" % workers)
        self.renderer = renderer
        self.workers = workers

    @staticmethod
    def tile_path(directory, tile_key: str) -> Path:
        """The key, commas included, is the file name."""
        return Path(directory) / f"{tile_key}.png"

    def write_tile(self, directory, tile: Tile) -> Path:
        path = self.tile_path(directory, tile.key)
        self.renderer.render(tile).save(path)
        logger.debug("Wrote %s", path)
        return path

    def write(self, directory, tiles: Iterable[Tile]) -> List[Path]:
        """Create directory if needed and write one png per tile.

        The directory already existing is fine; any other filesystem error
        is raised as is and tiles written so far are left in place.

        Returns:
            paths written, in the order the tiles were given
        """
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)
        tiles = list(tiles)

        if self.workers == 1:
            paths = [self.write_tile(directory, tile) for tile in tiles]
        else:
            with ThreadPoolExecutor(max_workers=self.workers) as exe:
                paths = list(exe.map(lambda t: self.write_tile(directory, t), tiles))

        Stats.tiles_rendered += len(paths)
        Stats.tiles_written += len(paths)
        logger.info("Wrote %d tiles to %s", len(paths), directory)
        return paths
