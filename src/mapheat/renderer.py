"""Render the points of a tile into a colorized density image.

Steps for one tile:
  1. project every member point into pixel space on a size x size raster
     that covers the padded 3x3 tile box,
  2. stamp a low-opacity circle per point; overlapping circles composite
     into a density (opacity) raster,
  3. smooth it (box blur, or soft circles when blur > 0),
  4. color every painted pixel from a 256 entry gradient lookup table,
     keyed by its opacity,
  5. crop the center third, which is exactly the tile's own box.

Density lives in the alpha channel, the gradient only sets RGB.
"""

import logging
import math
from typing import Iterable, Tuple

import numpy as np
from PIL import Image, ImageColor, ImageFilter

from .bounds import Boundary
from .config import HeatmapConfig
from .point import Point, distance_km
from .tiles import Tile

logger = logging.getLogger(__name__)

BLUR_RADIUS = 3      # pixels, box blur pass used when blur == 0
LUT_SIZE = 256
ALPHA_TO_INDEX = 4   # alpha 0..63 spans the whole lookup table


def round_half_up(value: float) -> int:
    """Round .5 up, not to even as round() does"""
    return int(math.floor(value + 0.5))


def project(point: Point, bounds: Boundary, size: int,
            distance: str = "great_circle") -> Tuple[int, int]:
    """Convert a point to pixel coordinates on the padded raster.

    A degree of longitude is shorter at higher latitudes, so instead of
    scaling lat/long linearly we measure two geodesic legs from the
    padded box's south-west corner:

        q1: along the point's parallel, from the box's left edge
        q3: along the point's meridian, from the box's bottom edge

    and undo the skew of the left edge (bounds.radians):

        q2 = q3 * sin(radians)    horizontal drift of the meridian
        q4 = q3 * cos(radians)    true height above the bottom edge

    Both legs are scaled by the bottom edge length (bounds.size).  Row 0
    is north.

    Returns:
        (x, y) pixel coordinates, may be slightly outside [0, size)
    """
    origin_left = Point(point.latitude, bounds.min.longitude)
    origin_bottom = Point(bounds.min.latitude, point.longitude)
    q1 = distance_km(origin_left, point, distance)
    q3 = distance_km(point, origin_bottom, distance)
    q2 = q3 * math.sin(bounds.radians)
    q4 = q3 * math.cos(bounds.radians)

    x = round_half_up(((q1 + q2) / bounds.size) * size)
    y = size - round_half_up((q4 / bounds.size) * size)
    return x, y


def circle_stamp(radius: float, blur: float = 0.) -> np.ndarray:
    """Coverage (0..1) of the circle drawn for one point.

    With blur > 0 the circle is softened with a gaussian of sigma blur/2,
    which is what a canvas shadow of that blur looks like.  The stamp is
    square with odd edge length, centered on the middle pixel."""
    extent = int(math.ceil(radius + 2 * blur))
    yy, xx = np.mgrid[-extent:extent + 1, -extent:extent + 1]
    stamp = ((xx * xx + yy * yy) <= radius * radius).astype(np.float32)
    if blur > 0:
        img = Image.fromarray((stamp * 255).astype(np.uint8))
        img = img.filter(ImageFilter.GaussianBlur(blur / 2))
        stamp = np.asarray(img, dtype=np.float32) / 255.
    return stamp


def _rgb(color) -> Tuple[int, int, int]:
    if isinstance(color, str):
        return ImageColor.getrgb(color)[:3]
    return tuple(color[:3])


def gradient_lut(gradient: dict) -> np.ndarray:
    """Sample the weight -> color stops into a (256, 3) uint8 table.

    Index i corresponds to weight i/255.  Colors are interpolated linearly
    between stops and held constant before the first and after the last
    stop, like a canvas linear gradient."""
    weights = sorted(gradient)
    colors = np.array([_rgb(gradient[w]) for w in weights], dtype=np.float64)
    axis = np.linspace(0., 1., LUT_SIZE)
    lut = np.column_stack([np.interp(axis, weights, colors[:, c])
                           for c in range(3)])
    return np.rint(lut).astype(np.uint8)


def colorize(alpha: np.ndarray, lut: np.ndarray) -> np.ndarray:
    """Turn a uint8 opacity raster into RGBA.

    Every pixel keeps its alpha; pixels with a non-zero lookup index
    (alpha * 4, capped at 255) get the table color."""
    index = np.minimum(alpha.astype(np.uint16) * ALPHA_TO_INDEX, LUT_SIZE - 1)
    rgba = np.zeros(alpha.shape + (4,), dtype=np.uint8)
    rgba[..., 3] = alpha
    painted = index > 0
    rgba[painted, :3] = lut[index[painted]]
    return rgba


class DensityRenderer:
    """Renders tiles with one fixed HeatmapConfig.

    A renderer holds no per-tile state, so one instance can render
    different tiles from several threads."""

    def __init__(self, config: HeatmapConfig = None):
        self.config = config or HeatmapConfig()
        self.stamp = circle_stamp(self.config.radius, self.config.blur)
        self.lut = gradient_lut(self.config.gradient)

    @property
    def tile_size(self) -> int:
        """Edge in pixels of the rendered (cropped) tile."""
        return self.config.size // 3

    def project(self, point: Point, bounds: Boundary) -> Tuple[int, int]:
        return project(point, bounds, self.config.size, self.config.distance)

    def density(self, points: Iterable[Point], bounds: Boundary) -> np.ndarray:
        """Accumulate one stamp per point, source-over composited, into a
        float32 opacity raster of the padded box."""
        size = self.config.size
        opacity = self.config.opacity
        stamp = self.stamp
        extent = stamp.shape[0] // 2
        density = np.zeros((size, size), dtype=np.float32)

        for point in points:
            x, y = self.project(point, bounds)
            x0, y0 = x - extent, y - extent
            # clip the stamp to the raster
            dx0, dy0 = max(x0, 0), max(y0, 0)
            dx1 = min(x0 + stamp.shape[1], size)
            dy1 = min(y0 + stamp.shape[0], size)
            if dx0 >= dx1 or dy0 >= dy1:
                logger.debug("Point %s projects off the raster at %d,%d",
                             point.to_str(), x, y)
                continue
            src = stamp[dy0 - y0:dy1 - y0, dx0 - x0:dx1 - x0] * opacity
            region = density[dy0:dy1, dx0:dx1]
            region += src * (1. - region)
        return density

    def alpha(self, density: np.ndarray) -> np.ndarray:
        """Quantize density to uint8 alpha and apply the smoothing pass."""
        alpha = np.rint(np.clip(density, 0., 1.) * 255).astype(np.uint8)
        if self.config.blur > 0:
            return alpha    # already soft from the stamps
        img = Image.fromarray(alpha).filter(ImageFilter.BoxBlur(BLUR_RADIUS))
        return np.asarray(img)

    def crop(self, rgba: np.ndarray) -> np.ndarray:
        """Center third of the padded raster.  Sizes not divisible by 3 are
        rejected by HeatmapConfig."""
        third = self.tile_size
        return rgba[third:2 * third, third:2 * third]

    def render_points(self, points: Iterable[Point], bounds: Boundary) -> Image.Image:
        """Render arbitrary points against a tile's bounds."""
        alpha = self.alpha(self.density(points, bounds))
        rgba = self.crop(colorize(alpha, self.lut))
        return Image.fromarray(np.ascontiguousarray(rgba))

    def render(self, tile: Tile) -> Image.Image:
        """Render a tile's members into an RGBA image of the tile's own box.

        No validation is done; a tile without members renders fully
        transparent."""
        logger.debug("Rendering %s with %d points", tile.key, len(tile.members))
        return self.render_points(tile.members, tile.bounds)
