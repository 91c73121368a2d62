#!/usr/bin/env python3
"""Generate heatmap tiles from point files.

Reads points from json, jsonl(.gz) or csv files, tiles them and writes one
<minX,minY,maxX,maxY>.png per tile that has points of its own.

Usage:
    mapheat points.json --output-dir tiles/
    mapheat day1.jsonl.gz day2.jsonl.gz --output-dir tiles/ --size 1500 --workers 4
"""

import argparse
import itertools
import logging
import sys
import time

from prometheus_client import start_http_server

from .config import load_config
from .errors import InvalidConfig, InvalidPoint
from .mapheat import MapHeat
from .mapheat_logger import Logger, set_all_loggers
from .readers import stream_points
from .stats import Stats

logger = logging.getLogger(__name__)

def build_parser():
    parser = argparse.ArgumentParser(
        description="Render geographic points into heatmap tiles")
    parser.add_argument("inputs", nargs="+",
                        help="Point files (.json, .jsonl, .gz, .csv)")
    parser.add_argument("--output-dir", type=str, default="tiles",
                        help="Directory to write tiles to (default: tiles)")
    parser.add_argument("--config", type=str, default=None,
                        help="YAML config file")
    parser.add_argument("--size", type=int, default=None,
                        help="Padded raster size in pixels, divisible by 3")
    parser.add_argument("--radius", type=float, default=None,
                        help="Point radius in pixels")
    parser.add_argument("--blur", type=float, default=None,
                        help="Soft point blur; 0 uses a box blur pass")
    parser.add_argument("--degree", type=float, default=None,
                        help="Tile edge in decimal degrees")
    parser.add_argument("--workers", type=int, default=1,
                        help="Threads for rendering tiles (default: 1)")
    parser.add_argument("--skip-invalid", action="store_true",
                        help="Skip points that can't be tiled instead of failing")
    parser.add_argument("--mport", type=int, default=None,
                        help="Serve prometheus metrics on this port")
    parser.add_argument("-d", "--debug", action="store_true")
    return parser

def import_files(mapheat: MapHeat, paths, skip_invalid=False) -> int:
    points = itertools.chain.from_iterable(stream_points(p) for p in paths)
    if not skip_invalid:
        return mapheat.import_points(points)

    count = 0
    for point in points:
        try:
            mapheat.add_point(point)
        except InvalidPoint as e:
            logger.warning("Skipping point: %s", e)
            continue
        count += 1
    return count

def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    Logger(level=logging.DEBUG if args.debug else logging.INFO)
    if args.debug:
        set_all_loggers(logging.DEBUG)

    overrides = {k: getattr(args, k) for k in ("size", "radius", "blur", "degree")
                 if getattr(args, k) is not None}
    try:
        config = load_config(args.config)
        if overrides:
            config = config.replace(**overrides)
    except (InvalidConfig, OSError) as e:
        parser.error(str(e))
    if args.workers < 1:
        parser.error("--workers must be >= 1")

    if args.mport:
        Stats.register_prom_callbacks()
        start_http_server(args.mport)

    t0 = time.time()
    mapheat = MapHeat(config)
    count = import_files(mapheat, args.inputs, args.skip_invalid)
    paths = mapheat.write(args.output_dir, workers=args.workers)

    logger.info("Done: %d points, %d tiles written to %s in %.1fs",
                count, len(paths), args.output_dir, time.time() - t0)
    return 0

if __name__ == "__main__":
    sys.exit(main())
