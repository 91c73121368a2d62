"""Read point observations from files.

Supported formats, picked by file name:
    .json               a json array of objects
    .jsonl, .gz         one json object per line, optionally gzipped
    .csv                a header row with latitude/longitude or lat/lon

Objects need latitude/longitude or lat/lon fields; anything else in a
record is ignored.  Records without usable coordinates are skipped."""

import csv
import gzip
import logging
from pathlib import Path
from typing import Iterator

import orjson

from .point import Point
from .stats import Stats

logger = logging.getLogger(__name__)

def _to_point(record) -> Point:
    """Point from a parsed record, None if it has no usable coordinates."""
    if not isinstance(record, dict):
        return None
    try:
        return Point.from_dict(record)
    except (KeyError, TypeError, ValueError):
        return None

def _skip(path, lineno, reason):
    Stats.records_skipped += 1
    logger.warning("Skipping record %d in %s: %s", lineno, path, reason)

def stream_json(path) -> Iterator[Point]:
    """Yield points from a json file holding an array of objects."""
    with open(path, 'rb') as f:
        data = orjson.loads(f.read())
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a json array of points")
    for i, record in enumerate(data, 1):
        point = _to_point(record)
        if point is None:
            _skip(path, i, "no latitude/longitude")
            continue
        yield point

def stream_jsonl(path) -> Iterator[Point]:
    """Yield points from a (possibly gzipped) json-lines file.

    A truncated gzip file yields what could be read and logs a warning."""
    opener = gzip.open if str(path).endswith(".gz") else open
    try:
        with opener(path, 'rb') as f:
            for lineno, line in enumerate(f, 1):
                if not line.strip():
                    continue
                try:
                    record = orjson.loads(line)
                except orjson.JSONDecodeError:
                    _skip(path, lineno, "json parse fail")
                    continue
                point = _to_point(record)
                if point is None:
                    _skip(path, lineno, "no latitude/longitude")
                    continue
                yield point
    except EOFError as e:
        logger.warning(f"Error reading {path}: {e} (using partial data)")

def stream_csv(path) -> Iterator[Point]:
    """Yield points from a csv file with a header row."""
    with open(path, 'r', encoding='utf-8', newline='') as f:
        reader = csv.DictReader(f)
        for lineno, row in enumerate(reader, 2):
            point = _to_point(row)
            if point is None:
                _skip(path, lineno, "no latitude/longitude")
                continue
            yield point

def stream_points(path) -> Iterator[Point]:
    """Yield points from path, format chosen by suffix."""
    name = Path(path).name.lower()
    if name.endswith(".csv"):
        return stream_csv(path)
    if name.endswith(".jsonl") or name.endswith(".gz"):
        return stream_jsonl(path)
    if name.endswith(".json"):
        return stream_json(path)
    raise ValueError(f"Don't know how to read {path}, expected .json, .jsonl, .gz or .csv")
