import math
from dataclasses import dataclass

from geopy import distance

from .errors import InvalidConfig

# distance primitives by config name, all return geopy Distance objects
DISTANCES = {
    "great_circle": distance.great_circle,
    "geodesic": distance.geodesic,
}

@dataclass(frozen=True)
class Point:
    """A single lat/long observation.

    Points compare and hash by value, so two separately constructed points
    with identical coordinates are the same member of a tile."""
    latitude: float = 0.
    longitude: float = 0.

    @classmethod
    def from_dict(cl, d: dict):
        """Build a point from a dict with latitude/longitude or lat/lon keys.
        Raises KeyError if either coordinate is missing."""
        lat = d["latitude"] if "latitude" in d else d["lat"]
        lon = d["longitude"] if "longitude" in d else d["lon"]
        return Point(float(lat), float(lon))

    def is_finite(self) -> bool:
        return math.isfinite(self.latitude) and math.isfinite(self.longitude)

    def to_str(self):
        return "%.6f, %.6f" % (self.latitude, self.longitude)

    def __sub__(self, other):
        """Return great circle distance to the other Point in km"""
        return distance_km(self, other)


def distance_km(a: Point, b: Point, method: str = "great_circle") -> float:
    """Distance between two points in kilometers.

    Args:
        a, b: the points; order doesn't matter
        method: "great_circle" (spherical earth) or "geodesic" (WGS-84)
    """
    try:
        fn = DISTANCES[method]
    except KeyError:
        raise InvalidConfig("Unknown distance method: " + str(method)) from None
    return fn((a.latitude, a.longitude), (b.latitude, b.longitude)).km
