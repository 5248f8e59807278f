"""Geospatial utilities: coordinate helpers and the bounding-box reduction."""

from __future__ import annotations

import math
from dataclasses import dataclass
from functools import reduce
from typing import Iterable

# (lng, lat) in decimal degrees, GeoJSON axis order
Coord = tuple[float, float]


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute Haversine distance in meters between two lat/lon points.

    Args:
        lat1: Latitude 1 in degrees.
        lon1: Longitude 1 in degrees.
        lat2: Latitude 2 in degrees.
        lon2: Longitude 2 in degrees.

    Returns:
        Distance in meters.
    """

    r = 6_371_000.0  # mean Earth radius in meters
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2.0) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2.0) ** 2
    c = 2.0 * math.atan2(math.sqrt(a), math.sqrt(1.0 - a))
    return r * c


def polyline_length_m(coords: Iterable[Coord]) -> float:
    """Sum of Haversine distances along a (lng, lat) polyline."""

    total = 0.0
    prev: Coord | None = None
    for cur in coords:
        if prev is not None:
            total += haversine_m(prev[1], prev[0], cur[1], cur[0])
        prev = cur
    return total


@dataclass(frozen=True, slots=True)
class BoundingBox:
    """Axis-aligned lng/lat box.

    The empty box is inverted (min=180/90, max=-180/-90) so that the first
    extended point always wins every comparison.
    """

    min_lng: float = 180.0
    min_lat: float = 90.0
    max_lng: float = -180.0
    max_lat: float = -90.0

    @classmethod
    def empty(cls) -> BoundingBox:
        return cls()

    @property
    def is_empty(self) -> bool:
        return self.min_lng > self.max_lng or self.min_lat > self.max_lat

    def extend(self, lng: float, lat: float) -> BoundingBox:
        """Return a new box that also covers (lng, lat)."""

        return BoundingBox(
            min_lng=min(self.min_lng, lng),
            min_lat=min(self.min_lat, lat),
            max_lng=max(self.max_lng, lng),
            max_lat=max(self.max_lat, lat),
        )

    def merge(self, other: BoundingBox) -> BoundingBox:
        """Combine two partial boxes (e.g. from separate worker chunks)."""

        return BoundingBox(
            min_lng=min(self.min_lng, other.min_lng),
            min_lat=min(self.min_lat, other.min_lat),
            max_lng=max(self.max_lng, other.max_lng),
            max_lat=max(self.max_lat, other.max_lat),
        )

    def center(self) -> Coord:
        return ((self.min_lng + self.max_lng) / 2.0, (self.min_lat + self.max_lat) / 2.0)

    def contains(self, lng: float, lat: float) -> bool:
        return self.min_lng <= lng <= self.max_lng and self.min_lat <= lat <= self.max_lat

    def as_list(self) -> list[float]:
        return [self.min_lng, self.min_lat, self.max_lng, self.max_lat]


def bbox_of(coords: Iterable[Coord]) -> BoundingBox:
    """Fold (lng, lat) pairs into a bounding box."""

    return reduce(lambda box, c: box.extend(c[0], c[1]), coords, BoundingBox.empty())
