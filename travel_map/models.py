"""Data models for visited locations, path segments and the map dataset."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Final

from travel_map.geo import BoundingBox, Coord


UNKNOWN_COUNTRY: Final[str] = "Unknown"
DEFAULT_ZOOM: Final[int] = 2
DEFAULT_TOLERANCE: Final[float] = 0.01
ATTRIBUTION: Final[str] = "Map data © OpenStreetMap contributors"


@dataclass(frozen=True, slots=True)
class Location:
    """A visited place taken from one point Placemark.

    Attributes:
        id: Placemark id attribute, or a "loc_<n>" fallback.
        name: Display label, trimmed.
        lat: Latitude in decimal degrees (not range-checked).
        lng: Longitude in decimal degrees (not range-checked).
        date: ISO "YYYY-MM-DD" or None when the description has no date token.
        year: Year of ``date`` or None.
        country: Last comma-separated part of the name, or UNKNOWN_COUNTRY.
    """

    id: str
    name: str
    lat: float
    lng: float
    date: str | None
    year: int | None
    country: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "lat": self.lat,
            "lng": self.lng,
            "date": self.date,
            "year": self.year,
            "country": self.country,
        }


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A plottable piece of a flight path, confined to one side of the antimeridian."""

    coords: tuple[Coord, ...]

    def to_dict(self) -> dict[str, Any]:
        return {"coords": [[lng, lat] for lng, lat in self.coords]}


@dataclass(frozen=True, slots=True)
class DateRange:
    start: str | None
    end: str | None


@dataclass(frozen=True, slots=True)
class MapDataset:
    """Render-ready output of one pipeline run.

    Note:
        An empty run keeps the inverted sentinel bbox; consumers should read
        ``total_locations == 0`` as "no locations", not as a valid box.
    """

    total_locations: int
    countries: int
    last_updated: str
    date_range: DateRange
    bbox: BoundingBox
    default_zoom: int
    default_center: Coord
    attribution: str
    locations: tuple[Location, ...]
    paths: tuple[PathSegment, ...]

    def to_dict(self) -> dict[str, Any]:
        """Build the JSON document layout (key order is part of the output contract)."""

        return {
            "metadata": {
                "totalLocations": self.total_locations,
                "countries": self.countries,
                "lastUpdated": self.last_updated,
                "dateRange": {"start": self.date_range.start, "end": self.date_range.end},
            },
            "bbox": list(self.bbox.as_list()),
            "defaultZoom": self.default_zoom,
            "defaultCenter": list(self.default_center),
            "attribution": self.attribution,
            "locations": [loc.to_dict() for loc in self.locations],
            "paths": [seg.to_dict() for seg in self.paths],
        }
