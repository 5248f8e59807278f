"""Location extraction from point Placemarks."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Mapping, Protocol

from travel_map.geo import Coord
from travel_map.kml_io import GeoFeature
from travel_map.models import UNKNOWN_COUNTRY, Location
from travel_map.timeutils import DAY_MONTH_YEAR_RE, MONTHS, parse_day_month_year, year_of


class ExtractionRule(Protocol):
    """Free-text parsing rules for one export format."""

    def parse_date(self, description: str) -> str | None:
        """Return "YYYY-MM-DD" or None."""
        ...

    def parse_country(self, name: str) -> str:
        """Return the country label for a display name."""
        ...


@dataclass(frozen=True, slots=True)
class DayMonthYearRule:
    """Rule for exports that embed "DDMmmYYYY" dates and "City, Country" names."""

    pattern: re.Pattern[str] = DAY_MONTH_YEAR_RE
    months: Mapping[str, str] = field(default_factory=lambda: dict(MONTHS))
    unknown_country: str = UNKNOWN_COUNTRY

    def parse_date(self, description: str) -> str | None:
        return parse_day_month_year(description, self.pattern, self.months)

    def parse_country(self, name: str) -> str:
        if "," not in name:
            return self.unknown_country
        last = name.split(",")[-1].strip()
        return last or self.unknown_country


DEFAULT_RULE: ExtractionRule = DayMonthYearRule()


def location_id(feature: GeoFeature, ordinal: int) -> str:
    """Placemark id, or "loc_<ordinal>" when the Placemark has none."""

    return feature.id or f"loc_{ordinal}"


def extract_location(
    feature: GeoFeature,
    point: Coord,
    ordinal: int,
    rule: ExtractionRule = DEFAULT_RULE,
) -> Location:
    """Build a Location from a point feature.

    Never raises on bad free text: a missing or unrecognised date gives
    ``date=None`` and ``year=None``. Coordinates are passed through as-is.

    Args:
        feature: Source Placemark.
        point: (lng, lat) of the point geometry.
        ordinal: Number of locations extracted before this one (id fallback).
        rule: Date/country parsing rule.
    """

    lng, lat = point
    date = rule.parse_date(feature.description)
    name = feature.name
    return Location(
        id=location_id(feature, ordinal),
        name=name.strip(),
        lat=lat,
        lng=lng,
        date=date,
        year=year_of(date),
        country=rule.parse_country(name),
    )
