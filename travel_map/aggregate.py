"""Assemble the map dataset from extracted locations and path segments."""

from __future__ import annotations

from datetime import datetime
from functools import reduce
from typing import Iterable, Sequence

from travel_map.geo import BoundingBox
from travel_map.models import ATTRIBUTION, DEFAULT_ZOOM, DateRange, Location, MapDataset, PathSegment
from travel_map.timeutils import utc_timestamp


def sort_locations(locations: Iterable[Location]) -> list[Location]:
    """Stable sort by date ascending; undated locations go last in their original order."""

    # ISO "YYYY-MM-DD" strings sort chronologically
    return sorted(locations, key=lambda loc: (loc.date is None, loc.date or ""))


def date_range(sorted_locations: Sequence[Location]) -> DateRange:
    """First and last dated entries of an already-sorted sequence."""

    dated = [loc.date for loc in sorted_locations if loc.date is not None]
    if not dated:
        return DateRange(start=None, end=None)
    return DateRange(start=dated[0], end=dated[-1])


def count_countries(locations: Iterable[Location]) -> int:
    return len({loc.country for loc in locations})


def locations_bbox(locations: Iterable[Location]) -> BoundingBox:
    """Fold location coordinates into a bounding box."""

    return reduce(lambda box, loc: box.extend(loc.lng, loc.lat), locations, BoundingBox.empty())


def build_dataset(
    locations: Iterable[Location],
    paths: Iterable[PathSegment],
    *,
    default_zoom: int = DEFAULT_ZOOM,
    attribution: str = ATTRIBUTION,
    bbox: BoundingBox | None = None,
    now: datetime | None = None,
) -> MapDataset:
    """Compute summaries and assemble the final dataset.

    Args:
        locations: Locations in document order.
        paths: Path segments in document order.
        default_zoom: Initial map zoom level.
        attribution: Attribution string copied into the output.
        bbox: Precomputed box over the same locations (e.g. merged from
            per-route partial boxes); folded from ``locations`` if None.
        now: Generation time for ``lastUpdated`` (defaults to current UTC time).

    Returns:
        MapDataset. With no locations the date range is (None, None) and the
        bbox keeps its inverted sentinel values.
    """

    ordered = sort_locations(locations)
    if bbox is None:
        bbox = locations_bbox(ordered)
    return MapDataset(
        total_locations=len(ordered),
        countries=count_countries(ordered),
        last_updated=utc_timestamp(now),
        date_range=date_range(ordered),
        bbox=bbox,
        default_zoom=default_zoom,
        default_center=bbox.center(),
        attribution=attribution,
        locations=tuple(ordered),
        paths=tuple(paths),
    )
