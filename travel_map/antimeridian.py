"""Antimeridian-safe path segmentation and polyline simplification.

Exported flight arcs may jump from +179° to -179° between two samples. Drawn
naively, that jump becomes a line across the whole map. ``split_antimeridian``
cuts the path at every such jump, closing the current piece on the meridian
and reopening the next piece on the opposite side at the same latitude.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import reduce
from itertools import pairwise
from typing import Sequence

from shapely.geometry import LineString

from travel_map.geo import Coord
from travel_map.models import DEFAULT_TOLERANCE, PathSegment


@dataclass(slots=True)
class _SplitState:
    """Fold accumulator: closed segments plus the one being accumulated."""

    closed: list[tuple[Coord, ...]] = field(default_factory=list)
    current: list[Coord] = field(default_factory=list)


def is_crossing(prev: Coord, curr: Coord) -> bool:
    """A longitude jump of more than 180° is taken as an antimeridian crossing."""

    return abs(curr[0] - prev[0]) > 180.0


def count_crossings(coords: Sequence[Coord]) -> int:
    return sum(1 for prev, curr in pairwise(coords) if is_crossing(prev, curr))


def crossing_point(prev: Coord, curr: Coord) -> Coord:
    """Where the prev -> curr step meets the antimeridian, on prev's side.

    The step is measured the short way round (the raw longitude difference is
    corrected by ±360), and latitude is interpolated linearly at that fraction.

    Returns:
        (crossing_lng, crossing_lat) with crossing_lng exactly 180 or -180.
    """

    prev_lng, prev_lat = prev
    curr_lng, curr_lat = curr
    crossing_lng = 180.0 if prev_lng > 0 else -180.0
    denom = curr_lng - prev_lng + (360.0 if prev_lng > 0 else -360.0)
    # prev already sits on the meridian
    fraction = 0.0 if denom == 0 else abs((crossing_lng - prev_lng) / denom)
    return (crossing_lng, prev_lat + fraction * (curr_lat - prev_lat))


def _step(state: _SplitState, pair: tuple[Coord, Coord]) -> _SplitState:
    """Append ``curr``, or close the segment and restart it on a crossing."""

    prev, curr = pair
    if not is_crossing(prev, curr):
        state.current.append(curr)
        return state
    crossing_lng, crossing_lat = crossing_point(prev, curr)
    state.current.append((crossing_lng, crossing_lat))
    state.closed.append(tuple(state.current))
    state.current = [(-crossing_lng, crossing_lat), curr]
    return state


def split_antimeridian(coords: Sequence[Coord]) -> list[tuple[Coord, ...]]:
    """Split a (lng, lat) sequence at every antimeridian crossing.

    Each crossing adds two interpolated points (one closing the left piece, one
    opening the right piece). Consecutive crossings are not merged.

    Returns:
        Raw segments in path order; the first may have a single point when the
        input has one. Empty input gives an empty list.
    """

    pts = [(float(c[0]), float(c[1])) for c in coords]
    if not pts:
        return []
    state = reduce(_step, pairwise(pts), _SplitState(current=[pts[0]]))
    return state.closed + [tuple(state.current)]


def _radial_distance(coords: Sequence[Coord], sq_tolerance: float) -> list[Coord]:
    """Drop points closer than the tolerance to the last kept point; keeps both ends."""

    kept = [coords[0]]
    last_idx = 0
    for i in range(1, len(coords)):
        dx = coords[i][0] - coords[last_idx][0]
        dy = coords[i][1] - coords[last_idx][1]
        if dx * dx + dy * dy > sq_tolerance:
            kept.append(coords[i])
            last_idx = i
    if last_idx != len(coords) - 1:
        kept.append(coords[-1])
    return kept


def simplify_coords(
    coords: Sequence[Coord],
    tolerance: float = DEFAULT_TOLERANCE,
    high_quality: bool = False,
) -> tuple[Coord, ...]:
    """Douglas-Peucker simplification in plain degree space.

    The default "fast" mode runs a radial-distance pass before Douglas-Peucker;
    ``high_quality`` skips it. First and last points are kept exactly, and a
    2+ point input never comes back shorter than 2 points.
    """

    pts = list(coords)
    if len(pts) <= 2:
        return tuple(pts)
    if not high_quality:
        pts = _radial_distance(pts, tolerance * tolerance)
    if len(pts) > 2:
        line = LineString(pts).simplify(tolerance, preserve_topology=False)
        out = [(x, y) for x, y, *_ in line.coords]
        pts = out if len(out) >= 2 else [pts[0], pts[-1]]
    # endpoints must be the exact input values
    pts[0] = coords[0]
    pts[-1] = coords[-1]
    return tuple(pts)


def segment_path(
    coords: Sequence[Coord],
    tolerance: float = DEFAULT_TOLERANCE,
    high_quality: bool = False,
) -> list[PathSegment]:
    """Split a LineString at the antimeridian and simplify each piece.

    Pieces with fewer than 2 points are dropped.
    """

    return [
        PathSegment(coords=simplify_coords(seg, tolerance, high_quality))
        for seg in split_antimeridian(coords)
        if len(seg) >= 2
    ]
