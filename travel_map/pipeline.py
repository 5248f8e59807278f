"""End-to-end pipeline: features -> locations/paths -> MapDataset."""

from __future__ import annotations

import logging
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
from functools import partial, reduce
from typing import Iterable

from travel_map.aggregate import build_dataset
from travel_map.antimeridian import count_crossings, segment_path
from travel_map.classify import Route, plan_routes
from travel_map.extract import DEFAULT_RULE, ExtractionRule, extract_location
from travel_map.geo import BoundingBox, bbox_of
from travel_map.kml_io import GeoFeature
from travel_map.models import ATTRIBUTION, DEFAULT_TOLERANCE, DEFAULT_ZOOM, Location, MapDataset, PathSegment

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PipelineParams:
    """Parameters controlling extraction, simplification and output defaults."""

    # Simplification tolerance in degrees. 0.01 suits densely sampled, already smooth arcs.
    tolerance: float = DEFAULT_TOLERANCE
    # Skip the radial-distance pre-pass before Douglas-Peucker.
    high_quality: bool = False
    default_zoom: int = DEFAULT_ZOOM
    attribution: str = ATTRIBUTION
    rule: ExtractionRule = field(default=DEFAULT_RULE)


@dataclass(frozen=True, slots=True)
class RouteResult:
    """Output of processing one route."""

    location: Location | None = None
    # covers the location only; paths do not widen the map extent
    bbox: BoundingBox = field(default_factory=BoundingBox.empty)
    segments: tuple[PathSegment, ...] = ()
    crossings: int = 0
    dropped: int = 0


@dataclass(frozen=True, slots=True)
class RunStats:
    """Counters for one run (reported by the CLI)."""

    features: int
    locations: int
    path_features: int
    segments: int
    crossings: int
    segments_dropped: int
    skipped_geometries: int


def process_route(route: Route, params: PipelineParams) -> RouteResult:
    """Process one classified geometry. Pure; safe to run in a worker process."""

    if route.kind == "location":
        point = route.geometry.coords[0]
        return RouteResult(
            location=extract_location(route.feature, point, route.ordinal, params.rule),
            bbox=bbox_of([point]),
        )
    if route.kind == "path":
        coords = route.geometry.coords
        segments = segment_path(coords, params.tolerance, params.high_quality)
        crossings = count_crossings(coords)
        # n crossings -> n + 1 raw pieces
        dropped = crossings + 1 - len(segments) if coords else 0
        return RouteResult(segments=tuple(segments), crossings=crossings, dropped=dropped)
    return RouteResult()


def _run_routes(routes: list[Route], params: PipelineParams, workers: int) -> list[RouteResult]:
    worker = partial(process_route, params=params)
    if workers <= 1 or len(routes) < 2:
        return [worker(r) for r in routes]
    chunksize = max(1, len(routes) // (workers * 4))
    with ProcessPoolExecutor(max_workers=workers) as executor:
        # map() keeps input order, so output matches the sequential run
        return list(executor.map(worker, routes, chunksize=chunksize))


def build_map_dataset(
    features: Iterable[GeoFeature],
    params: PipelineParams | None = None,
    *,
    workers: int = 1,
    now: datetime | None = None,
) -> tuple[MapDataset, RunStats]:
    """Run classification, extraction, segmentation and aggregation.

    Args:
        features: Parsed features in document order.
        params: Pipeline parameters (defaults if None).
        workers: Number of worker processes; 1 runs everything in-process.
        now: Generation time for ``lastUpdated``.

    Returns:
        (dataset, stats)
    """

    params = params or PipelineParams()
    feature_list = list(features)
    routes = plan_routes(feature_list)
    results = _run_routes(routes, params, workers)

    locations: list[Location] = []
    paths: list[PathSegment] = []
    crossings = 0
    dropped = 0
    # partial boxes combine in any grouping, so worker results merge directly
    bbox = reduce(BoundingBox.merge, (res.bbox for res in results), BoundingBox.empty())
    for res in results:
        if res.location is not None:
            locations.append(res.location)
        paths.extend(res.segments)
        crossings += res.crossings
        dropped += res.dropped

    stats = RunStats(
        features=len(feature_list),
        locations=len(locations),
        path_features=sum(1 for r in routes if r.kind == "path"),
        segments=len(paths),
        crossings=crossings,
        segments_dropped=dropped,
        skipped_geometries=sum(1 for r in routes if r.kind == "skipped"),
    )
    logger.info(
        "locations=%s paths=%s crossings=%s dropped=%s",
        stats.locations,
        stats.segments,
        stats.crossings,
        stats.segments_dropped,
    )

    dataset = build_dataset(
        locations,
        paths,
        default_zoom=params.default_zoom,
        attribution=params.attribution,
        bbox=bbox,
        now=now,
    )
    return dataset, stats
