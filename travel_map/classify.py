"""Route features to location extraction or path segmentation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, Literal

from travel_map.kml_io import GEOMETRY_COLLECTION, LINE_STRING, POINT, GeoFeature, Geometry

logger = logging.getLogger(__name__)

Kind = Literal["location", "path", "skipped"]


@dataclass(frozen=True, slots=True)
class Route:
    """One unit of work: a feature, the geometry to process, and where it goes.

    ``ordinal`` numbers location routes in document order (used for fallback
    ids) and is -1 for everything else.
    """

    kind: Kind
    feature: GeoFeature
    geometry: Geometry
    ordinal: int = -1


def classify(feature: GeoFeature) -> Iterator[tuple[Kind, Geometry]]:
    """Yield (kind, geometry) for a feature.

    Point -> "location", LineString -> "path". A GeometryCollection is routed
    member by member, but only its first Point becomes a location.
    """

    geom = feature.geometry
    if geom.type == POINT:
        yield "location", geom
    elif geom.type == LINE_STRING:
        yield "path", geom
    elif geom.type == GEOMETRY_COLLECTION:
        seen_point = False
        for member in geom.geometries:
            if member.type == POINT and not seen_point:
                seen_point = True
                yield "location", member
            elif member.type == LINE_STRING:
                yield "path", member
            else:
                yield "skipped", member
    else:
        yield "skipped", geom


def plan_routes(features: Iterable[GeoFeature]) -> list[Route]:
    """Classify all features and number the location routes.

    Numbering happens here, before any (possibly parallel) processing, so the
    fallback ids do not depend on worker scheduling.
    """

    routes: list[Route] = []
    n_locations = 0
    for feature in features:
        for kind, geom in classify(feature):
            if kind == "location":
                routes.append(Route(kind, feature, geom, ordinal=n_locations))
                n_locations += 1
            else:
                if kind == "skipped":
                    logger.debug("跳过不支持的几何类型 %s（feature id=%s）", geom.type, feature.id)
                routes.append(Route(kind, feature, geom))
    return routes
