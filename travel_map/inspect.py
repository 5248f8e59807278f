"""Inspect a parsed KML export without building the dataset."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Sequence

from travel_map.antimeridian import count_crossings
from travel_map.classify import classify
from travel_map.extract import DEFAULT_RULE, ExtractionRule
from travel_map.geo import polyline_length_m
from travel_map.kml_io import GeoFeature


@dataclass(frozen=True, slots=True)
class InspectResult:
    """High-level KML inspection result."""

    features: int
    geometry_types: dict[str, int]
    points: int
    points_undated: int
    line_strings: int
    line_points: int
    crossings: int
    path_length_km: float
    min_lat: float | None
    max_lat: float | None
    min_lon: float | None
    max_lon: float | None
    countries: list[str] = field(default_factory=list)


def inspect_features(features: Sequence[GeoFeature], rule: ExtractionRule = DEFAULT_RULE) -> InspectResult:
    """Inspect already-loaded features.

    Counts follow the same routing as the pipeline, so ``points`` equals the
    number of locations a build would produce.
    """

    types: Counter[str] = Counter()
    points = 0
    undated = 0
    lines = 0
    line_points = 0
    crossings = 0
    length_m = 0.0
    lats: list[float] = []
    lons: list[float] = []
    countries: set[str] = set()

    for feat in features:
        types[feat.geometry.type] += 1
        for kind, geom in classify(feat):
            if kind == "location":
                points += 1
                lon, lat = geom.coords[0]
                lats.append(lat)
                lons.append(lon)
                if rule.parse_date(feat.description) is None:
                    undated += 1
                countries.add(rule.parse_country(feat.name))
            elif kind == "path":
                lines += 1
                line_points += len(geom.coords)
                crossings += count_crossings(geom.coords)
                length_m += polyline_length_m(geom.coords)

    return InspectResult(
        features=len(features),
        geometry_types=dict(sorted(types.items())),
        points=points,
        points_undated=undated,
        line_strings=lines,
        line_points=line_points,
        crossings=crossings,
        path_length_km=round(length_m / 1000.0, 1),
        min_lat=min(lats) if lats else None,
        max_lat=max(lats) if lats else None,
        min_lon=min(lons) if lons else None,
        max_lon=max(lons) if lons else None,
        countries=sorted(countries),
    )
