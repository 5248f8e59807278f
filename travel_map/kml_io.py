"""KML input utilities for the exported travel map file.

Converts a KML document into a flat list of ``GeoFeature`` objects, roughly the
shape a KML-to-GeoJSON converter produces: one feature per Placemark with a
geometry and a property bag.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator

from lxml import etree

from travel_map.geo import Coord

logger = logging.getLogger(__name__)

POINT = "Point"
LINE_STRING = "LineString"
POLYGON = "Polygon"
GEOMETRY_COLLECTION = "GeometryCollection"

_GEOMETRY_TAGS = ("Point", "LineString", "Polygon", "Track", "MultiGeometry", "MultiTrack")


class KmlParseError(ValueError):
    """Raised when the input is not well-formed XML."""


@dataclass(frozen=True, slots=True)
class Geometry:
    """A single geometry.

    Attributes:
        type: "Point", "LineString", "Polygon" or "GeometryCollection".
        coords: (lng, lat) pairs. A Point has exactly one; a Polygon holds its outer ring.
        geometries: Member geometries of a GeometryCollection.
    """

    type: str
    coords: tuple[Coord, ...] = ()
    geometries: tuple[Geometry, ...] = ()


@dataclass(frozen=True, slots=True)
class GeoFeature:
    """One Placemark: optional id, geometry and free-text properties."""

    id: str | None
    geometry: Geometry
    properties: dict[str, Any] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return str(self.properties.get("name") or "")

    @property
    def description(self) -> str:
        return str(self.properties.get("description") or "")


@dataclass(frozen=True, slots=True)
class KmlSummary:
    """Quick summary of KML parsing."""

    placemarks_total: int
    features_parsed: int
    placemarks_skipped: int
    coords_skipped: int


def _local(el: etree._Element) -> str:
    return etree.QName(el).localname if isinstance(el.tag, str) else ""


def _children(el: etree._Element, name: str) -> Iterator[etree._Element]:
    for child in el:
        if _local(child) == name:
            yield child


def _first_child(el: etree._Element, name: str) -> etree._Element | None:
    return next(_children(el, name), None)


def _text_content(el: etree._Element | None) -> str:
    if el is None:
        return ""
    return "".join(el.itertext())


class _CoordParser:
    """Parses coordinate text and counts tuples it had to drop."""

    def __init__(self) -> None:
        self.skipped = 0

    def _pair(self, parts: list[str]) -> Coord | None:
        try:
            lng, lat = float(parts[0]), float(parts[1])
        except (IndexError, ValueError):
            self.skipped += 1
            return None
        # float() accepts "nan"/"inf", which JSON cannot carry
        if not (math.isfinite(lng) and math.isfinite(lat)):
            self.skipped += 1
            return None
        return (lng, lat)

    def tuples(self, text: str) -> tuple[Coord, ...]:
        """Parse "lng,lat[,alt] lng,lat[,alt] ..." (whitespace separated)."""

        out: list[Coord] = []
        for chunk in re.split(r"\s+", (text or "").strip()):
            if not chunk:
                continue
            pair = self._pair(chunk.split(","))
            if pair is not None:
                out.append(pair)
        return tuple(out)

    def gx_coord(self, text: str) -> Coord | None:
        """Parse a gx:coord value "lng lat [alt]"."""

        return self._pair((text or "").split())


def _parse_geometry(el: etree._Element, coords: _CoordParser) -> Geometry | None:
    tag = _local(el)
    if tag == "Point":
        pts = coords.tuples(_text_content(_first_child(el, "coordinates")))
        return Geometry(POINT, pts[:1]) if pts else None
    if tag == "LineString":
        pts = coords.tuples(_text_content(_first_child(el, "coordinates")))
        return Geometry(LINE_STRING, pts) if pts else None
    if tag == "Polygon":
        ring: tuple[Coord, ...] = ()
        outer = _first_child(el, "outerBoundaryIs")
        if outer is not None:
            lr = _first_child(outer, "LinearRing")
            if lr is not None:
                ring = coords.tuples(_text_content(_first_child(lr, "coordinates")))
        return Geometry(POLYGON, ring) if ring else None
    if tag == "Track":
        pts = [c for c in (coords.gx_coord(_text_content(g)) for g in _children(el, "coord")) if c is not None]
        return Geometry(LINE_STRING, tuple(pts)) if pts else None
    if tag in ("MultiGeometry", "MultiTrack"):
        members = [g for g in (_parse_geometry(child, coords) for child in el) if g is not None]
        return Geometry(GEOMETRY_COLLECTION, geometries=tuple(members)) if members else None
    return None


def _placemark_geometry(pm: etree._Element, coords: _CoordParser) -> Geometry | None:
    geoms = [g for g in (_parse_geometry(c, coords) for c in pm if _local(c) in _GEOMETRY_TAGS) if g is not None]
    if not geoms:
        return None
    if len(geoms) == 1:
        return geoms[0]
    return Geometry(GEOMETRY_COLLECTION, geometries=tuple(geoms))


def _placemark_properties(pm: etree._Element) -> dict[str, Any]:
    props: dict[str, Any] = {}
    name_el = _first_child(pm, "name")
    if name_el is not None:
        props["name"] = _text_content(name_el)
    desc_el = _first_child(pm, "description")
    if desc_el is not None:
        props["description"] = _text_content(desc_el)
    ext = _first_child(pm, "ExtendedData")
    if ext is not None:
        for data in _children(ext, "Data"):
            key = data.get("name")
            if key and key not in props:
                props[key] = _text_content(_first_child(data, "value"))
    return props


def parse_kml(data: str | bytes) -> tuple[list[GeoFeature], KmlSummary]:
    """Parse KML document content into features.

    Args:
        data: Raw document. ``str`` input is encoded as UTF-8 first so documents
            carrying an XML encoding declaration parse as well.

    Returns:
        (features, summary)

    Raises:
        KmlParseError: If the document is not well-formed XML.
    """

    raw = data.encode("utf-8") if isinstance(data, str) else data
    parser = etree.XMLParser(resolve_entities=False, no_network=True, huge_tree=True)
    try:
        root = etree.fromstring(raw, parser=parser)
    except etree.XMLSyntaxError as exc:
        raise KmlParseError(f"KML解析失败：{exc}") from exc

    coords = _CoordParser()
    features: list[GeoFeature] = []
    total = 0
    for pm in root.iter():
        if _local(pm) != "Placemark":
            continue
        total += 1
        geometry = _placemark_geometry(pm, coords)
        if geometry is None:
            # 没有几何的Placemark（例如只有名字），与转换器行为一致，直接跳过
            continue
        features.append(GeoFeature(id=pm.get("id"), geometry=geometry, properties=_placemark_properties(pm)))

    summary = KmlSummary(
        placemarks_total=total,
        features_parsed=len(features),
        placemarks_skipped=total - len(features),
        coords_skipped=coords.skipped,
    )
    if summary.coords_skipped > 0:
        logger.warning("KML中有 %s 个坐标无法解析已跳过", summary.coords_skipped)
    return features, summary


def load_features(kml_path: str | Path) -> tuple[list[GeoFeature], KmlSummary]:
    """Read and parse a KML file.

    Raises:
        FileNotFoundError: If the file does not exist.
        KmlParseError: If the content is not well-formed XML.
    """

    p = Path(kml_path)
    if not p.is_file():
        raise FileNotFoundError(f"找不到KML文件：{p}")
    logger.info("Parsing KML file: %s", p)
    return parse_kml(p.read_bytes())
