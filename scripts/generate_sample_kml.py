from __future__ import annotations

import argparse
import math
import random
from dataclasses import dataclass
from datetime import date, timedelta
from pathlib import Path
from typing import Final

from lxml import etree


KML_NS: Final[str] = "http://www.opengis.net/kml/2.2"
MONTH_ABBR: Final[list[str]] = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


@dataclass(frozen=True, slots=True)
class City:
    name: str
    lat: float
    lon: float


def _date_token(d: date) -> str:
    """Format like the travel site export: 07Jun2022."""

    return f"{d.day:02d}{MONTH_ABBR[d.month - 1]}{d.year}"


def _arc(a: City, b: City, steps: int, bulge: float) -> list[tuple[float, float]]:
    """Curved (lng, lat) polyline from a to b, going the short way round in longitude.

    Longitudes are wrapped back into [-180, 180], so trans-Pacific arcs jump at the antimeridian.
    """

    d_lon = b.lon - a.lon
    if d_lon > 180:
        d_lon -= 360
    elif d_lon < -180:
        d_lon += 360

    out: list[tuple[float, float]] = []
    for i in range(steps + 1):
        t = i / steps
        lon = a.lon + d_lon * t
        lat = a.lat + (b.lat - a.lat) * t + bulge * math.sin(math.pi * t)
        lon = ((lon + 180.0) % 360.0) - 180.0
        out.append((round(lon, 5), round(lat, 5)))
    return out


def _coords_text(coords: list[tuple[float, float]]) -> str:
    return " ".join(f"{lon},{lat},0" for lon, lat in coords)


def generate_kml(*, visits: int, seed: int, start: date, cities: list[City]) -> bytes:
    """Build a fake travel export with visit Placemarks and flight-path LineStrings."""

    rng = random.Random(seed)
    kml = etree.Element(f"{{{KML_NS}}}kml", nsmap={None: KML_NS})
    doc = etree.SubElement(kml, f"{{{KML_NS}}}Document")
    etree.SubElement(doc, f"{{{KML_NS}}}name").text = "Sample trips"

    cur_day = start
    prev: City | None = None
    for i in range(visits):
        city = rng.choice([c for c in cities if c != prev])
        cur_day = cur_day + timedelta(days=rng.randint(3, 40))

        pm = etree.SubElement(doc, f"{{{KML_NS}}}Placemark", id=f"visit_{i}")
        etree.SubElement(pm, f"{{{KML_NS}}}name").text = city.name
        desc = etree.SubElement(pm, f"{{{KML_NS}}}description")
        # roughly 1 in 10 visits has no usable date
        if rng.random() < 0.1:
            desc.text = "Date unknown"
        else:
            desc.text = etree.CDATA(f"<p>Arrived {_date_token(cur_day)}</p>")
        pt = etree.SubElement(pm, f"{{{KML_NS}}}Point")
        etree.SubElement(pt, f"{{{KML_NS}}}coordinates").text = f"{city.lon},{city.lat},0"

        if prev is not None:
            path = etree.SubElement(doc, f"{{{KML_NS}}}Placemark")
            etree.SubElement(path, f"{{{KML_NS}}}name").text = f"{prev.name} -> {city.name}"
            ls = etree.SubElement(path, f"{{{KML_NS}}}LineString")
            coords = _arc(prev, city, steps=rng.randint(40, 120), bulge=rng.uniform(2.0, 12.0))
            etree.SubElement(ls, f"{{{KML_NS}}}coordinates").text = _coords_text(coords)
        prev = city

    return etree.tostring(kml, xml_declaration=True, encoding="UTF-8", pretty_print=True)


def main() -> int:
    p = argparse.ArgumentParser(description="Generate a fake travel KML export for demo/testing (privacy-safe).")
    p.add_argument("--out", type=str, default="sample_data/trips.kml", help="Output KML path")
    p.add_argument("--visits", type=int, default=30, help="Number of visit Placemarks")
    p.add_argument("--seed", type=int, default=42, help="Random seed (reproducible)")
    p.add_argument("--start", type=str, default="2018-01-01", help="Date before the first visit, e.g. '2018-01-01'")
    args = p.parse_args()

    cities = [
        City("Tokyo, Japan", 35.6762, 139.6503),
        City("Auckland, New Zealand", -36.8485, 174.7633),
        City("Suva, Fiji", -18.1248, 178.4501),
        City("Honolulu, Hawaii, United States", 21.3069, -157.8583),
        City("Los Angeles, California, United States", 34.0522, -118.2437),
        City("Paris, France", 48.8566, 2.3522),
        City("Cape Town, South Africa", -33.9249, 18.4241),
        City("Anchorage, Alaska, United States", 61.2181, -149.9003),
        City("Antarctica", -77.8419, 166.6863),
    ]

    data = generate_kml(visits=args.visits, seed=args.seed, start=date.fromisoformat(args.start), cities=cities)
    out_path = Path(args.out)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_bytes(data)

    print(f"Generated: {out_path} (visits={args.visits}, seed={args.seed})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
