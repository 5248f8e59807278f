import sys
from pathlib import Path

import pytest

# Ensure the repository root is on sys.path for direct pytest runs
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


SAMPLE_KML = """<?xml version="1.0" encoding="UTF-8"?>
<kml xmlns="http://www.opengis.net/kml/2.2" xmlns:gx="http://www.google.com/kml/ext/2.2">
<Document>
  <name>trips</name>
  <Folder>
    <Placemark id="p_paris">
      <name>Paris, France</name>
      <description><![CDATA[<b>Visited</b> 07Jun2022]]></description>
      <Point><coordinates>2.3522,48.8566,0</coordinates></Point>
    </Placemark>
    <Placemark>
      <name> Tokyo, Japan </name>
      <description>Arrived 15Jan2019</description>
      <Point><coordinates>139.6503,35.6762</coordinates></Point>
    </Placemark>
    <Placemark>
      <name>Antarctica</name>
      <description>no date here</description>
      <Point><coordinates>166.6863,-77.8419,0</coordinates></Point>
    </Placemark>
    <Placemark id="p_suva">
      <name>Suva, Fiji</name>
      <description>03Mar2020</description>
      <Point><coordinates>178.4501,-18.1248,0</coordinates></Point>
    </Placemark>
  </Folder>
  <Placemark>
    <name>Suva -&gt; Honolulu</name>
    <LineString><coordinates>
      170,10,0 175,10.5,0 179,10.8,0 -179,11.2,0 -175,11.5,0 -170,12,0
    </coordinates></LineString>
  </Placemark>
  <Placemark>
    <name>Paris -&gt; Tokyo</name>
    <LineString><coordinates>2.35,48.85 60,60 139.65,35.67</coordinates></LineString>
  </Placemark>
  <Placemark>
    <name>single point line</name>
    <LineString><coordinates>10,10</coordinates></LineString>
  </Placemark>
  <Placemark>
    <name>Name only</name>
  </Placemark>
</Document>
</kml>
"""


@pytest.fixture
def sample_kml_text() -> str:
    return SAMPLE_KML


@pytest.fixture
def sample_kml_path(tmp_path: Path) -> Path:
    p = tmp_path / "trips.kml"
    p.write_text(SAMPLE_KML, encoding="utf-8")
    return p
