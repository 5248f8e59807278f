import time
from pathlib import Path

from streamlit.testing.v1 import AppTest

from travel_map.dataset_io import read_dataset
from travel_map.timeutils import utc_timestamp

APP = Path(__file__).resolve().parents[1] / "streamlit_app.py"


def _open(kml_path, out_path) -> AppTest:
    at = AppTest.from_file(str(APP), default_timeout=60).run()
    at.text_input(key="kml_path").set_value(str(kml_path))
    at.text_input(key="out_path").set_value(str(out_path))
    return at.run()


def test_page_summarises_dataset(tmp_path, sample_kml_path):
    at = _open(sample_kml_path, tmp_path / "map-data.json")
    assert not at.exception
    assert [m.value for m in at.metric] == ["4", "4", "3", "1"]


def test_write_button_stamps_current_time(tmp_path, sample_kml_path):
    out = tmp_path / "content" / "travel" / "map-data.json"
    at = _open(sample_kml_path, out)
    assert not at.exception

    # features stay cached between reruns; the dataset must not
    time.sleep(0.01)
    before = utc_timestamp()
    at.button(key="write").click().run()
    assert not at.exception

    doc = read_dataset(out)
    assert doc["metadata"]["lastUpdated"] >= before
    assert doc["metadata"]["totalLocations"] == 4


def test_missing_kml_shows_error(tmp_path):
    at = _open(tmp_path / "missing.kml", tmp_path / "map-data.json")
    assert not at.exception
    assert "missing.kml" in at.error[0].value
