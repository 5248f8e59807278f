import json

from travel_map.cli import main


def test_build_missing_input_fails_without_output(tmp_path, capsys):
    out = tmp_path / "out" / "map-data.json"
    code = main(["build", "--kml", str(tmp_path / "missing.kml"), "--out", str(out)])
    assert code == 1
    assert not out.exists()
    assert not out.parent.exists()
    assert "missing.kml" in capsys.readouterr().err


def test_build_malformed_input_fails(tmp_path, capsys):
    bad = tmp_path / "bad.kml"
    bad.write_text("<kml><Placemark>", encoding="utf-8")
    out = tmp_path / "map-data.json"
    assert main(["build", "--kml", str(bad), "--out", str(out)]) == 1
    assert not out.exists()
    assert capsys.readouterr().err


def test_build_writes_dataset_and_summary(tmp_path, sample_kml_path, capsys):
    out = tmp_path / "content" / "travel" / "map-data.json"
    code = main(["build", "--kml", str(sample_kml_path), "--out", str(out), "--verbose"])
    assert code == 0

    doc = json.loads(out.read_text(encoding="utf-8"))
    assert doc["metadata"]["totalLocations"] == 4
    assert doc["metadata"]["countries"] == 4
    assert len(doc["paths"]) == 3

    stdout = capsys.readouterr().out
    assert "2019-01-15" in stdout
    assert "  - Fiji" in stdout


def test_build_zoom_flag(tmp_path, sample_kml_path):
    out = tmp_path / "map-data.json"
    assert main(["build", "--kml", str(sample_kml_path), "--out", str(out), "--zoom", "4"]) == 0
    assert json.loads(out.read_text(encoding="utf-8"))["defaultZoom"] == 4


def test_inspect_json(sample_kml_path, capsys):
    assert main(["inspect", "--kml", str(sample_kml_path), "--json"]) == 0
    stdout = capsys.readouterr().out
    payload = json.loads(stdout[stdout.index("{") :])
    assert payload["points"] == 4
    assert payload["points_undated"] == 1
    assert payload["line_strings"] == 3
    assert payload["crossings"] == 1
    assert payload["placemarks_skipped"] == 1
    assert payload["countries"] == ["Fiji", "France", "Japan", "Unknown"]
