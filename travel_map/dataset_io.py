"""JSON output for the map dataset."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from travel_map.models import MapDataset


def dumps_dataset(dataset: MapDataset) -> str:
    """Serialize to the JSON layout consumed by the map front end (2-space indent, UTF-8 text)."""

    return json.dumps(dataset.to_dict(), ensure_ascii=False, indent=2, allow_nan=False)


def write_dataset(dataset: MapDataset, out_path: str | Path) -> Path:
    """Write the dataset, creating parent directories as needed.

    Not atomic: a failure mid-write can leave a partial file. Re-running the
    pipeline on the same input rewrites it.

    Returns:
        The written path.
    """

    p = Path(out_path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(dumps_dataset(dataset), encoding="utf-8")
    return p


def read_dataset(path: str | Path) -> dict[str, Any]:
    """Load a previously written dataset as plain JSON."""

    return json.loads(Path(path).read_text(encoding="utf-8"))
