"""Module entry point: python -m travel_map ..."""

from __future__ import annotations

from travel_map.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
