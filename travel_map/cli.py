"""Command-line interface for travel_map.

Run:
    python -m travel_map build --kml trips.kml --out content/travel/map-data.json
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import asdict

from travel_map.dataset_io import write_dataset
from travel_map.inspect import inspect_features
from travel_map.kml_io import KmlParseError, load_features
from travel_map.models import ATTRIBUTION, DEFAULT_TOLERANCE, DEFAULT_ZOOM
from travel_map.pipeline import PipelineParams, build_map_dataset

DEFAULT_KML = "trips.kml"
DEFAULT_OUT = "content/travel/map-data.json"


def _log(message: str) -> None:
    print(f"✓ {message}")


def _load_or_fail(kml: str):
    try:
        return load_features(kml)
    except (FileNotFoundError, KmlParseError) as exc:
        print(f"❌ {exc}", file=sys.stderr)
        return None


def _cmd_build(args: argparse.Namespace) -> int:
    _log("解析KML文件……")
    loaded = _load_or_fail(args.kml)
    if loaded is None:
        return 1
    features, summary = loaded
    if summary.placemarks_skipped:
        _log(f"跳过无几何的Placemark：{summary.placemarks_skipped}")

    params = PipelineParams(
        tolerance=args.tolerance,
        high_quality=args.high_quality,
        default_zoom=args.zoom,
        attribution=args.attribution,
    )
    dataset, stats = build_map_dataset(features, params, workers=args.workers)

    _log(f"找到 {stats.locations} 个地点")
    _log(f"找到 {stats.segments} 条航线（跨日界线 {stats.crossings} 次）")
    _log(f"访问国家数：{dataset.countries}")

    out = write_dataset(dataset, args.out)
    size_kb = out.stat().st_size / 1024
    _log(f"已写入：{out}")
    print()

    print("### 汇总")
    print(f"- 地点总数: {dataset.total_locations}")
    print(f"- 国家: {dataset.countries}")
    print(f"- 航线: {stats.segments}")
    print(f"- 日期范围: {dataset.date_range.start} 至 {dataset.date_range.end}")
    print(f"- 文件大小: {size_kb:.0f} KB")

    if args.verbose:
        print()
        print("### 访问过的国家")
        for country in sorted({loc.country for loc in dataset.locations}):
            print(f"  - {country}")
        if stats.segments_dropped or stats.skipped_geometries:
            print()
            print(f"退化航段已丢弃={stats.segments_dropped}，不支持的几何={stats.skipped_geometries}")
    return 0


def _cmd_inspect(args: argparse.Namespace) -> int:
    loaded = _load_or_fail(args.kml)
    if loaded is None:
        return 1
    features, summary = loaded
    res = inspect_features(features)

    print("### Placemark")
    print(
        f"total={summary.placemarks_total}, parsed={summary.features_parsed}, "
        f"skipped={summary.placemarks_skipped}, bad_coords={summary.coords_skipped}"
    )
    print()

    print("### 几何类型")
    print(", ".join(f"{k}={v}" for k, v in res.geometry_types.items()) or "-")
    print()

    print("### 地点 / 航线")
    print(f"points={res.points}（无日期 {res.points_undated}），line_strings={res.line_strings}，line_points={res.line_points}")
    print(f"antimeridian_crossings={res.crossings}，path_length≈{res.path_length_km} km")
    print()

    print("### 经纬度范围（粗略）")
    print(f"lat=[{res.min_lat}, {res.max_lat}], lon=[{res.min_lon}, {res.max_lon}]")
    print()

    if args.json:
        import json

        payload = asdict(res) | asdict(summary)
        print(json.dumps(payload, ensure_ascii=False, indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser."""

    p = argparse.ArgumentParser(prog="travel_map")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_b = sub.add_parser("build", help="解析旅行KML导出并生成地图数据 map-data.json")
    p_b.add_argument("--kml", type=str, default=DEFAULT_KML, help="输入KML路径")
    p_b.add_argument("--out", type=str, default=DEFAULT_OUT, help="输出JSON路径（目录不存在会自动创建）")
    p_b.add_argument(
        "--tolerance",
        type=float,
        default=DEFAULT_TOLERANCE,
        help="航线简化容差（度），默认0.01；适合已平滑、采样密集的弧线",
    )
    p_b.add_argument("--high-quality", action="store_true", help="跳过径向距离预处理，只做Douglas-Peucker")
    p_b.add_argument("--zoom", type=int, default=DEFAULT_ZOOM, help="地图默认缩放等级")
    p_b.add_argument("--attribution", type=str, default=ATTRIBUTION, help="地图署名文字")
    p_b.add_argument("--workers", type=int, default=1, help="并行进程数（>1 启用多进程处理要素）")
    p_b.add_argument("--verbose", action="store_true", help="输出访问国家列表与详细日志")
    p_b.set_defaults(func=_cmd_build)

    p_ins = sub.add_parser("inspect", help="分析KML的结构/地点/航线/跨日界线情况（不写文件）")
    p_ins.add_argument("--kml", type=str, default=DEFAULT_KML, help="输入KML路径")
    p_ins.add_argument("--json", action="store_true", help="额外输出JSON（便于后处理）")
    p_ins.add_argument("--verbose", action="store_true", help="详细日志")
    p_ins.set_defaults(func=_cmd_inspect)

    return p


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""

    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
