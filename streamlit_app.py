from __future__ import annotations

from pathlib import Path

import streamlit as st

from travel_map.dataset_io import dumps_dataset, read_dataset, write_dataset
from travel_map.kml_io import GeoFeature, KmlParseError, load_features
from travel_map.models import DEFAULT_TOLERANCE, DEFAULT_ZOOM, MapDataset
from travel_map.pipeline import PipelineParams, RunStats, build_map_dataset


@st.cache_data(show_spinner=False)
def _load(kml_path: str, mtime: float) -> list[GeoFeature]:
    _ = mtime  # part of cache key so updated files reload automatically
    features, _summary = load_features(kml_path)
    return features


def _build(features: list[GeoFeature], tolerance: float, high_quality: bool, zoom: int) -> tuple[MapDataset, RunStats]:
    # not cached: every rerun (including the write button) stamps a fresh lastUpdated
    params = PipelineParams(tolerance=tolerance, high_quality=high_quality, default_zoom=zoom)
    return build_map_dataset(features, params)


def main() -> None:
    st.set_page_config(page_title="旅行地图数据生成", layout="wide")
    st.title("旅行足迹：KML → 地图数据 map-data.json")

    with st.sidebar:
        st.subheader("输入与输出")
        kml_path = st.text_input("KML 路径", value="trips.kml", key="kml_path")
        out_path = st.text_input("map-data.json 输出路径", value="content/travel/map-data.json", key="out_path")

        with st.expander("高级参数（通常不用改）", expanded=False):
            tolerance = st.number_input("简化容差（度）", value=DEFAULT_TOLERANCE, step=0.005, format="%.3f")
            high_quality = st.checkbox("high quality（跳过径向预处理）", value=False)
            zoom = st.number_input("默认缩放等级", value=DEFAULT_ZOOM, step=1)

    p = Path(kml_path)
    if not p.exists():
        st.error(f"找不到文件：{kml_path!r}")
        existing = Path(out_path)
        if existing.exists():
            st.caption(f"已有输出：{out_path}")
            st.json(read_dataset(existing)["metadata"])
        return

    try:
        features = _load(kml_path, p.stat().st_mtime)
    except KmlParseError as exc:
        st.exception(exc)
        return
    dataset, stats = _build(features, float(tolerance), bool(high_quality), int(zoom))

    st.subheader("汇总")
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("地点", str(dataset.total_locations))
    c2.metric("国家", str(dataset.countries))
    c3.metric("航线段", str(stats.segments))
    c4.metric("跨日界线", str(stats.crossings))
    st.write(f"日期范围：{dataset.date_range.start} 至 {dataset.date_range.end}")
    if dataset.total_locations == 0:
        st.warning("没有地点：bbox 为占位值，不代表有效范围。")
    else:
        st.write(f"bbox：{dataset.bbox.as_list()}，中心：{list(dataset.default_center)}")

    st.subheader("地点（按日期排序）")
    st.dataframe([loc.to_dict() for loc in dataset.locations], use_container_width=True, height=480)

    with st.expander("按国家统计", expanded=False):
        counts: dict[str, int] = {}
        for loc in dataset.locations:
            counts[loc.country] = counts.get(loc.country, 0) + 1
        rows = [{"country": k, "locations": v} for k, v in sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))]
        st.dataframe(rows, use_container_width=True, height=360)

    c_write, c_download = st.columns(2)
    if c_write.button("写入 map-data.json", type="primary", use_container_width=True, key="write"):
        written = write_dataset(dataset, out_path)
        st.success(f"已写入：{written}（{written.stat().st_size / 1024:.0f} KB）")
    c_download.download_button(
        "下载 JSON",
        data=dumps_dataset(dataset),
        file_name="map-data.json",
        mime="application/json",
        use_container_width=True,
    )

    st.caption("说明：该界面只生成与检查数据，不绘制地图；航线已在日界线处切分并简化。")


if __name__ == "__main__":
    main()
