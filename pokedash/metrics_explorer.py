from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict

import pandas as pd
import plotly.express as px

from pokedash.charts import chart_frame, to_plotly_spec, to_vega_spec
from pokedash.data import frame_records
from pokedash.filters import DashboardFilters
from pokedash.metrics_scatter import TOOLTIP_COLUMNS, scatter_chart
from pokedash.stats import STAT_COLUMNS, Stat, generation_label

TABLE_COLUMNS = ["id", "name", "primary_type", "secondary_type", "generation"] + STAT_COLUMNS + ["total"]


def scatter_3d_figure(df: pd.DataFrame, x: Stat, y: Stat, z: Stat):
    cols = list(dict.fromkeys(TOOLTIP_COLUMNS + [x.column, y.column, z.column]))
    data = chart_frame(df.dropna(subset=[x.column, y.column, z.column]), cols)
    data["primary_type"] = data["primary_type"].fillna("Unknown")
    fig = px.scatter_3d(
        data,
        x=x.column,
        y=y.column,
        z=z.column,
        color="primary_type",
        hover_name="name",
        hover_data={"id": True, "secondary_type": True, "generation": True},
        labels={x.column: x.label, y.column: y.label, z.column: z.label, "primary_type": "Primary Type"},
    )
    fig.update_traces(marker=dict(size=4, opacity=0.8))
    fig.update_layout(height=560, margin=dict(l=0, r=0, t=30, b=0))
    return fig


def compute_explorer(filters: DashboardFilters, ctx: Dict[str, Any]) -> Dict[str, Any]:
    filtered: pd.DataFrame = ctx.get("filtered", pd.DataFrame())
    x, y, z = filters.x_stat, filters.y_stat, filters.z_stat

    charts: Dict[str, Any] = {}
    top = []
    if not filtered.empty:
        labelled = filtered.assign(generation_label=filtered["generation"].map(generation_label))
        charts["scatter"] = to_vega_spec(
            scatter_chart(labelled, x, y, color="generation_label", color_title="Generation")
        )
        charts["scatter_3d"] = to_plotly_spec(scatter_3d_figure(filtered, x, y, z))

        ranked = filtered.dropna(subset=[x.column]).sort_values(x.column, ascending=False, kind="stable")
        top = frame_records(ranked[[c for c in TABLE_COLUMNS if c in ranked.columns]].head(filters.top_n))

    return {
        "filters": asdict(filters),
        "axes": {"x": x.column, "y": y.column, "z": z.column},
        "count": int(len(filtered)),
        "charts": charts,
        "top": top,
    }
