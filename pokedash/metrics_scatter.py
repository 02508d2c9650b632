from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, Optional

import altair as alt
import pandas as pd

from pokedash.charts import chart_frame, to_vega_spec
from pokedash.filters import DashboardFilters
from pokedash.stats import Stat

TOOLTIP_COLUMNS = ["id", "name", "image_url", "primary_type", "secondary_type", "generation"]


def _top_record(df: pd.DataFrame, stat: Stat) -> Optional[Dict[str, Any]]:
    if df.empty or stat.column not in df.columns:
        return None
    values = pd.to_numeric(df[stat.column], errors="coerce").astype(float).dropna()
    if values.empty:
        return None
    row = df.loc[values.idxmax()]
    return {
        "id": int(row["id"]),
        "name": str(row["name"]),
        "image_url": (str(row["image_url"]) if pd.notna(row["image_url"]) else None),
        "value": int(values.max()),
    }


def scatter_chart(df: pd.DataFrame, x: Stat, y: Stat, *, color: str = "primary_type", color_title: str = "Primary Type") -> alt.Chart:
    """Stat-vs-stat scatter; the sprite shows in the tooltip via the `image` field."""
    cols = list(dict.fromkeys(TOOLTIP_COLUMNS + [x.column, y.column, color]))
    data = chart_frame(df.dropna(subset=[x.column, y.column]), cols).rename(columns={"image_url": "image"})
    legend = alt.selection_point(fields=[color], bind="legend")
    return (
        alt.Chart(data)
        .mark_circle(size=80)
        .encode(
            x=alt.X(f"{x.column}:Q", title=x.label, scale=alt.Scale(zero=False)),
            y=alt.Y(f"{y.column}:Q", title=y.label, scale=alt.Scale(zero=False)),
            color=alt.Color(f"{color}:N", title=color_title),
            opacity=alt.condition(legend, alt.value(0.85), alt.value(0.1)),
            tooltip=[
                alt.Tooltip("name:N", title="Name"),
                alt.Tooltip("image:N"),
                alt.Tooltip(f"{x.column}:Q", title=x.label),
                alt.Tooltip(f"{y.column}:Q", title=y.label),
                alt.Tooltip("primary_type:N", title="Type 1"),
                alt.Tooltip("secondary_type:N", title="Type 2"),
                alt.Tooltip("generation:O", title="Generation"),
            ],
        )
        .add_params(legend)
        .properties(height=420)
        .interactive()
    )


def compute_scatter(filters: DashboardFilters, ctx: Dict[str, Any]) -> Dict[str, Any]:
    filtered: pd.DataFrame = ctx.get("filtered", pd.DataFrame())

    plotted = 0
    charts: Dict[str, Any] = {}
    if not filtered.empty:
        plotted = int(filtered[[Stat.ATTACK.column, Stat.DEFENSE.column]].notna().all(axis=1).sum())
        charts["scatter"] = to_vega_spec(scatter_chart(filtered, Stat.ATTACK, Stat.DEFENSE))

    return {
        "filters": asdict(filters),
        "kpis": {
            "count": int(len(filtered)),
            "plotted": plotted,
            "strongest_attacker": _top_record(filtered, Stat.ATTACK),
            "strongest_defender": _top_record(filtered, Stat.DEFENSE),
        },
        "charts": charts,
    }
