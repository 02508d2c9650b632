from __future__ import annotations

import math
from dataclasses import asdict
from typing import Any, Dict, List, Optional

import pandas as pd
import plotly.graph_objects as go

from pokedash.charts import to_plotly_spec
from pokedash.data import average_stats
from pokedash.filters import DashboardFilters
from pokedash.stats import Stat, generation_label

RADIAL_MIN = 150


def _selection_name(filters: DashboardFilters) -> str:
    parts: List[str] = []
    if filters.generation is not None:
        parts.append(generation_label(filters.generation))
    if filters.pokemon_type:
        parts.append(filters.pokemon_type)
    return " / ".join(parts) if parts else "All Pokémon"


def radar_figure(averages: Dict[str, float], name: str, baseline: Optional[Dict[str, float]] = None) -> go.Figure:
    labels = [s.label for s in Stat]
    fig = go.Figure()
    peak = max(averages.values(), default=0.0)
    if baseline is not None:
        base_values = [baseline[s.column] for s in Stat]
        peak = max(peak, max(base_values, default=0.0))
        fig.add_trace(
            go.Scatterpolar(
                r=base_values + [base_values[0]],
                theta=labels + [labels[0]],
                name="All Pokémon",
                line_color="#9ca3af",
                line_dash="dash",
            )
        )
    values = [averages[s.column] for s in Stat]
    fig.add_trace(
        go.Scatterpolar(
            r=values + [values[0]],
            theta=labels + [labels[0]],
            fill="toself",
            name=name,
            line_color="#ef5350",
        )
    )
    fig.update_layout(
        polar=dict(radialaxis=dict(visible=True, range=[0, max(RADIAL_MIN, math.ceil(peak * 1.1))])),
        showlegend=True,
        height=480,
        margin=dict(l=60, r=60, t=30, b=30),
    )
    return fig


def compute_radar(filters: DashboardFilters, ctx: Dict[str, Any]) -> Dict[str, Any]:
    filtered: pd.DataFrame = ctx.get("filtered", pd.DataFrame())
    averages: Dict[str, float] = ctx.get("averages") or average_stats(filtered)
    baseline: Optional[Dict[str, float]] = ctx.get("baseline_averages")

    name = _selection_name(filters)
    # The baseline is the selection itself when nothing is filtered.
    show_baseline = baseline is not None and (filters.generation is not None or filters.pokemon_type is not None)
    fig = radar_figure(averages, name, baseline if show_baseline else None)

    table = [
        {
            "stat": s.column,
            "label": s.label,
            "average": averages[s.column],
            "baseline": (baseline[s.column] if baseline is not None else None),
        }
        for s in Stat
    ]
    return {
        "filters": asdict(filters),
        "count": int(len(filtered)),
        "selection": name,
        "averages": averages,
        "table": table,
        "charts": {"radar": to_plotly_spec(fig)},
    }
