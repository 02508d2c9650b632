from __future__ import annotations

import json
from typing import Any, Dict, Iterable

import altair as alt
import pandas as pd
import plotly.graph_objects as go

alt.data_transformers.disable_max_rows()


def to_vega_spec(chart: alt.TopLevelMixin) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def to_plotly_spec(fig: go.Figure) -> Dict[str, Any]:
    """Convert a Plotly figure into a plain figure dict (JSON-serializable)."""
    return json.loads(fig.to_json())


def chart_frame(df: pd.DataFrame, cols: Iterable[str]) -> pd.DataFrame:
    """Copy of `cols` with nullable dtypes flattened for the chart libraries.

    Numeric columns become float (missing -> NaN), everything else object
    (missing -> None).
    """
    out = pd.DataFrame(index=df.index)
    for col in cols:
        if col not in df.columns:
            continue
        series = df[col]
        if pd.api.types.is_numeric_dtype(series):
            out[col] = pd.to_numeric(series, errors="coerce").astype(float)
        else:
            out[col] = series.astype(object).where(series.notna(), None)
    return out.reset_index(drop=True)
