from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict

import pandas as pd

from pokedash.data import frame_records
from pokedash.filters import DashboardFilters
from pokedash.stats import STAT_COLUMNS, UNKNOWN_GENERATION, generation_label


def compute_debug(filters: DashboardFilters, ctx: Dict[str, Any]) -> Dict[str, Any]:
    pokemon: pd.DataFrame = ctx.get("pokemon", pd.DataFrame())
    filtered: pd.DataFrame = ctx.get("filtered", pd.DataFrame())
    payload: Dict[str, Any] = {
        "filters": asdict(filters),
        "row_counts": {
            "pokemon_rows": int(len(pokemon)),
            "filtered_rows": int(len(filtered)),
        },
        "missing_stats": {},
        "generation_counts": [],
        "unknown_generation": [],
        "untyped": [],
    }
    if pokemon.empty:
        return payload

    payload["missing_stats"] = {c: int(pokemon[c].isna().sum()) for c in STAT_COLUMNS if c in pokemon.columns}

    gen_counts = pokemon["generation"].value_counts().sort_index().reset_index()
    gen_counts.columns = ["generation", "count"]
    gen_counts["label"] = gen_counts["generation"].map(generation_label)
    payload["generation_counts"] = frame_records(gen_counts)

    unknown = pokemon[pokemon["generation"] == UNKNOWN_GENERATION]
    payload["unknown_generation"] = frame_records(unknown[["id", "name"]])

    untyped = pokemon[pokemon["primary_type"].isna()]
    payload["untyped"] = frame_records(untyped[["id", "name", "types_raw"]])
    return payload
