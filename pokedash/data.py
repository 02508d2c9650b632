from __future__ import annotations

import logging
import re
from dataclasses import dataclass, fields
from functools import lru_cache
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Tuple, Union

import pandas as pd

from pokedash.filters import DashboardFilters, is_all, normalize_filters, parse_generation
from pokedash.stats import STAT_COLUMNS, Stat, generation_for_id

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parents[1] / "data"
DATA_PATH = DATA_DIR / "pokemon.csv"

IMAGE_URL_TEMPLATE = "https://raw.githubusercontent.com/PokeAPI/sprites/master/sprites/pokemon/{id}.png"
REQUIRED_COLUMNS = ["id", "name", "stats", "types"]
INT64_MAX = 2**63 - 1

PathLike = Union[str, Path]


class MalformedInputError(ValueError):
    """The input table cannot be parsed, lacks a required column or holds an unparseable id."""


@dataclass(frozen=True)
class PokemonRecord:
    id: int
    name: str
    image_url: Optional[str]
    stats_raw: Optional[str]
    hp: Optional[int]
    attack: Optional[int]
    defense: Optional[int]
    special_attack: Optional[int]
    special_defense: Optional[int]
    speed: Optional[int]
    types_raw: Optional[str]
    primary_type: Optional[str]
    secondary_type: Optional[str]
    generation: int
    total: Optional[int] = None


_STAT_ACCESSORS: Dict[Stat, Callable[[PokemonRecord], Optional[int]]] = {
    Stat.HP: lambda r: r.hp,
    Stat.ATTACK: lambda r: r.attack,
    Stat.DEFENSE: lambda r: r.defense,
    Stat.SPECIAL_ATTACK: lambda r: r.special_attack,
    Stat.SPECIAL_DEFENSE: lambda r: r.special_defense,
    Stat.SPEED: lambda r: r.speed,
}


def stat_value(record: PokemonRecord, stat: Union[Stat, str]) -> Optional[int]:
    resolved = Stat.parse(stat)
    if resolved is None:
        raise KeyError(f"Unknown stat: {stat!r}")
    return _STAT_ACCESSORS[resolved](record)


# ---------------- Parsing helpers ----------------
def coerce_str_safe(df: pd.DataFrame, cols: Iterable[str]) -> pd.DataFrame:
    for col in cols:
        if col in df.columns:
            series = df[col].astype("string").str.strip()
            series = series.replace({"": pd.NA})
            df[col] = series
    return df


def stat_pattern(stat: Stat) -> str:
    """Regex capturing the digits of `<stat>=<digits>`, matching whole keys only.

    `attack=` must not match inside `special_attack=`, and `special-attack`
    is accepted as a spelling of `special_attack`.
    """
    key = stat.value.replace("_", "[_-]")
    return rf"(?:^|[^\w-]){key}\s*=\s*(\d+)"


def parse_stat_column(stats_raw: pd.Series, stat: Stat) -> pd.Series:
    """Stat values as `Int64`; values too large for int64 are left missing."""
    extracted = stats_raw.astype("string").str.extract(stat_pattern(stat), flags=re.IGNORECASE, expand=False)
    values = [int(v) if pd.notna(v) else None for v in extracted]
    overflow = [i for i, v in enumerate(values) if v is not None and v > INT64_MAX]
    if overflow:
        logger.warning("%s out of range in rows %s; left missing", stat.column, [i + 1 for i in overflow])
        for i in overflow:
            values[i] = None
    return pd.Series(pd.array(values, dtype="Int64"), index=stats_raw.index)


def parse_types(value: object) -> Tuple[Optional[str], Optional[str]]:
    if value is None or pd.isna(value):
        return None, None
    tokens = [t.strip() for t in str(value).split(",") if t.strip()]
    primary = tokens[0] if tokens else None
    secondary = tokens[1] if len(tokens) > 1 else None
    return primary, secondary


def parse_ids(series: pd.Series) -> pd.Series:
    ids = pd.to_numeric(series.astype("string").str.strip(), errors="coerce").astype("Float64")
    bad = (ids.isna() | (ids != ids.round()) | (ids.abs() >= 2.0**63)).fillna(True).astype(bool)
    if bad.any():
        pos = int(bad.to_numpy().nonzero()[0][0])
        raise MalformedInputError(f"Row {pos + 1}: id {series.iloc[pos]!r} is not an integer")
    return ids.astype("int64")


def read_table(path: PathLike) -> pd.DataFrame:
    path = Path(path)
    sep = "\t" if path.suffix.lower() == ".tsv" else ","
    try:
        df = pd.read_csv(path, sep=sep, dtype=str, skipinitialspace=True, keep_default_na=False, na_values=[""])
    except pd.errors.EmptyDataError as exc:
        raise MalformedInputError(f"{path.name} is empty; expected columns {REQUIRED_COLUMNS}") from exc
    except pd.errors.ParserError as exc:
        raise MalformedInputError(f"Could not parse {path.name}: {exc}") from exc
    df.columns = [str(c).strip().lower() for c in df.columns]
    duplicated = sorted(set(df.columns[df.columns.duplicated()]))
    if duplicated:
        raise MalformedInputError(f"Duplicate columns in {path.name}: {duplicated}")
    return df


# ---------------- Loader ----------------
def load_pokemon(path: PathLike) -> pd.DataFrame:
    """Load the Pokémon table and derive its enriched columns.

    Stats absent from a row's `stats` string stay missing (`pd.NA`), as do both
    type columns when `types` is blank. The first row whose `id` is not an
    integer aborts the load with `MalformedInputError`; ids outside every
    generation range are kept and mapped to the unknown generation.
    """
    raw = read_table(path)
    missing = [c for c in REQUIRED_COLUMNS if c not in raw.columns]
    if missing:
        raise MalformedInputError(f"Missing columns in {Path(path).name}: {missing}. Found: {list(raw.columns)}")

    raw = coerce_str_safe(raw, ["id", "name", "stats", "types", "image_url"])
    df = pd.DataFrame(index=raw.index)
    df["id"] = parse_ids(raw["id"])
    df["name"] = raw["name"]

    if "image_url" in raw.columns:
        df["image_url"] = raw["image_url"]
    else:
        logger.debug("No image_url column in %s; using sprite template", path)
        df["image_url"] = df["id"].map(lambda i: IMAGE_URL_TEMPLATE.format(id=i)).astype("string")

    df["stats_raw"] = raw["stats"]
    for stat in Stat:
        df[stat.column] = parse_stat_column(df["stats_raw"], stat)
    total = df[STAT_COLUMNS].astype("Float64").sum(axis=1, min_count=1)
    df["total"] = total.where((total < 2.0**63).fillna(False)).astype("Int64")

    df["types_raw"] = raw["types"]
    types = df["types_raw"].apply(parse_types)
    df["primary_type"] = pd.Series([t[0] for t in types], index=df.index, dtype="string")
    df["secondary_type"] = pd.Series([t[1] for t in types], index=df.index, dtype="string")

    df["generation"] = df["id"].map(generation_for_id).astype("int64")
    df = df.reset_index(drop=True)

    incomplete = int(df[STAT_COLUMNS].isna().any(axis=1).sum())
    untyped = int(df["primary_type"].isna().sum())
    if incomplete:
        logger.debug("%d records with missing stats in %s", incomplete, path)
    if untyped:
        logger.debug("%d records without types in %s", untyped, path)
    logger.info("Loaded %d Pokémon from %s", len(df), path)
    return df


def _as_int(value: object) -> Optional[int]:
    if value is None or pd.isna(value):
        return None
    return int(value)


def _as_str(value: object) -> Optional[str]:
    if value is None or pd.isna(value):
        return None
    return str(value)


_INT_FIELDS = {"id", "generation", "total", *STAT_COLUMNS}


def iter_records(df: pd.DataFrame) -> List[PokemonRecord]:
    names = [f.name for f in fields(PokemonRecord)]
    out: List[PokemonRecord] = []
    for row in df.to_dict(orient="records"):
        values = {n: (_as_int(row.get(n)) if n in _INT_FIELDS else _as_str(row.get(n))) for n in names}
        out.append(PokemonRecord(**values))
    return out


def frame_records(df: pd.DataFrame) -> List[Dict[str, object]]:
    """Rows as dicts with missing values as None (JSON-safe)."""
    if df.empty:
        return []
    return df.astype(object).where(df.notna(), None).to_dict(orient="records")


# ---------------- Filtering / aggregation ----------------
def filter_pokemon(
    df: pd.DataFrame,
    generation: Optional[Union[int, float, str]] = None,
    pokemon_type: Optional[str] = None,
) -> pd.DataFrame:
    """Rows matching the generation and type selections, in input order.

    `None` or "All" disables a selection. A type matches either type slot;
    rows without types only appear when no type is selected.
    """
    mask = pd.Series(True, index=df.index)
    if not is_all(generation):
        mask &= df["generation"] == parse_generation(generation)
    if not is_all(pokemon_type):
        t = str(pokemon_type).strip()
        type_match = df["primary_type"].eq(t) | df["secondary_type"].eq(t)
        mask &= type_match.fillna(False).astype(bool)
    return df[mask].copy()


def average_stats(df: pd.DataFrame) -> Dict[str, float]:
    """Mean of each stat over the records that have it; 0.0 when none do."""
    out: Dict[str, float] = {}
    for stat in Stat:
        if df.empty or stat.column not in df.columns:
            out[stat.column] = 0.0
            continue
        mean = pd.to_numeric(df[stat.column], errors="coerce").mean()
        out[stat.column] = float(mean) if pd.notna(mean) else 0.0
    return out


def available_generations(df: pd.DataFrame) -> List[int]:
    if df.empty or "generation" not in df.columns:
        return []
    return sorted(int(g) for g in df["generation"].dropna().unique())


def available_types(df: pd.DataFrame) -> List[str]:
    if df.empty:
        return []
    types = pd.concat([df["primary_type"], df["secondary_type"]]).dropna().astype(str)
    return sorted(types.unique().tolist())


# ---------------- Public API (Streamlit) ----------------
def file_signature(path: Path) -> Tuple[str, float]:
    return (str(path), path.stat().st_mtime)


@lru_cache(maxsize=4)
def _load_dashboard_data_cached(file_sig: Tuple[str, float]) -> Dict[str, object]:
    path = Path(file_sig[0])
    pokemon = load_pokemon(path)
    return {
        "file": path.name,
        "pokemon": pokemon,
        "generations": available_generations(pokemon),
        "types": available_types(pokemon),
    }


def load_dashboard_data(path: Optional[PathLike] = None) -> Dict[str, object]:
    """Process-wide dataset, reloaded only when the file changes on disk.

    Callers must treat the returned frame as read-only.
    """
    path = Path(path) if path is not None else DATA_PATH
    if not path.exists():
        return {"file": None, "pokemon": pd.DataFrame(), "generations": [], "types": []}
    return _load_dashboard_data_cached(file_signature(path))


def prepare_context(filters: dict | DashboardFilters, data_ctx: Dict[str, object]) -> Dict[str, object]:
    pokemon: pd.DataFrame = data_ctx.get("pokemon", pd.DataFrame())
    filt = filters if isinstance(filters, DashboardFilters) else normalize_filters(filters)

    if pokemon.empty:
        filtered = pokemon.copy()
    else:
        filtered = filter_pokemon(pokemon, filt.generation, filt.pokemon_type)

    return {
        "filters": filt,
        "pokemon": pokemon,
        "filtered": filtered,
        "averages": average_stats(filtered),
        "baseline_averages": average_stats(pokemon),
    }
