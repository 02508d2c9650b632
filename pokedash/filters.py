from __future__ import annotations

from dataclasses import dataclass
from numbers import Real
from typing import Optional

from pokedash.stats import Stat

ALL = "All"


@dataclass(frozen=True)
class DashboardFilters:
    generation: Optional[int] = None
    pokemon_type: Optional[str] = None
    x_stat: Stat = Stat.ATTACK
    y_stat: Stat = Stat.DEFENSE
    z_stat: Stat = Stat.SPEED
    top_n: int = 15


def is_all(value: object) -> bool:
    """True for the "no filter" selections: None, blank or "All"."""
    if value is None:
        return True
    return isinstance(value, str) and value.strip() in {"", ALL}


def parse_generation(value: object) -> int:
    """Whole-number generation from an int, a whole float or a numeric string."""
    if isinstance(value, Real) and not isinstance(value, bool):
        if float(value).is_integer():
            return int(value)
        raise ValueError(f"Invalid generation: {value!r}")
    try:
        return int(str(value).strip())
    except ValueError:
        raise ValueError(f"Invalid generation: {value!r}") from None


def _as_generation(value: object) -> Optional[int]:
    if is_all(value):
        return None
    try:
        return parse_generation(value)
    except ValueError:
        return None


def _as_type(value: object) -> Optional[str]:
    if is_all(value):
        return None
    return str(value).strip()


def normalize_filters(raw: dict) -> DashboardFilters:
    generation = _as_generation(raw.get("generation"))
    pokemon_type = _as_type(raw.get("pokemon_type"))

    x_stat = Stat.parse(raw.get("x_stat"), Stat.ATTACK)
    y_stat = Stat.parse(raw.get("y_stat"), Stat.DEFENSE)
    z_stat = Stat.parse(raw.get("z_stat"), Stat.SPEED)

    top_n = raw.get("top_n", 15)
    try:
        top_n = int(top_n)
    except (TypeError, ValueError):
        top_n = 15
    top_n = max(1, min(200, top_n))

    return DashboardFilters(
        generation=generation,
        pokemon_type=pokemon_type,
        x_stat=x_stat,
        y_stat=y_stat,
        z_stat=z_stat,
        top_n=top_n,
    )
