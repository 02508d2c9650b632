from __future__ import annotations

from enum import Enum
from typing import Optional, Tuple


class Stat(str, Enum):
    HP = "hp"
    ATTACK = "attack"
    DEFENSE = "defense"
    SPECIAL_ATTACK = "special_attack"
    SPECIAL_DEFENSE = "special_defense"
    SPEED = "speed"

    @property
    def column(self) -> str:
        return self.value

    @property
    def label(self) -> str:
        return STAT_LABELS[self]

    @classmethod
    def parse(cls, value: object, default: Optional["Stat"] = None) -> Optional["Stat"]:
        """Resolve a column name, label or enum member; unknown values give `default`."""
        if isinstance(value, Stat):
            return value
        if value is None:
            return default
        raw = str(value).strip()
        key = raw.lower().replace("-", "_").replace(" ", "_")
        for stat in cls:
            if key == stat.value or raw.lower() == stat.label.lower():
                return stat
        return default


STAT_LABELS = {
    Stat.HP: "HP",
    Stat.ATTACK: "Attack",
    Stat.DEFENSE: "Defense",
    Stat.SPECIAL_ATTACK: "Sp. Atk",
    Stat.SPECIAL_DEFENSE: "Sp. Def",
    Stat.SPEED: "Speed",
}

STAT_COLUMNS = [s.column for s in Stat]

UNKNOWN_GENERATION = 99

# (generation, first id, last id), inclusive.
GENERATION_RANGES: Tuple[Tuple[int, int, int], ...] = (
    (1, 1, 151),
    (2, 152, 251),
    (3, 252, 386),
    (4, 387, 493),
    (5, 494, 649),
    (6, 650, 721),
    (7, 722, 809),
    (8, 810, 905),
    (9, 906, 1025),
)


def generation_for_id(pokemon_id: int) -> int:
    for generation, first, last in GENERATION_RANGES:
        if first <= pokemon_id <= last:
            return generation
    return UNKNOWN_GENERATION


def generation_label(generation: object) -> str:
    if generation is None:
        return "Unknown"
    try:
        generation = int(generation)
    except (TypeError, ValueError):
        return "Unknown"
    if generation == UNKNOWN_GENERATION:
        return "Unknown"
    return f"Gen {generation}"
