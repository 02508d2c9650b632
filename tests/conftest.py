# Shared fixtures for the tests.
# Use `pytest` from the repository root to run them.

import textwrap

import pytest

from pokedash.data import load_pokemon

SAMPLE_CSV = """\
id,name,stats,types
1,bulbasaur,"hp=45,attack=49,defense=49,special-attack=65,special-defense=65,speed=45","grass, poison"
4,charmander,"hp=39,attack=52,defense=43,special-attack=60,special-defense=50,speed=65",fire
152,chikorita,"hp=45,attack=49,defense=65,special-attack=49,special-defense=65,speed=45",grass
248,tyranitar,"hp=100,attack=134,defense=110,special-attack=95,special-defense=100,speed=61","rock,dark"
778,mimikyu,"hp=55,attack=90,defense=80,special-attack=50,special-defense=105,speed=96","ghost, fairy"
1026,missingno,"hp=33,attack=136,defense=0,speed=29",
"""


@pytest.fixture
def write_csv(tmp_path):
    def _write(content, name="pokemon.csv"):
        path = tmp_path / name
        path.write_text(textwrap.dedent(content), encoding="utf-8")
        return path
    return _write


@pytest.fixture
def sample_path(write_csv):
    return write_csv(SAMPLE_CSV)


@pytest.fixture
def pokemon(sample_path):
    return load_pokemon(sample_path)
