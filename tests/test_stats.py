import pytest
parametrize = pytest.mark.parametrize

from pokedash.stats import GENERATION_RANGES, STAT_COLUMNS, Stat, generation_for_id, generation_label


@parametrize('pokemon_id, generation', [
    (1, 1), (151, 1), (152, 2), (251, 2), (252, 3), (386, 3), (387, 4),
    (493, 4), (494, 5), (649, 5), (650, 6), (721, 6), (722, 7), (809, 7),
    (810, 8), (905, 8), (906, 9), (1025, 9),
])
def test_generation_boundaries(pokemon_id, generation):
    assert generation_for_id(pokemon_id) == generation

@parametrize('pokemon_id', [0, -5, 1026, 10001])
def test_generation_unknown(pokemon_id):
    assert generation_for_id(pokemon_id) == 99

def test_generation_ranges_contiguous():
    expected_start = 1
    for generation, (gen, first, last) in enumerate(GENERATION_RANGES, start=1):
        assert gen == generation
        assert first == expected_start
        assert last >= first
        expected_start = last + 1
    assert expected_start == 1026

def test_generation_in_domain():
    values = {generation_for_id(i) for i in range(-10, 1100)}
    assert values == set(range(1, 10)) | {99}

def test_stat_columns_order():
    assert STAT_COLUMNS == ['hp', 'attack', 'defense', 'special_attack', 'special_defense', 'speed']

@parametrize('raw, stat', [
    ('attack', Stat.ATTACK),
    ('special-attack', Stat.SPECIAL_ATTACK),
    ('Special Defense', Stat.SPECIAL_DEFENSE),
    ('Sp. Atk', Stat.SPECIAL_ATTACK),
    ('HP', Stat.HP),
    (Stat.SPEED, Stat.SPEED),
])
def test_stat_parse(raw, stat):
    assert Stat.parse(raw) is stat

def test_stat_parse_unknown_uses_default():
    assert Stat.parse('luck') is None
    assert Stat.parse('luck', Stat.HP) is Stat.HP
    assert Stat.parse(None, Stat.SPEED) is Stat.SPEED

def test_generation_label():
    assert generation_label(3) == 'Gen 3'
    assert generation_label('4') == 'Gen 4'
    assert generation_label(99) == 'Unknown'
    assert generation_label(None) == 'Unknown'
