import pytest
parametrize = pytest.mark.parametrize

from pokedash.data import average_stats, filter_pokemon, prepare_context
from pokedash.filters import DashboardFilters, normalize_filters, parse_generation
from pokedash.stats import STAT_COLUMNS, Stat


def test_filter_all_returns_everything(pokemon):
    result = filter_pokemon(pokemon, 'All', 'All')
    assert result['id'].tolist() == pokemon['id'].tolist()
    assert filter_pokemon(pokemon)['id'].tolist() == pokemon['id'].tolist()

def test_filter_returns_new_frame(pokemon):
    result = filter_pokemon(pokemon)
    assert result is not pokemon
    result.loc[result.index[0], 'name'] = 'changed'
    assert pokemon['name'].iloc[0] == 'bulbasaur'

@parametrize('generation', [1, '1', ' 1 '])
def test_filter_generation(pokemon, generation):
    assert filter_pokemon(pokemon, generation=generation)['name'].tolist() == ['bulbasaur', 'charmander']

def test_filter_unknown_generation_bucket(pokemon):
    assert filter_pokemon(pokemon, generation=99)['name'].tolist() == ['missingno']

def test_filter_absent_generation_is_empty(pokemon):
    result = filter_pokemon(pokemon, generation=5)
    assert result.empty
    assert list(result.columns) == list(pokemon.columns)

def test_filter_invalid_generation(pokemon):
    with pytest.raises(ValueError):
        filter_pokemon(pokemon, generation='first')

@parametrize('generation', [1, 1.0, '1', ' 1 '])
def test_filter_whole_number_generation(pokemon, generation):
    assert filter_pokemon(pokemon, generation=generation)['name'].tolist() == ['bulbasaur', 'charmander']

@parametrize('generation', [1.5, '1.0', True])
def test_parse_generation_rejects(generation):
    with pytest.raises(ValueError):
        parse_generation(generation)

def test_filter_type_matches_either_slot(pokemon):
    assert filter_pokemon(pokemon, pokemon_type='grass')['name'].tolist() == ['bulbasaur', 'chikorita']
    assert filter_pokemon(pokemon, pokemon_type='poison')['name'].tolist() == ['bulbasaur']
    assert filter_pokemon(pokemon, pokemon_type='fairy')['name'].tolist() == ['mimikyu']

def test_filter_untyped_only_under_all(pokemon):
    for t in ['grass', 'fire', 'dark', 'ghost', 'normal']:
        assert 'missingno' not in filter_pokemon(pokemon, pokemon_type=t)['name'].tolist()
    assert 'missingno' in filter_pokemon(pokemon, pokemon_type='All')['name'].tolist()

def test_filter_generation_and_type(pokemon):
    assert filter_pokemon(pokemon, generation=2, pokemon_type='grass')['name'].tolist() == ['chikorita']
    assert filter_pokemon(pokemon, generation=1, pokemon_type='dark').empty

@parametrize('generation, pokemon_type', [(1, 'All'), ('All', 'grass'), (2, 'dark'), (5, 'All')])
def test_filter_idempotent(pokemon, generation, pokemon_type):
    once = filter_pokemon(pokemon, generation, pokemon_type)
    twice = filter_pokemon(once, generation, pokemon_type)
    assert twice['id'].tolist() == once['id'].tolist()

def test_average_stats_empty(pokemon):
    assert average_stats(pokemon.iloc[0:0]) == {c: 0.0 for c in STAT_COLUMNS}

def test_average_stats_single_record(pokemon):
    bulbasaur = pokemon.iloc[[0]]
    assert average_stats(bulbasaur) == {
        'hp': 45.0, 'attack': 49.0, 'defense': 49.0,
        'special_attack': 65.0, 'special_defense': 65.0, 'speed': 45.0,
    }

def test_average_stats_skips_missing(pokemon):
    subset = pokemon[pokemon['name'].isin(['bulbasaur', 'missingno'])]
    averages = average_stats(subset)
    assert averages['special_attack'] == 65.0
    assert averages['special_defense'] == 65.0
    assert averages['hp'] == 39.0
    assert averages['defense'] == 24.5

def test_average_stats_all_missing_is_zero(pokemon):
    missingno = pokemon[pokemon['name'] == 'missingno']
    averages = average_stats(missingno)
    assert averages['special_attack'] == 0.0
    assert averages['attack'] == 136.0

def test_normalize_filters_defaults():
    filters = normalize_filters({})
    assert filters == DashboardFilters()
    assert filters.x_stat is Stat.ATTACK
    assert filters.y_stat is Stat.DEFENSE
    assert filters.z_stat is Stat.SPEED

def test_normalize_filters_values():
    filters = normalize_filters({
        'generation': '3',
        'pokemon_type': ' fire ',
        'x_stat': 'special-attack',
        'y_stat': 'Speed',
        'z_stat': 'bogus',
        'top_n': '500',
    })
    assert filters.generation == 3
    assert filters.pokemon_type == 'fire'
    assert filters.x_stat is Stat.SPECIAL_ATTACK
    assert filters.y_stat is Stat.SPEED
    assert filters.z_stat is Stat.SPEED
    assert filters.top_n == 200

@parametrize('generation', ['All', None, '', 'first'])
def test_normalize_filters_all_generation(generation):
    assert normalize_filters({'generation': generation}).generation is None

def test_normalize_filters_float_generation():
    assert normalize_filters({'generation': 2.0}).generation == 2

def test_normalize_filters_all_type():
    assert normalize_filters({'pokemon_type': 'All'}).pokemon_type is None

def test_prepare_context(pokemon):
    ctx = prepare_context({'generation': '1', 'pokemon_type': 'All'}, {'pokemon': pokemon})
    assert ctx['filters'].generation == 1
    assert ctx['filtered']['name'].tolist() == ['bulbasaur', 'charmander']
    assert ctx['averages']['hp'] == 42.0
    assert ctx['baseline_averages'] == average_stats(pokemon)

def test_prepare_context_without_data():
    import pandas as pd
    ctx = prepare_context(DashboardFilters(generation=1), {'pokemon': pd.DataFrame()})
    assert ctx['filtered'].empty
    assert ctx['averages'] == {c: 0.0 for c in STAT_COLUMNS}
