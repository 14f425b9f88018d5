import random

import pytest

from courtside.services.games import catalog
from courtside.services.games.actions import Action
from courtside.services.games.state import GameState
from courtside.services.games.stats import Analytics, PlayerStats, apply_action


def make_action(code, team='home', number=7, name='Avery'):
    ac = catalog.resolve(code)
    return Action(
        id=f'{code}-{random.random()}', player_id=f'{team}_{number}', player_number=number,
        player_name=name, team=team, code=ac.code, kind='shot' if ac.is_shot else ac.verb,
        outcome=ac.outcome, points=ac.points, subtype=ac.subtype, location=None, distance=None,
        period=1, game_clock='10:00', timestamp='2026-01-01T00:00:00+00:00',
    )


def test_corner_three_scenario(game):
    game.start_clock()
    for _ in range(6):
        game.tick()
    assert game.state.shot_clock == 18

    game.record(catalog.resolve('make3-corner'), 'home_7', location=(50, 100))

    assert game.state.scores == {'home': 3, 'away': 0}
    stats = game.stats['home_7']
    assert stats.points == 3
    assert (stats.three_pointers.made, stats.three_pointers.attempted) == (1, 1)
    assert stats.field_goals.attempted == 0
    a = game.analytics
    assert (a.total_shots, a.made_shots, a.three_point_attempts, a.three_point_makes) == (1, 1, 1, 1)
    assert game.state.shot_clock == 24


@pytest.mark.parametrize('code, points, line', [
    ('make1-ft', 1, 'free_throws'),
    ('make2-layup', 2, 'field_goals'),
    ('make2-fadeaway', 2, 'field_goals'),
    ('make3-3pt', 3, 'three_pointers'),
    ('make3-logo', 3, 'three_pointers'),
])
def test_n_makes_add_n_times_points(code, points, line):
    stats, state, analytics = PlayerStats(), GameState(), Analytics()
    n = 5
    for _ in range(n):
        apply_action(make_action(code), stats, state, analytics)
    assert stats.points == n * points
    assert state.scores['home'] == n * points
    counter = getattr(stats, line)
    assert (counter.made, counter.attempted) == (n, n)


def test_misses_count_attempts_only():
    stats, state, analytics = PlayerStats(), GameState(), Analytics()
    apply_action(make_action('miss2-layup'), stats, state, analytics)
    apply_action(make_action('miss1-ft'), stats, state, analytics)
    apply_action(make_action('miss3-corner'), stats, state, analytics)
    assert stats.points == 0
    assert state.scores['home'] == 0
    assert (stats.field_goals.made, stats.field_goals.attempted) == (0, 1)
    assert (stats.free_throws.made, stats.free_throws.attempted) == (0, 1)
    assert (stats.three_pointers.made, stats.three_pointers.attempted) == (0, 1)
    assert analytics.total_shots == 3
    assert analytics.made_shots == 0


def test_free_throws_do_not_touch_field_goals():
    stats, state, analytics = PlayerStats(), GameState(), Analytics()
    apply_action(make_action('make1-ft'), stats, state, analytics)
    assert stats.field_goals.attempted == 0
    assert stats.three_pointers.attempted == 0
    assert analytics.three_point_attempts == 0


@pytest.mark.parametrize('verb, counter', [
    ('rebound', 'rebounds'), ('assist', 'assists'), ('block', 'blocks'),
    ('steal', 'steals'), ('turnover', 'turnovers'), ('foul', 'fouls'),
])
def test_stat_verbs_bump_one_counter(verb, counter):
    stats, state, analytics = PlayerStats(), GameState(), Analytics()
    line = apply_action(make_action(verb), stats, state, analytics)
    assert getattr(stats, counter) == 1
    assert stats.points == 0
    assert state.scores == {'home': 0, 'away': 0}
    assert analytics.total_actions == 1
    assert analytics.total_shots == 0
    assert line == f'#7 Avery {verb}'


def test_make_calls_on_make_and_miss_does_not():
    calls = []
    stats, state, analytics = PlayerStats(), GameState(), Analytics()
    apply_action(make_action('miss2-jumper'), stats, state, analytics, on_make=lambda: calls.append(1))
    assert calls == []
    apply_action(make_action('make2-jumper'), stats, state, analytics, on_make=lambda: calls.append(1))
    assert calls == [1]


def test_shot_play_by_play_line():
    stats, state, analytics = PlayerStats(), GameState(), Analytics()
    line = apply_action(make_action('make2-layup'), stats, state, analytics)
    assert line == '#7 Avery makes layup (10:00)'


def test_analytics_match_ledger_after_every_action(game):
    rng = random.Random(7)
    codes = ['make2-layup', 'miss2-layup', 'make3-3pt', 'miss3-corner', 'make1-ft', 'rebound', 'assist', 'steal']
    for _ in range(60):
        player = rng.choice(['home_7', 'away_23'])
        game.record(catalog.resolve(rng.choice(codes)), player)
        recomputed = Analytics.from_actions(game.actions)
        assert recomputed == game.analytics
    shots = [a for a in game.actions if a.is_shot]
    assert game.analytics.total_shots == len(shots)
    assert game.analytics.made_shots == sum(1 for a in shots if a.outcome == 'make')
    assert game.analytics.total_actions == len(game.actions)


def test_percentages():
    analytics = Analytics(total_shots=3, made_shots=2, three_point_attempts=4, three_point_makes=1)
    assert analytics.shooting_pct == 67
    assert analytics.three_point_pct == 25
    assert Analytics().shooting_pct == 0
    data = analytics.to_dict()
    assert data['shooting_pct'] == 67
    assert Analytics.from_dict(data) == analytics


def test_player_stats_round_trip_keeps_shot_lines():
    stats = PlayerStats(points=5)
    stats.three_pointers.record(True)
    restored = PlayerStats.from_dict(stats.to_dict())
    assert restored == stats
    assert restored.to_dict()['three_pointers']['pct'] == 100
