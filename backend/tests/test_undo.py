import copy

import pytest

from courtside.services.games import catalog
from courtside.services.games.state import GameState
from courtside.services.games.stats import Analytics, PlayerStats
from courtside.services.games.undo import UndoLedger


def snapshot(game):
    return copy.deepcopy(game.state), copy.deepcopy(game.stats), copy.deepcopy(game.analytics)


@pytest.mark.parametrize('code', ['make3-corner', 'miss2-layup', 'make1-ft', 'rebound', 'foul'])
def test_undo_restores_everything(game, code):
    game.record(catalog.resolve('make2-layup'), 'away_23')
    before_state, before_stats, before_analytics = snapshot(game)
    before_actions = list(game.actions)

    action = game.record(catalog.resolve(code), 'home_7')
    entry = game.undo()

    assert entry.action is action
    assert game.state == before_state
    assert game.stats == before_stats
    assert game.analytics == before_analytics
    assert game.actions == before_actions
    assert action.id not in {a.id for a in game.actions}
    assert game.play_by_play[0]['message'].startswith('Undone: ')


def test_undo_with_nothing_recorded(game):
    assert game.undo() is None


def test_undo_is_lifo(game):
    first = game.record(catalog.resolve('make2-layup'), 'home_7')
    second = game.record(catalog.resolve('make3-3pt'), 'home_7')
    assert game.undo().action is second
    assert game.state.scores['home'] == 2
    assert game.undo().action is first
    assert game.state.scores['home'] == 0
    assert game.undo() is None


def test_undo_rewinds_both_clocks(game):
    game.start_clock()
    before = copy.deepcopy(game.state)
    game.record(catalog.resolve('make2-layup'), 'home_7')
    for _ in range(5):
        game.tick()
    game.undo()
    assert game.state == before
    assert game.state.game_clock == 600
    assert game.state.shot_clock == 24
    assert game.status == 'live'
    # countdowns follow the restored state object
    game.tick()
    assert game.state.game_clock == 599
    assert game.state.shot_clock == 23


def test_undo_before_the_clock_started_stops_the_countdowns(game):
    game.record(catalog.resolve('rebound'), 'home_7')
    game.start_clock()
    game.tick()
    game.undo()
    assert game.status == 'ready'
    assert game.state.game_clock == 600
    assert not game.clock.running
    game.tick()
    assert game.state.game_clock == 600
    assert game.state.shot_clock == 24


def test_undo_team_adjustment(game):
    game.adjust_team_stat('home', 'fouls', 1)
    assert game.state.fouls['home'] == 1
    entry = game.undo()
    assert entry.action.stat == 'fouls'
    assert game.state.fouls['home'] == 0
    assert game.play_by_play[0]['message'] == 'Undone: Home Team foul change'


def test_ledger_is_bounded_and_evicts_oldest():
    ledger = UndoLedger(capacity=20)
    for i in range(21):
        ledger.push(f'action-{i}', GameState(), {}, Analytics())
    assert len(ledger) == 20
    popped = []
    while ledger:
        popped.append(ledger.pop().action)
    assert popped[0] == 'action-20'
    assert popped[-1] == 'action-1'
    assert 'action-0' not in popped


def test_twenty_first_action_makes_the_first_unrecoverable(game):
    actions = [game.record(catalog.resolve('make1-ft'), 'home_7') for _ in range(21)]
    assert len(game.undo_ledger) == 20
    for _ in range(20):
        game.undo()
    assert game.undo() is None
    assert game.actions == [actions[0]]
    assert game.state.scores['home'] == 1


def test_push_stores_deep_copies():
    ledger = UndoLedger()
    state = GameState()
    stats = {'home_7': PlayerStats()}
    ledger.push('a', state, stats, Analytics())
    state.scores['home'] = 10
    stats['home_7'].field_goals.record(True)
    entry = ledger.peek()
    assert entry.state.scores['home'] == 0
    assert entry.stats['home_7'].field_goals.attempted == 0


def test_capacity_must_be_positive():
    with pytest.raises(ValueError):
        UndoLedger(capacity=0)
