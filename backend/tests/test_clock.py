import pytest

from courtside.services.games import catalog
from courtside.services.games.errors import ConflictError
from courtside.services.games.state import READY, LIVE, PAUSED, FINAL, format_clock, period_name


def run(game, seconds):
    for _ in range(seconds):
        game.tick()


def test_start_and_pause(game):
    assert game.status == READY
    game.start_clock()
    assert game.status == LIVE
    run(game, 5)
    assert game.state.game_clock == 595
    assert game.state.shot_clock == 19
    game.pause_clock()
    assert game.status == PAUSED
    # stopped countdowns ignore stray ticks
    run(game, 3)
    assert game.state.game_clock == 595
    assert game.state.shot_clock == 19


def test_pause_only_while_live(game):
    with pytest.raises(ConflictError):
        game.pause_clock()


def test_start_only_from_ready_or_paused(game):
    game.start_clock()
    with pytest.raises(ConflictError):
        game.start_clock()


def test_stop_is_idempotent(game):
    game.clock.stop()
    game.clock.stop()
    assert not game.clock.running


def test_shot_clock_clamps_at_zero(game):
    game.start_clock()
    run(game, 30)
    assert game.state.shot_clock == 0
    assert game.state.game_clock == 570
    assert game.status == LIVE


def test_shot_clock_disabled_only_game_clock_runs():
    from courtside.services.games.session import GameSession
    session = GameSession(code='NOSHOT', name='No shot clock', password_hash='x')
    session.configure(shot_clock_enabled=False)
    session.add_player('home', 'A', 1)
    session.add_player('away', 'B', 2)
    session.start()
    session.start_clock()
    run(session, 10)
    assert session.state.game_clock == 710
    assert session.state.shot_clock == 24
    session.record(catalog.resolve('make2-layup'), 'home_1')
    assert session.state.shot_clock == 24


def test_period_end_advances_and_pauses(game):
    game.start_clock()
    run(game, 600)
    assert game.state.period == 2
    assert game.state.game_clock == 600
    assert game.status == PAUSED
    assert game.play_by_play[0]['message'] == 'End of 1st Quarter'


def test_period_end_fires_once(game):
    game.start_clock()
    run(game, 600)
    entries = len(game.play_by_play)
    run(game, 10)
    assert game.state.period == 2
    assert len(game.play_by_play) == entries


def test_tied_after_regulation_goes_to_overtime(game):
    game.state.period = 4
    game.state.game_clock = 1
    game.start_clock()
    game.tick()
    assert game.state.period == 5
    assert game.state.game_clock == 300
    assert game.status == PAUSED
    assert game.period_name() == 'OT1'


def test_decided_after_regulation_is_final(game):
    game.record(catalog.resolve('make2-layup'), 'away_23')
    game.state.period = 4
    game.state.game_clock = 2
    game.start_clock()
    run(game, 2)
    assert game.status == FINAL
    assert game.state.period == 4
    assert game.play_by_play[0]['message'] == 'Game Over! Away Team wins 2-0!'
    assert not game.clock.running
    with pytest.raises(ConflictError):
        game.start_clock()


def test_halves_format_has_two_regulation_periods():
    from courtside.services.games.session import GameSession
    session = GameSession(code='HALVES', name='Halves', password_hash='x')
    session.configure(game_format='halves', period_minutes=20)
    session.add_player('home', 'A', 1)
    session.add_player('away', 'B', 2)
    session.start()
    session.record(catalog.resolve('make1-ft'), 'home_1')
    session.next_period()
    assert session.state.period == 2
    assert session.period_name() == '2nd Half'
    session.next_period()
    assert session.status == FINAL


def test_reset_clocks(game):
    game.start_clock()
    run(game, 40)
    game.reset_game_clock()
    assert game.state.game_clock == 600
    game.reset_shot_clock()
    assert game.state.shot_clock == 24
    assert game.status == LIVE


def test_clock_formatting():
    assert format_clock(720) == '12:00'
    assert format_clock(65) == '1:05'
    assert format_clock(0) == '0:00'
    assert period_name(3, 'quarters') == '3rd Quarter'
    assert period_name(6, 'quarters') == 'OT2'
    assert period_name(3, 'halves') == 'OT1'
