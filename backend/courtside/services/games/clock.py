"""Game clock and shot clock.

Both clocks are countdowns over fields of the session's live ``GameState``.
Nothing here sleeps: ``tick()`` is called once per second by the scheduler,
and directly by tests.
"""

from .errors import ConflictError
from .state import LIVE, PAUSED, READY, FINAL, OVERTIME_SECONDS, period_name


class Countdown:
    """One-second countdown over an integer field of the session state.

    The field is looked up on every tick so that a state object swapped in
    by undo is the one being counted down.
    """

    def __init__(self, session, field: str):
        self._session = session
        self.field = field
        self.running = False

    @property
    def value(self) -> int:
        return getattr(self._session.state, self.field)

    def start(self) -> None:
        self.running = True

    def stop(self) -> None:
        self.running = False

    def tick(self) -> bool:
        """Count down one second. True only on the tick that reaches zero."""
        if not self.running or self.value <= 0:
            return False
        remaining = self.value - 1
        setattr(self._session.state, self.field, remaining)
        return remaining == 0


class GameClock:
    def __init__(self, session):
        self._session = session
        self.game = Countdown(session, 'game_clock')
        self.shot = Countdown(session, 'shot_clock')

    @property
    def running(self) -> bool:
        return self.game.running

    def start(self) -> None:
        session = self._session
        state = session.state
        if state.status not in (READY, PAUSED):
            raise ConflictError(f'Cannot start the clock while the game is {state.status}')
        state.status = LIVE
        self.game.start()
        if session.settings.shot_clock_enabled:
            self.shot.start()
        session.log(f'Game resumed - {session.period_name()}')

    def pause(self) -> None:
        state = self._session.state
        if state.status != LIVE:
            raise ConflictError('The clock is not running')
        self.stop()
        state.status = PAUSED
        self._session.log('Game paused')

    def stop(self) -> None:
        """Cancel both countdowns. Safe to call when already stopped."""
        self.game.stop()
        self.shot.stop()

    def sync(self) -> None:
        """Run the countdowns exactly when the current state says the game is live."""
        if self._session.state.status == LIVE:
            self.game.start()
            if self._session.settings.shot_clock_enabled:
                self.shot.start()
            else:
                self.shot.stop()
        else:
            self.stop()

    def tick(self) -> None:
        if self.game.tick():
            self.end_period()
            return
        self.shot.tick()

    def reset_game_clock(self) -> None:
        self._session.state.game_clock = self._session.settings.period_seconds
        self._session.log('Game clock reset')

    def reset_shot_clock(self) -> None:
        self._session.state.shot_clock = self._session.settings.shot_clock_seconds

    def end_period(self) -> None:
        """Close the current period: next period, overtime, or final."""
        session = self._session
        state = session.state
        settings = session.settings
        self.stop()
        state.status = PAUSED
        if state.period < settings.regulation_periods:
            ended = session.period_name()
            state.period += 1
            state.game_clock = settings.period_seconds
            session.log(f'End of {ended}')
        elif state.scores['home'] == state.scores['away']:
            state.period += 1
            state.game_clock = OVERTIME_SECONDS
            session.log(f'Overtime period started - {period_name(state.period, settings.game_format)}')
        else:
            session.finish()

    def finish(self) -> None:
        self.stop()
        self._session.state.status = FINAL
