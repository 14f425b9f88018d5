import itertools
from typing import Dict

from courtside import socketio
from . import registry
from .errors import NotFoundError
from .state import LIVE


# code -> generation of the ticker currently allowed to run for that game
_tickers: Dict[str, int] = {}
_generations = itertools.count(1)


def start_clock_ticker(app, game_code: str) -> None:
    """Tick the game's clocks once per CLOCK_TICK_SEC while it is live.

    - No-ops in TESTING mode unless ENABLE_SCHEDULER_IN_TESTS is set
    - Starting again replaces any previous ticker for the game
    - The worker stops on its own when the game leaves the live status
    """
    if app.config.get('TESTING') and not app.config.get('ENABLE_SCHEDULER_IN_TESTS'):
        return

    generation = next(_generations)
    _tickers[game_code] = generation
    interval = float(app.config.get('CLOCK_TICK_SEC', 1))
    app.logger.info(f"[timer-set] game={game_code} generation={generation} interval={interval}s")
    socketio.start_background_task(_worker, app, game_code, generation, interval)


def stop_clock_ticker(game_code: str) -> None:
    """Cancel the game's ticker. Calling it for a stopped game is a no-op."""
    _tickers.pop(game_code, None)


def is_ticking(game_code: str) -> bool:
    return game_code in _tickers


def _worker(app, game_code: str, generation: int, interval: float) -> None:
    while True:
        socketio.sleep(interval)
        if _tickers.get(game_code) != generation:
            app.logger.info(f"[timer-abort] game={game_code} generation={generation} cancelled")
            return
        with app.app_context():
            try:
                ended = _tick_once(app, game_code, generation)
            except NotFoundError:
                _tickers.pop(game_code, None)
                app.logger.warning(f"[timer-abort] game={game_code} no longer exists")
                return
        if ended:
            return


def _tick_once(app, game_code: str, generation: int) -> bool:
    with registry.locked(game_code) as session:
        # a pause may have landed while this worker waited for the lock
        if _tickers.get(game_code) != generation:
            return True
        period = session.state.period
        session.tick()
        registry.commit(session)
        if session.status == LIVE:
            return False
        if _tickers.get(game_code) == generation:
            _tickers.pop(game_code, None)
        app.logger.info(
            f"[period-end] game={game_code} period={period} status={session.status} "
            f"next_period={session.state.period}"
        )
        return True
