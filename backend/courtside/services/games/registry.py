"""Live game sessions owned by this process.

Each game has exactly one in-memory ``GameSession`` (with its undo
history) and one lock. Operator requests and clock ticks both mutate a
session only while holding its lock, so a snapshot-then-mutate step never
interleaves with a tick.
"""

import threading
from contextlib import contextmanager
from typing import Dict, Iterator

from courtside import socketio
from . import store
from .errors import NotFoundError
from .session import GameSession

_live: Dict[str, GameSession] = {}
_locks: Dict[str, threading.RLock] = {}
_registry_lock = threading.Lock()


def _lock_for(code: str) -> threading.RLock:
    with _registry_lock:
        return _locks.setdefault(code, threading.RLock())


def get(code: str) -> GameSession:
    session = _live.get(code)
    if session is not None:
        return session
    # checked again under the game lock so only one load wins
    with _lock_for(code):
        session = _live.get(code)
        if session is None:
            session = store.load(code)
            if session is None:
                raise NotFoundError('Game not found')
            _live[code] = session
    return session


def put(session: GameSession) -> None:
    _live[session.code] = session


@contextmanager
def locked(code: str) -> Iterator[GameSession]:
    with _lock_for(code):
        yield get(code)


def commit(session: GameSession) -> None:
    """Persist a session and tell subscribed viewers it changed."""
    store.save(session.code, session)
    socketio.emit(
        'state_update',
        {'game_code': session.code, 'last_updated': session.last_updated},
        to=f"game:{session.code}",
        namespace='/ws',
    )


def clear() -> None:
    with _registry_lock:
        _live.clear()
        _locks.clear()
