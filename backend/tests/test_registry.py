import threading
import time

import pytest

from courtside.services.games import registry, store
from courtside.services.games.errors import NotFoundError
from courtside.services.games.session import GameSession


@pytest.fixture()
def empty_registry():
    registry.clear()
    yield
    registry.clear()


def test_cold_reads_share_one_session(monkeypatch, empty_registry):
    loads = []

    def slow_load(code):
        loads.append(code)
        time.sleep(0.05)
        return GameSession(code=code, name='Pickup', password_hash='x')

    monkeypatch.setattr(store, 'load', slow_load)
    results = []
    threads = [threading.Thread(target=lambda: results.append(registry.get('COLD01'))) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert loads == ['COLD01']
    assert len({id(s) for s in results}) == 1
    assert registry.get('COLD01') is results[0]


def test_unknown_game(monkeypatch, empty_registry):
    monkeypatch.setattr(store, 'load', lambda code: None)
    with pytest.raises(NotFoundError):
        registry.get('NOPE00')


def test_locked_returns_the_live_session(monkeypatch, empty_registry):
    session = GameSession(code='HOT001', name='Pickup', password_hash='x')
    registry.put(session)
    monkeypatch.setattr(store, 'load', lambda code: pytest.fail('live sessions are not reloaded'))
    with registry.locked('HOT001') as locked:
        assert locked is session
