"""Key-value persistence of game sessions on top of SQLAlchemy.

Last write wins. Storage failures are logged and swallowed: the game keeps
running in memory and only durability is lost.
"""

import json
from typing import List, Optional

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from courtside import db
from courtside.models import GameRecord
from .session import GameSession


def _limits() -> dict:
    cfg = current_app.config
    return {
        'undo_capacity': int(cfg.get('UNDO_LIMIT', 20)),
        'play_by_play_limit': int(cfg.get('PLAY_BY_PLAY_LIMIT', 50)),
    }


def save(code: str, session: GameSession) -> None:
    session.touch()
    try:
        record = GameRecord.query.filter_by(code=code).first()
        if record is None:
            record = GameRecord(code=code)
        record.name = session.name
        record.status = session.status
        record.password_hash = session.password_hash
        record.payload = json.dumps(session.to_dict())
        record.last_updated = session.last_updated
        db.session.add(record)
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.error(f"[persist-error] game={code} save failed: {exc}")


def load(code: str) -> Optional[GameSession]:
    try:
        record = GameRecord.query.filter_by(code=code).first()
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.error(f"[persist-error] game={code} load failed: {exc}")
        return None
    if record is None:
        return None
    return GameSession.from_dict(record.snapshot, password_hash=record.password_hash, **_limits())


def list_sessions() -> List[GameRecord]:
    """All stored games, most recently updated first."""
    try:
        records = GameRecord.query.all()
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.error(f"[persist-error] list failed: {exc}")
        return []
    return sorted(records, key=lambda r: r.last_updated or '', reverse=True)

