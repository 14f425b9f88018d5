from courtside import db, bcrypt
from flask_login import UserMixin
from datetime import datetime, timezone
import json
import string
import random

CODE_LENGTH = 6
CODE_ALPHABET = string.ascii_uppercase + string.digits


def _utcnow():
    return datetime.now(timezone.utc)


def is_valid_code(code) -> bool:
    return bool(code) and len(code) == CODE_LENGTH and all(ch in CODE_ALPHABET for ch in code)


def generate_game_code(length=CODE_LENGTH):
    """Generate a unique, short game code."""
    while True:
        code = ''.join(random.choices(CODE_ALPHABET, k=length))
        if not GameRecord.query.filter_by(code=code).first():
            return code


def hash_password(password):
    return bcrypt.generate_password_hash(password).decode('utf-8')


def check_password(password_hash, password):
    if not password_hash or not password:
        return False
    return bcrypt.check_password_hash(password_hash, password)


class GameRecord(db.Model):
    """Persisted snapshot of one game session, keyed by its join code."""
    __tablename__ = 'game_session'
    id = db.Column(db.Integer, primary_key=True)
    code = db.Column(db.String(6), unique=True, nullable=False, index=True)
    name = db.Column(db.String(128), nullable=False)
    status = db.Column(db.String(16), nullable=False, default='setup')  # setup, ready, live, paused, final
    password_hash = db.Column(db.String(128), nullable=False)
    payload = db.Column(db.Text, nullable=False)  # JSON-encoded GameSession.to_dict()
    created = db.Column(db.DateTime(timezone=True), default=_utcnow)
    last_updated = db.Column(db.String(40), nullable=True)  # ISO timestamp viewers compare against

    @property
    def snapshot(self):
        return json.loads(self.payload)

    def to_summary(self):
        try:
            data = self.snapshot
        except ValueError:
            data = {}
        state = data.get('game_state') or {}
        teams = data.get('teams') or {}
        return {
            'code': self.code,
            'name': self.name,
            'status': self.status,
            'last_updated': self.last_updated,
            'scores': state.get('scores'),
            'teams': {side: t.get('name') for side, t in teams.items()},
        }


class AdminSeat(UserMixin):
    """The operator seat of a single game; logging in proves the admin password."""

    PREFIX = 'admin:'

    def __init__(self, code):
        self.code = code

    def get_id(self):
        return f'{self.PREFIX}{self.code}'

    @classmethod
    def code_from_id(cls, seat_id):
        if not seat_id or not seat_id.startswith(cls.PREFIX):
            return None
        return seat_id[len(cls.PREFIX):]

    def can_control(self, code):
        return self.code == code
