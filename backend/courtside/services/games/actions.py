"""Action codes and the immutable records kept in a game's ledger."""

import uuid
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from typing import Optional, Tuple

MAKE = 'make'
MISS = 'miss'

STAT_VERBS = ('rebound', 'assist', 'block', 'steal', 'turnover', 'foul')

# Shot subtypes that score as three-pointers
THREE_POINT_SUBTYPES = ('3pt', 'corner', 'logo')
FREE_THROW_SUBTYPE = 'ft'

HOME = 'home'
AWAY = 'away'
SIDES = (HOME, AWAY)


def new_id() -> str:
    return uuid.uuid4().hex


def utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class ActionCode:
    """A selectable action: a shot (outcome x points x subtype) or a stat verb."""

    outcome: Optional[str] = None
    points: int = 0
    subtype: Optional[str] = None
    verb: Optional[str] = None

    @classmethod
    def shot(cls, outcome: str, points: int, subtype: str) -> 'ActionCode':
        return cls(outcome=outcome, points=points, subtype=subtype)

    @classmethod
    def stat(cls, verb: str) -> 'ActionCode':
        return cls(verb=verb)

    @property
    def is_shot(self) -> bool:
        return self.outcome is not None

    @property
    def is_make(self) -> bool:
        return self.outcome == MAKE

    @property
    def is_three(self) -> bool:
        return self.is_shot and (self.points == 3 or self.subtype in THREE_POINT_SUBTYPES)

    @property
    def is_free_throw(self) -> bool:
        return self.is_shot and self.subtype == FREE_THROW_SUBTYPE

    @property
    def code(self) -> str:
        if not self.is_shot:
            return self.verb
        head = f'{self.outcome}{self.points or ""}'
        return f'{head}-{self.subtype}' if self.subtype else head

    def __str__(self):
        return self.code


@dataclass(frozen=True)
class Action:
    id: str
    player_id: str
    player_number: int
    player_name: str
    team: str
    code: str
    kind: str  # 'shot' or the stat verb
    outcome: Optional[str]
    points: int
    subtype: Optional[str]
    location: Optional[Tuple[float, float]]
    distance: Optional[float]
    period: int
    game_clock: str
    timestamp: str

    @property
    def action_code(self) -> ActionCode:
        if self.kind == 'shot':
            return ActionCode.shot(self.outcome, self.points, self.subtype)
        return ActionCode.stat(self.kind)

    @property
    def is_shot(self) -> bool:
        return self.kind == 'shot'

    def to_dict(self) -> dict:
        data = asdict(self)
        data['location'] = {'x': self.location[0], 'y': self.location[1]} if self.location else None
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'Action':
        loc = data.get('location')
        fields = dict(data)
        fields['location'] = (loc['x'], loc['y']) if loc else None
        return cls(**fields)


@dataclass(frozen=True)
class TeamAdjustment:
    """Foul/timeout change; undoable but never part of the action ledger."""

    id: str
    team: str
    stat: str
    old_value: int
    new_value: int
    timestamp: str

    kind = 'team adjustment'
