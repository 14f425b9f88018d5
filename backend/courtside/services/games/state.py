"""Mutable live state of a game and its format settings."""

from dataclasses import dataclass, field, asdict, fields
from typing import Dict

from .actions import SIDES
from .errors import ValidationError
from .geometry import COURT_STANDARDS

SETUP = 'setup'
READY = 'ready'
LIVE = 'live'
PAUSED = 'paused'
FINAL = 'final'

QUARTERS = 'quarters'
HALVES = 'halves'
REGULATION_PERIODS = {QUARTERS: 4, HALVES: 2}

OVERTIME_SECONDS = 300


def _per_side(value=0) -> Dict[str, int]:
    return {side: value for side in SIDES}


@dataclass
class Settings:
    game_format: str = QUARTERS
    period_minutes: int = 12
    timeouts_per_team: int = 7
    foul_limit: int = 7
    shot_clock_enabled: bool = True
    shot_clock_seconds: int = 24
    court_standard: str = 'fiba'

    @property
    def period_seconds(self) -> int:
        return self.period_minutes * 60

    @property
    def regulation_periods(self) -> int:
        return REGULATION_PERIODS[self.game_format]

    def validate(self) -> None:
        if self.game_format not in REGULATION_PERIODS:
            raise ValidationError(f'Unknown game format: {self.game_format}')
        if self.court_standard not in COURT_STANDARDS:
            raise ValidationError(f'Unknown court standard: {self.court_standard}')
        for name in ('period_minutes', 'shot_clock_seconds'):
            if int(getattr(self, name)) <= 0:
                raise ValidationError(f'{name} must be positive')
        for name in ('timeouts_per_team', 'foul_limit'):
            if int(getattr(self, name)) < 0:
                raise ValidationError(f'{name} cannot be negative')

    def updated(self, **changes) -> 'Settings':
        known = {f.name for f in fields(self)}
        unknown = set(changes) - known
        if unknown:
            raise ValidationError(f'Unknown setting: {", ".join(sorted(unknown))}')
        data = asdict(self)
        data.update(changes)
        try:
            for name in ('period_minutes', 'timeouts_per_team', 'foul_limit', 'shot_clock_seconds'):
                data[name] = int(data[name])
        except (TypeError, ValueError):
            raise ValidationError('Settings values must be whole numbers') from None
        if not isinstance(data['shot_clock_enabled'], bool):
            raise ValidationError('shot_clock_enabled must be true or false')
        data['court_standard'] = str(data['court_standard']).lower()
        result = Settings(**data)
        result.validate()
        return result

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> 'Settings':
        return cls(**data)


@dataclass
class GameState:
    period: int = 1
    game_clock: int = 720
    shot_clock: int = 24
    scores: Dict[str, int] = field(default_factory=_per_side)
    fouls: Dict[str, int] = field(default_factory=_per_side)
    timeouts: Dict[str, int] = field(default_factory=lambda: _per_side(7))
    status: str = SETUP

    @classmethod
    def for_settings(cls, settings: Settings) -> 'GameState':
        return cls(
            game_clock=settings.period_seconds,
            shot_clock=settings.shot_clock_seconds,
            timeouts=_per_side(settings.timeouts_per_team),
        )

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> 'GameState':
        return cls(**data)


def format_clock(seconds: int) -> str:
    minutes, secs = divmod(max(0, int(seconds)), 60)
    return f'{minutes}:{secs:02d}'


def period_name(period: int, game_format: str) -> str:
    if game_format == QUARTERS:
        names = ['1st Quarter', '2nd Quarter', '3rd Quarter', '4th Quarter']
    else:
        names = ['1st Half', '2nd Half']
    if 1 <= period <= len(names):
        return names[period - 1]
    return f'OT{period - len(names)}'
