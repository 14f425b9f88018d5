"""Per-player statistics, game analytics, and the aggregator applying actions to them.

Applying an action is not idempotent: callers snapshot for undo before
calling ``apply_action`` and call it exactly once per recorded action.
"""

from dataclasses import dataclass, field, asdict
from typing import Callable, Dict, Iterable, Optional

from .actions import Action
from .state import GameState


@dataclass
class ShotLine:
    made: int = 0
    attempted: int = 0

    @property
    def pct(self) -> int:
        return _pct(self.made, self.attempted)

    def record(self, made: bool) -> None:
        self.attempted += 1
        if made:
            self.made += 1


@dataclass
class PlayerStats:
    points: int = 0
    rebounds: int = 0
    assists: int = 0
    steals: int = 0
    blocks: int = 0
    turnovers: int = 0
    fouls: int = 0
    field_goals: ShotLine = field(default_factory=ShotLine)
    three_pointers: ShotLine = field(default_factory=ShotLine)
    free_throws: ShotLine = field(default_factory=ShotLine)

    def to_dict(self) -> dict:
        data = asdict(self)
        for line in ('field_goals', 'three_pointers', 'free_throws'):
            data[line]['pct'] = getattr(self, line).pct
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'PlayerStats':
        data = dict(data)
        for line in ('field_goals', 'three_pointers', 'free_throws'):
            raw = data.get(line) or {}
            data[line] = ShotLine(made=raw.get('made', 0), attempted=raw.get('attempted', 0))
        return cls(**data)


# Stat verbs and the PlayerStats counter each one bumps
STAT_COUNTERS = {
    'rebound': 'rebounds',
    'assist': 'assists',
    'steal': 'steals',
    'block': 'blocks',
    'turnover': 'turnovers',
    'foul': 'fouls',
}


@dataclass
class Analytics:
    total_shots: int = 0
    made_shots: int = 0
    three_point_attempts: int = 0
    three_point_makes: int = 0
    total_actions: int = 0

    @property
    def shooting_pct(self) -> int:
        return _pct(self.made_shots, self.total_shots)

    @property
    def three_point_pct(self) -> int:
        return _pct(self.three_point_makes, self.three_point_attempts)

    @classmethod
    def from_actions(cls, actions: Iterable[Action]) -> 'Analytics':
        """Recompute from a ledger; must match the incremental counters."""
        result = cls()
        for action in actions:
            result.total_actions += 1
            if not action.is_shot:
                continue
            code = action.action_code
            result.total_shots += 1
            result.made_shots += code.is_make
            if code.is_three:
                result.three_point_attempts += 1
                result.three_point_makes += code.is_make
        return result

    def to_dict(self) -> dict:
        data = asdict(self)
        data['shooting_pct'] = self.shooting_pct
        data['three_point_pct'] = self.three_point_pct
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'Analytics':
        return cls(**{k: v for k, v in data.items() if not k.endswith('_pct')})


def _pct(made: int, attempted: int) -> int:
    return round(made / attempted * 100) if attempted else 0


def apply_action(action: Action, stats: PlayerStats, state: GameState, analytics: Analytics,
                 on_make: Optional[Callable[[], None]] = None) -> str:
    """Apply one action to the player's stats, the score and analytics.

    Returns the play-by-play line for the action.
    """
    code = action.action_code
    if code.is_shot:
        made = code.is_make
        if code.is_three:
            line = stats.three_pointers
            analytics.three_point_attempts += 1
            analytics.three_point_makes += made
        elif code.is_free_throw:
            line = stats.free_throws
        else:
            line = stats.field_goals
        line.record(made)
        if made:
            stats.points += code.points
            state.scores[action.team] += code.points
        analytics.total_shots += 1
        analytics.made_shots += made
        analytics.total_actions += 1
        if made and on_make is not None:
            on_make()
        return f'#{action.player_number} {action.player_name} {code.outcome}s {code.subtype} ({action.game_clock})'

    counter = STAT_COUNTERS[code.verb]
    setattr(stats, counter, getattr(stats, counter) + 1)
    analytics.total_actions += 1
    return f'#{action.player_number} {action.player_name} {code.verb}'


def team_totals(stats: Iterable[PlayerStats]) -> PlayerStats:
    total = PlayerStats()
    for s in stats:
        for name in ('points', 'rebounds', 'assists', 'steals', 'blocks', 'turnovers', 'fouls'):
            setattr(total, name, getattr(total, name) + getattr(s, name))
        for line in ('field_goals', 'three_pointers', 'free_throws'):
            agg, cur = getattr(total, line), getattr(s, line)
            agg.made += cur.made
            agg.attempted += cur.attempted
    return total
