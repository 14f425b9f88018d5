"""The game session aggregate: identity, rosters, live state and history.

Every mutation of a game goes through a ``GameSession`` method. Sessions
are handed around explicitly; there is no module-level current game.
"""

from dataclasses import dataclass, field, asdict
from typing import Dict, List, Optional, Tuple

from .actions import Action, ActionCode, TeamAdjustment, SIDES, HOME, AWAY, new_id, utcnow_iso
from .clock import GameClock
from .errors import ConflictError, FoulLimitWarning, NotFoundError, ValidationError
from .geometry import ZoneClassifier, geometry_for
from .state import (
    GameState, Settings, SETUP, READY, LIVE, PAUSED, format_clock, period_name,
)
from .stats import Analytics, PlayerStats, apply_action, team_totals
from .undo import UndoLedger, UndoEntry, DEFAULT_CAPACITY

PLAY_BY_PLAY_LIMIT = 50
TEAM_STATS = ('fouls', 'timeouts')
RECORDING_STATUSES = (READY, LIVE, PAUSED)


@dataclass
class Player:
    id: str
    name: str
    number: int
    position: str = 'N/A'

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class Team:
    name: str
    color: str
    players: List[Player] = field(default_factory=list)

    def find(self, player_id: str) -> Optional[Player]:
        return next((p for p in self.players if p.id == player_id), None)

    def to_dict(self) -> dict:
        return {
            'name': self.name,
            'color': self.color,
            'players': [p.to_dict() for p in sorted(self.players, key=lambda p: p.number)],
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Team':
        return cls(
            name=data['name'],
            color=data['color'],
            players=[Player(**p) for p in data.get('players', [])],
        )


def _default_teams() -> Dict[str, Team]:
    return {HOME: Team('Home Team', 'bg-1'), AWAY: Team('Away Team', 'bg-4')}


class GameSession:
    def __init__(self, code: str, name: str, password_hash: str, settings: Optional[Settings] = None,
                 undo_capacity: int = DEFAULT_CAPACITY, play_by_play_limit: int = PLAY_BY_PLAY_LIMIT):
        self.code = code
        self.name = name or 'Basketball Game'
        self.password_hash = password_hash
        self.settings = settings or Settings()
        self.teams: Dict[str, Team] = _default_teams()
        self.stats: Dict[str, PlayerStats] = {}
        self.state = GameState.for_settings(self.settings)
        self.analytics = Analytics()
        self.actions: List[Action] = []
        self.play_by_play: List[dict] = []
        self.play_by_play_limit = play_by_play_limit
        self.created = utcnow_iso()
        self.last_updated = self.created
        self.undo_ledger = UndoLedger(undo_capacity)
        self.clock = GameClock(self)
        self.classifier = ZoneClassifier(geometry_for(self.settings.court_standard))

    # -- lifecycle ---------------------------------------------------------

    @property
    def status(self) -> str:
        return self.state.status

    def _require_status(self, *allowed: str, doing: str) -> None:
        if self.state.status not in allowed:
            raise ConflictError(f'Cannot {doing} while the game is {self.state.status}')

    def configure(self, name: Optional[str] = None, **changes) -> None:
        """Update display name and format settings; only before the game starts."""
        self._require_status(SETUP, doing='change settings')
        if name is not None:
            name = str(name).strip()
            if not name:
                raise ValidationError('Game name is required')
        settings = self.settings.updated(**changes) if changes else None
        if name is not None:
            self.name = name
        if settings is None:
            return
        if settings.court_standard != self.settings.court_standard:
            self.classifier = ZoneClassifier(geometry_for(settings.court_standard))
        self.settings = settings
        self.state.game_clock = settings.period_seconds
        self.state.shot_clock = settings.shot_clock_seconds
        self.state.timeouts = {side: settings.timeouts_per_team for side in SIDES}

    def update_team(self, side: str, name: Optional[str] = None, color: Optional[str] = None) -> Team:
        self._require_status(SETUP, doing='edit teams')
        team = self.team(side)
        if name is not None:
            if not str(name).strip():
                raise ValidationError('Team name is required')
            team.name = str(name).strip()
        if color is not None:
            team.color = str(color)
        return team

    def start(self) -> None:
        self._require_status(SETUP, doing='start')
        if not all(self.teams[side].players for side in SIDES):
            raise ValidationError('Both teams need at least one player')
        self.state.status = READY
        self.log('Game started')

    def end(self) -> None:
        self._require_status(READY, LIVE, PAUSED, doing='end the game')
        self.finish()

    def finish(self) -> None:
        self.clock.finish()
        home, away = self.state.scores[HOME], self.state.scores[AWAY]
        home_name, away_name = self.teams[HOME].name, self.teams[AWAY].name
        if home > away:
            message = f'Game Over! {home_name} wins {home}-{away}!'
        elif away > home:
            message = f'Game Over! {away_name} wins {away}-{home}!'
        else:
            message = f'Game Over! Game ended in a tie {home}-{away}!'
        self.log(message)

    # -- clock -------------------------------------------------------------

    def start_clock(self) -> None:
        self.clock.start()

    def pause_clock(self) -> None:
        self.clock.pause()

    def tick(self) -> None:
        self.clock.tick()

    def reset_game_clock(self) -> None:
        self._require_status(READY, LIVE, PAUSED, doing='reset the clock')
        self.clock.reset_game_clock()

    def reset_shot_clock(self) -> None:
        self._require_status(READY, LIVE, PAUSED, doing='reset the shot clock')
        self.clock.reset_shot_clock()

    def next_period(self) -> None:
        self._require_status(READY, LIVE, PAUSED, doing='end the period')
        self.clock.end_period()

    def period_name(self, period: Optional[int] = None) -> str:
        return period_name(period or self.state.period, self.settings.game_format)

    @property
    def clock_text(self) -> str:
        return format_clock(self.state.game_clock)

    # -- rosters -----------------------------------------------------------

    def team(self, side: str) -> Team:
        if side not in SIDES:
            raise ValidationError(f'Unknown team: {side}')
        return self.teams[side]

    def add_player(self, side: str, name: str, number, position: Optional[str] = None) -> Player:
        self._require_status(SETUP, doing='change rosters')
        team = self.team(side)
        name = (name or '').strip()
        if not name:
            raise ValidationError('Please enter a player name')
        try:
            number = int(number)
        except (TypeError, ValueError):
            raise ValidationError('Please enter a valid jersey number (0-99)') from None
        if not 0 <= number <= 99:
            raise ValidationError('Please enter a valid jersey number (0-99)')
        if any(p.number == number for p in team.players):
            raise ValidationError(f'Jersey number {number} is already taken')
        player = Player(id=f'{side}_{number}', name=name, number=number, position=position or 'N/A')
        team.players.append(player)
        self.stats[player.id] = PlayerStats()
        return player

    def remove_player(self, side: str, player_id: str) -> None:
        self._require_status(SETUP, doing='change rosters')
        team = self.team(side)
        if not team.find(player_id):
            raise NotFoundError('Player not found')
        team.players = [p for p in team.players if p.id != player_id]
        self.stats.pop(player_id, None)

    def find_player(self, player_id: str) -> Tuple[Optional[str], Optional[Player]]:
        for side in SIDES:
            player = self.teams[side].find(player_id)
            if player:
                return side, player
        return None, None

    # -- recording ---------------------------------------------------------

    def record(self, code: ActionCode, player_id: Optional[str],
               location: Optional[Tuple[float, float]] = None) -> Action:
        """Record one action for a player and apply it to stats and score."""
        self._require_status(*RECORDING_STATUSES, doing='record actions')
        if not player_id:
            raise ValidationError('Please select a player')
        side, player = self.find_player(player_id)
        if player is None:
            raise ValidationError('Please select a player')
        distance = None
        if location is not None:
            location = (float(location[0]), float(location[1]))
            distance = self.classifier.distance(*location)
        action = Action(
            id=new_id(),
            player_id=player.id,
            player_number=player.number,
            player_name=player.name,
            team=side,
            code=code.code,
            kind='shot' if code.is_shot else code.verb,
            outcome=code.outcome,
            points=code.points,
            subtype=code.subtype,
            location=location,
            distance=distance,
            period=self.state.period,
            game_clock=self.clock_text,
            timestamp=utcnow_iso(),
        )
        # snapshot then mutate, as one step
        self.undo_ledger.push(action, self.state, self.stats, self.analytics)
        on_make = self.clock.reset_shot_clock if self.settings.shot_clock_enabled else None
        line = apply_action(action, self.stats.setdefault(player.id, PlayerStats()), self.state,
                            self.analytics, on_make=on_make)
        self.actions.append(action)
        self.log(line)
        return action

    def adjust_team_stat(self, side: str, stat: str, delta: int, confirmed: bool = False) -> TeamAdjustment:
        """Change a team's fouls or timeouts, never below zero."""
        self._require_status(*RECORDING_STATUSES, doing='adjust team stats')
        team = self.team(side)
        if stat not in TEAM_STATS:
            raise ValidationError(f'Unknown team stat: {stat}')
        try:
            delta = int(delta)
        except (TypeError, ValueError):
            raise ValidationError('delta must be a whole number') from None
        counters = getattr(self.state, stat)
        old_value = counters[side]
        new_value = max(0, old_value + delta)
        if stat == 'fouls' and delta > 0 and new_value > self.settings.foul_limit and not confirmed:
            raise FoulLimitWarning(f'{team.name} has reached the foul limit ({self.settings.foul_limit})')
        adjustment = TeamAdjustment(
            id=new_id(), team=side, stat=stat,
            old_value=old_value, new_value=new_value, timestamp=utcnow_iso(),
        )
        self.undo_ledger.push(adjustment, self.state, self.stats, self.analytics)
        counters[side] = new_value
        verb = 'added' if new_value > old_value else 'removed'
        self.log(f'{team.name} {stat[:-1]} {verb} ({new_value})')
        return adjustment

    def undo(self) -> Optional[UndoEntry]:
        """Roll back the most recent recorded action or team adjustment."""
        entry = self.undo_ledger.pop()
        if entry is None:
            return None
        self.state = entry.state
        self.stats = entry.stats
        self.analytics = entry.analytics
        self.clock.sync()
        self.actions = [a for a in self.actions if a.id != entry.action.id]
        action = entry.action
        if isinstance(action, Action):
            self.log(f'Undone: {action.kind} by #{action.player_number} {action.player_name}')
        else:
            self.log(f'Undone: {self.teams[action.team].name} {action.stat[:-1]} change')
        return entry

    # -- views -------------------------------------------------------------

    def log(self, message: str) -> None:
        self.play_by_play.insert(0, {
            'message': message,
            'time': self.clock_text,
            'period': self.state.period,
            'timestamp': utcnow_iso(),
        })
        del self.play_by_play[self.play_by_play_limit:]

    def touch(self) -> str:
        self.last_updated = utcnow_iso()
        return self.last_updated

    def actions_for_team(self, side: str) -> List[Action]:
        self.team(side)
        return [a for a in self.actions if a.team == side]

    def box_score(self, side: str) -> dict:
        team = self.team(side)
        players = sorted(team.players, key=lambda p: p.number)
        rows = [dict(player=p.to_dict(), stats=self.stats.get(p.id, PlayerStats()).to_dict()) for p in players]
        totals = team_totals(self.stats.get(p.id, PlayerStats()) for p in players)
        return {'team': team.name, 'side': side, 'players': rows, 'totals': totals.to_dict()}

    def to_dict(self) -> dict:
        return {
            'code': self.code,
            'name': self.name,
            'status': self.state.status,
            'created': self.created,
            'last_updated': self.last_updated,
            'settings': self.settings.to_dict(),
            'teams': {side: team.to_dict() for side, team in self.teams.items()},
            'stats': {pid: s.to_dict() for pid, s in self.stats.items()},
            'game_state': self.state.to_dict(),
            'analytics': self.analytics.to_dict(),
            'actions': [a.to_dict() for a in self.actions],
            'play_by_play': list(self.play_by_play),
            'period_name': self.period_name(),
            'clock': self.clock_text,
        }

    @classmethod
    def from_dict(cls, data: dict, password_hash: str, undo_capacity: int = DEFAULT_CAPACITY,
                  play_by_play_limit: int = PLAY_BY_PLAY_LIMIT) -> 'GameSession':
        session = cls(
            code=data['code'],
            name=data['name'],
            password_hash=password_hash,
            settings=Settings.from_dict(data['settings']),
            undo_capacity=undo_capacity,
            play_by_play_limit=play_by_play_limit,
        )
        session.teams = {side: Team.from_dict(t) for side, t in data['teams'].items()}
        session.stats = {pid: PlayerStats.from_dict(s) for pid, s in data.get('stats', {}).items()}
        session.state = GameState.from_dict(data['game_state'])
        session.analytics = Analytics.from_dict(data.get('analytics', {}))
        session.actions = [Action.from_dict(a) for a in data.get('actions', [])]
        session.play_by_play = list(data.get('play_by_play', []))
        session.created = data.get('created', session.created)
        session.last_updated = data.get('last_updated', session.last_updated)
        # a live game picks its countdowns back up after a reload
        session.clock.sync()
        return session
