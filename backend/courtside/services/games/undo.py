"""Bounded undo history of whole-state snapshots."""

import copy
from collections import deque
from dataclasses import dataclass
from typing import Dict, Optional, Union

from .actions import Action, TeamAdjustment
from .state import GameState
from .stats import Analytics, PlayerStats

DEFAULT_CAPACITY = 20


@dataclass
class UndoEntry:
    action: Union[Action, TeamAdjustment]
    state: GameState
    stats: Dict[str, PlayerStats]
    analytics: Analytics


class UndoLedger:
    """Snapshots taken just before each mutation.

    Pushing past capacity drops the oldest entry; that entry can no
    longer be undone.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError('capacity must be at least 1')
        self.capacity = capacity
        self._entries = deque(maxlen=capacity)

    def push(self, action, state: GameState, stats: Dict[str, PlayerStats], analytics: Analytics) -> None:
        self._entries.append(UndoEntry(
            action=action,
            state=copy.deepcopy(state),
            stats=copy.deepcopy(stats),
            analytics=copy.deepcopy(analytics),
        ))

    def pop(self) -> Optional[UndoEntry]:
        if not self._entries:
            return None
        return self._entries.pop()

    def peek(self) -> Optional[UndoEntry]:
        return self._entries[-1] if self._entries else None

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self):
        return len(self._entries)

    def __bool__(self):
        return bool(self._entries)
