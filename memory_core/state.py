from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import FrozenSet, List, Tuple

from .cards import Deck, EMPTY_DECK


class Status(enum.Enum):
    IDLE = 'idle'
    PLAYING = 'playing'
    WON = 'won'


@dataclass
class Session:
    """The single mutable aggregate; only GameStateMachine writes to it."""
    status: Status = Status.IDLE
    moves: int = 0
    elapsed_seconds: int = 0
    selection: List[int] = field(default_factory=list)  # flip order, at most two ids
    matched: set = field(default_factory=set)
    deck: Deck = EMPTY_DECK

    def clear(self) -> None:
        self.moves = 0
        self.elapsed_seconds = 0
        self.selection = []
        self.matched = set()

    def is_complete(self) -> bool:
        return len(self.deck) > 0 and len(self.matched) == len(self.deck)


@dataclass(frozen=True)
class SessionView:
    """Read-only snapshot of a session handed to observers and front ends."""
    status: Status
    moves: int
    elapsed_seconds: int
    deck: Deck
    selection: Tuple[int, ...]
    matched: FrozenSet[int]

    def is_face_up(self, card_id: int) -> bool:
        return card_id in self.selection or card_id in self.matched


@dataclass(frozen=True)
class PendingPair:
    """Two selected ids awaiting resolution, tagged with the session generation."""
    first: int
    second: int
    generation: int

    def ids(self) -> Tuple[int, int]:
        return self.first, self.second


@dataclass(frozen=True)
class WinResult:
    moves: int
    elapsed_seconds: int
