from __future__ import annotations

import logging
import random
import threading
from typing import Callable, FrozenSet, List, Optional, Tuple

from .cards import Deck
from .config import GameConfig
from .deal import build_deck
from .scheduler import Handle, Scheduler, ThreadingScheduler, Ticker
from .state import PendingPair, Session, SessionView, Status, WinResult

logger = logging.getLogger(__name__)

Listener = Callable[[str, SessionView], None]
WinListener = Callable[[WinResult], None]


def _register(listeners: list, listener) -> Callable[[], None]:
    listeners.append(listener)

    def unsubscribe() -> None:
        if listener in listeners:
            listeners.remove(listener)

    return unsubscribe


class GameStateMachine:
    """Owns the session and drives every transition of a memory-match game.

    All entry points (``start``, ``reset``, ``flip``, ``resolve`` and the
    elapsed-time tick) run under one re-entrant lock, so each event is
    processed to completion before the next, whichever thread delivers it.

    Invalid flips and stale resolutions are silent no-ops. The only error a
    caller can see is ConfigurationError from ``start``, raised before any
    state changes.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        scheduler: Optional[Scheduler] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.scheduler = scheduler or ThreadingScheduler()
        self._rng = rng or random.Random(self.config.seed)
        self._session = Session()
        self._generation = 0
        self._pending: Optional[Handle] = None
        self._ticker = Ticker(self.scheduler, self.config.tick_interval, lambda: None)
        self._lock = threading.RLock()
        self._listeners: List[Listener] = []
        self._win_listeners: List[WinListener] = []
        self.last_result: Optional[WinResult] = None

    # ---------- read access ----------

    @property
    def status(self) -> Status:
        return self._session.status

    @property
    def moves(self) -> int:
        return self._session.moves

    @property
    def elapsed_seconds(self) -> int:
        return self._session.elapsed_seconds

    @property
    def deck(self) -> Deck:
        return self._session.deck

    @property
    def selection(self) -> Tuple[int, ...]:
        return tuple(self._session.selection)

    @property
    def matched(self) -> FrozenSet[int]:
        return frozenset(self._session.matched)

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def clock_running(self) -> bool:
        return self._ticker.running

    def is_face_up(self, card_id: int) -> bool:
        return card_id in self._session.selection or card_id in self._session.matched

    def view(self) -> SessionView:
        with self._lock:
            s = self._session
            return SessionView(
                status=s.status,
                moves=s.moves,
                elapsed_seconds=s.elapsed_seconds,
                deck=s.deck,
                selection=tuple(s.selection),
                matched=frozenset(s.matched),
            )

    # ---------- observers ----------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Registers ``listener(event, view)``; returns a function that removes it."""
        return _register(self._listeners, listener)

    def on_win(self, listener: WinListener) -> Callable[[], None]:
        """Registers ``listener(result)``, called once per won episode."""
        return _register(self._win_listeners, listener)

    def _notify(self, event: str) -> None:
        if not self._listeners:
            return
        view = self.view()
        for listener in list(self._listeners):
            listener(event, view)

    # ---------- transitions ----------

    def seed(self, value: Optional[int]) -> None:
        with self._lock:
            self._rng.seed(value)

    def start(self) -> None:
        with self._lock:
            # Deal first so a ConfigurationError leaves the session untouched.
            deck = build_deck(self.config.symbols, self.config.pairs, self._rng)
            self._cancel_pending()
            self._generation += 1
            s = self._session
            s.deck = deck
            s.clear()
            s.status = Status.PLAYING
            self.last_result = None
            generation = self._generation
            self._ticker.start(lambda: self._tick(generation))
            logger.info(f"[start] generation={generation} pairs={self.config.pairs} cards={len(deck)}")
            self._notify('started')

    def reset(self) -> None:
        with self._lock:
            self._cancel_pending()
            self._ticker.stop()
            self._generation += 1
            s = self._session
            s.clear()
            s.status = Status.IDLE
            logger.info(f"[reset] generation={self._generation}")
            self._notify('reset')

    def flip(self, card_id: int) -> bool:
        """Turns a card face up; returns False when the flip is not allowed."""
        with self._lock:
            s = self._session
            if not self._can_flip(card_id):
                logger.debug(f"[flip-ignored] id={card_id!r} status={s.status.value} selection={s.selection}")
                return False
            s.selection.append(card_id)
            s.moves += 1
            logger.debug(f"[flip] id={card_id} moves={s.moves}")
            if len(s.selection) == 2:
                pair = PendingPair(s.selection[0], s.selection[1], self._generation)
                self._pending = self.scheduler.call_later(
                    self.config.resolve_delay, lambda: self.resolve(pair)
                )
            self._notify('flipped')
            return True

    def _can_flip(self, card_id: object) -> bool:
        s = self._session
        if s.status is not Status.PLAYING or len(s.selection) >= 2:
            return False
        if isinstance(card_id, bool) or not isinstance(card_id, int):
            return False
        if not s.deck.has_id(card_id):
            return False
        return card_id not in s.selection and card_id not in s.matched

    def resolve(self, pair: PendingPair) -> None:
        with self._lock:
            if pair.generation != self._generation:
                logger.debug(f"[resolve-stale] pair={pair.ids()} generation={pair.generation} current={self._generation}")
                return
            s = self._session
            if s.status is not Status.PLAYING or list(pair.ids()) != s.selection:
                return
            self._pending = None
            first, second = pair.ids()
            if s.deck.symbol_of(first) == s.deck.symbol_of(second):
                s.matched.update(pair.ids())
                logger.debug(f"[match] ids={pair.ids()} matched={len(s.matched)}/{len(s.deck)}")
            s.selection = []
            self._notify('resolved')
            self._check_win()

    def _check_win(self) -> None:
        s = self._session
        # An empty deck never wins.
        if s.status is not Status.PLAYING or not s.is_complete():
            return
        s.status = Status.WON
        self._ticker.stop()
        result = WinResult(moves=s.moves, elapsed_seconds=s.elapsed_seconds)
        self.last_result = result
        logger.info(f"[won] moves={result.moves} elapsed={result.elapsed_seconds}s")
        self._notify('won')
        for listener in list(self._win_listeners):
            listener(result)
        if self.config.auto_reset_on_win:
            self.reset()

    def _tick(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation or self._session.status is not Status.PLAYING:
                return
            self._session.elapsed_seconds += 1
            self._notify('tick')

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
