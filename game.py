from __future__ import annotations

# Public surface of the memory-match game: app.py, the CLI entry point and
# the tests all import from this one module.

from memory_core.cards import EMPTY_DECK, Card, Deck, Symbol
from memory_core.config import GameConfig, configure_logging, load_config
from memory_core.deal import DEFAULT_SYMBOLS, build_deck, pick_random, shuffle
from memory_core.errors import ConfigurationError
from memory_core.machine import GameStateMachine
from memory_core.scheduler import Handle, ManualScheduler, Scheduler, ThreadingScheduler, Ticker
from memory_core.state import PendingPair, Session, SessionView, Status, WinResult

__all__ = [
    "Card",
    "ConfigurationError",
    "DEFAULT_SYMBOLS",
    "Deck",
    "EMPTY_DECK",
    "GameConfig",
    "GameStateMachine",
    "Handle",
    "ManualScheduler",
    "PendingPair",
    "Scheduler",
    "Session",
    "SessionView",
    "Status",
    "Symbol",
    "ThreadingScheduler",
    "Ticker",
    "WinResult",
    "build_deck",
    "configure_logging",
    "load_config",
    "main",
    "pick_random",
    "shuffle",
]


def main() -> None:
    # CLI driver delegated to memory_core.cli
    from memory_core.cli import main as _main
    raise SystemExit(_main())


if __name__ == '__main__':
    main()
