from __future__ import annotations

import argparse
import sys
import time
from typing import Callable, List, Optional

from .config import GameConfig, configure_logging, load_config
from .deal import DEFAULT_SYMBOLS
from .errors import ConfigurationError
from .machine import GameStateMachine
from .scheduler import ManualScheduler
from .state import Status, WinResult

HELP = "Commands: s = start, r = reset, q = quit, <id> = flip card"


def _build_config(args: argparse.Namespace) -> GameConfig:
    base = load_config()
    return GameConfig(
        symbols=base.symbols or DEFAULT_SYMBOLS,
        grid_dimension=args.dimension if args.dimension is not None else base.grid_dimension,
        pair_count=args.pairs if args.pairs is not None else base.pair_count,
        resolve_delay=args.delay if args.delay is not None else base.resolve_delay,
        tick_interval=base.tick_interval,
        auto_reset_on_win=base.auto_reset_on_win,
        seed=args.seed if args.seed is not None else base.seed,
    )


def render(machine: GameStateMachine) -> str:
    v = machine.view()
    header = f"Moves: {v.moves}  Time: {v.elapsed_seconds} sec  [{v.status.value}]"
    board = v.deck.pretty(machine.config.grid_dimension or None, set(v.selection), set(v.matched))
    return f"{header}\n{board}"


def play(
    machine: GameStateMachine,
    clock: ManualScheduler,
    read: Optional[Callable[[str], str]] = None,
    write: Optional[Callable[[str], None]] = None,
    sleep: Callable[[float], None] = time.sleep,
    now: Callable[[], float] = time.monotonic,
) -> List[WinResult]:
    """Runs the interactive loop on one thread; returns the wins seen.

    The virtual clock is advanced by the wall time spent waiting for input,
    so the elapsed-time tick stays honest without a background thread.
    """
    read = read or input
    write = write or print
    wins: List[WinResult] = []

    def announce(result: WinResult) -> None:
        wins.append(result)
        write(f"You won! Moves: {result.moves}, Time: {result.elapsed_seconds} seconds")

    unsubscribe = machine.on_win(announce)
    try:
        write(HELP)
        last = now()
        while True:
            write(render(machine))
            try:
                text = read('> ').strip().lower()
            except EOFError:
                break
            current = now()
            clock.advance(max(0.0, current - last))
            last = current
            if text in ('q', 'quit'):
                break
            if text in ('s', 'start'):
                machine.start()
                continue
            if text in ('r', 'reset'):
                machine.reset()
                continue
            try:
                card_id = int(text)
            except ValueError:
                write(f"Could not parse {text!r}. {HELP}")
                continue
            if machine.status is not Status.PLAYING:
                write("Press s to start a game.")
                continue
            if not machine.flip(card_id):
                write(f"Card {card_id} cannot be flipped right now.")
                continue
            if len(machine.selection) == 2:
                write(render(machine))
                delay = machine.config.resolve_delay
                sleep(delay)
                clock.advance(delay)
                last = now()
    finally:
        unsubscribe()
    return wins


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description='Memory match: find every pair of cards')
    parser.add_argument('--dimension', type=int, default=None, help='Grid dimension (NxN), default 4')
    parser.add_argument('--pairs', type=int, default=None, help='Override the number of pairs')
    parser.add_argument('--seed', type=int, default=None, help='RNG seed for the deal')
    parser.add_argument('--delay', type=float, default=None, help='Seconds a mismatched pair stays face up')
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging')
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        config = _build_config(args)
        clock = ManualScheduler()
        machine = GameStateMachine(config, scheduler=clock)
        machine.start()
        play(machine, clock)
    except ConfigurationError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    return 0


if __name__ == '__main__':
    sys.exit(main())
