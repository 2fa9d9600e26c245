from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from .cards import Symbol
from .deal import DEFAULT_SYMBOLS
from .errors import ConfigurationError

_TRUTHY = ("1", "true", "yes", "on")


@dataclass(frozen=True)
class GameConfig:
    """Deck-build and timing settings for one game state machine."""
    symbols: Tuple[Symbol, ...] = DEFAULT_SYMBOLS
    grid_dimension: int = 4
    pair_count: Optional[int] = None  # defaults to grid_dimension**2 // 2
    resolve_delay: float = 1.0
    tick_interval: float = 1.0
    auto_reset_on_win: bool = False
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.grid_dimension < 0:
            raise ConfigurationError(f'grid dimension must be non-negative, got {self.grid_dimension}')
        if self.pair_count is None and (self.grid_dimension * self.grid_dimension) % 2:
            raise ConfigurationError(f'a {self.grid_dimension}x{self.grid_dimension} grid cannot hold whole pairs')
        if self.resolve_delay <= 0 or self.tick_interval <= 0:
            raise ConfigurationError('resolve delay and tick interval must be positive')

    @property
    def pairs(self) -> int:
        if self.pair_count is not None:
            return self.pair_count
        return self.grid_dimension * self.grid_dimension // 2


def _int(env: Mapping[str, str], name: str) -> Optional[int]:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f'{name} must be an integer, got {raw!r}') from None


def _float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f'{name} must be a number, got {raw!r}') from None


def load_config(environ: Optional[Mapping[str, str]] = None) -> GameConfig:
    """Builds a GameConfig from MEMORY_* environment variables."""
    env = os.environ if environ is None else environ
    symbols: Tuple[Symbol, ...] = DEFAULT_SYMBOLS
    raw_symbols = env.get("MEMORY_SYMBOLS")
    if raw_symbols:
        symbols = tuple(s.strip() for s in raw_symbols.split(",") if s.strip())
    dimension = _int(env, "MEMORY_GRID_DIMENSION")
    return GameConfig(
        symbols=symbols,
        grid_dimension=4 if dimension is None else dimension,
        pair_count=_int(env, "MEMORY_PAIR_COUNT"),
        resolve_delay=_float(env, "MEMORY_RESOLVE_DELAY_SEC", 1.0),
        tick_interval=_float(env, "MEMORY_TICK_SEC", 1.0),
        auto_reset_on_win=env.get("MEMORY_AUTO_RESET", "0").lower() in _TRUTHY,
        seed=_int(env, "MEMORY_SEED"),
    )


def configure_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
