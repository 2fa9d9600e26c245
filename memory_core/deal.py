from __future__ import annotations

import random
from typing import List, Optional, Sequence, TypeVar

from .cards import Card, Deck, Symbol
from .errors import ConfigurationError

T = TypeVar("T")

# Reference symbol pool: ten distinct emoji, enough for a 4x4 grid with two to spare.
DEFAULT_SYMBOLS: tuple = ('🥔', '🍒', '🥑', '🌽', '🥕', '🍇', '🍉', '🍌', '🥭', '🍍')


def _check_count(k: object) -> int:
    if isinstance(k, bool) or not isinstance(k, int):
        raise ConfigurationError(f'pair count must be an integer, got {k!r}')
    return k


def pick_random(pool: Sequence[T], k: int, rng: Optional[random.Random] = None) -> List[T]:
    """Selects ``k`` elements of ``pool`` without replacement, in draw order.

    The pool itself is never mutated; draws come from a private copy.
    """
    k = _check_count(k)
    if k < 0 or k > len(pool):
        raise ConfigurationError(f'cannot pick {k} symbols from a pool of {len(pool)}')
    rng = rng or random.Random()
    remaining = list(pool)
    picks: List[T] = []
    for _ in range(k):
        picks.append(remaining.pop(rng.randrange(len(remaining))))
    return picks


def shuffle(seq: Sequence[T], rng: Optional[random.Random] = None) -> List[T]:
    """Returns a Fisher-Yates shuffled copy of ``seq``."""
    rng = rng or random.Random()
    out = list(seq)
    for index in range(len(out) - 1, 0, -1):
        swap = rng.randint(0, index)
        out[index], out[swap] = out[swap], out[index]
    return out


def build_deck(pool: Sequence[Symbol], pair_count: int, rng: Optional[random.Random] = None) -> Deck:
    """Deals a deck of ``2 * pair_count`` cards, each chosen symbol appearing exactly twice.

    Ids are assigned after shuffling, so they follow display position rather
    than symbol identity. Duplicate pool entries count once.
    """
    rng = rng or random.Random()
    distinct = list(dict.fromkeys(pool))
    picks = pick_random(distinct, pair_count, rng)
    items = shuffle(picks + picks, rng)
    return Deck(cards=tuple(Card(id=index, symbol=symbol) for index, symbol in enumerate(items)))
