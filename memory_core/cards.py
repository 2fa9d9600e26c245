from __future__ import annotations

from dataclasses import dataclass
from typing import AbstractSet, Hashable, Iterator, List, Optional, Tuple

Symbol = Hashable  # opaque token, e.g. an emoji string


@dataclass(frozen=True)
class Card:
    """A single card; face-up and matched flags live on the session, not here."""
    id: int
    symbol: Symbol


@dataclass(frozen=True)
class Deck:
    """Ordered cards in play for one episode; card ids equal their positions."""
    cards: Tuple[Card, ...] = ()

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def ids(self) -> Tuple[int, ...]:
        return tuple(card.id for card in self.cards)

    def has_id(self, card_id: int) -> bool:
        return 0 <= card_id < len(self.cards)

    def symbol_of(self, card_id: int) -> Symbol:
        return self.cards[card_id].symbol

    def positions_of(self, symbol: Symbol) -> List[int]:
        """Returns the ids of every card carrying ``symbol``."""
        return [card.id for card in self.cards if card.symbol == symbol]

    def pretty(
        self,
        width: Optional[int] = None,
        face_up: Optional[AbstractSet[int]] = None,
        matched: Optional[AbstractSet[int]] = None,
    ) -> str:
        """Generates a text grid: face-up cards show their symbol, others their id."""
        if not self.cards:
            return "(no cards)"
        width = width or len(self.cards)
        up = set(face_up or ()) | set(matched or ())
        done = matched or set()
        lines: List[str] = []
        for start in range(0, len(self.cards), width):
            row: List[str] = []
            for card in self.cards[start:start + width]:
                if card.id in done:
                    row.append(f"[{card.symbol}]")
                elif card.id in up:
                    row.append(f" {card.symbol} ")
                else:
                    row.append(f"{card.id:^4}")
            lines.append(" ".join(row))
        return "\n".join(lines)


EMPTY_DECK = Deck()
