from __future__ import annotations

from typing import Iterable, List

from .rules import Move


def order_moves(moves: Iterable[Move]) -> List[Move]:
    """Captures first, otherwise keep the rules engine's order."""
    captures: List[Move] = []
    quiet: List[Move] = []
    for move in moves:
        (captures if move.is_capture else quiet).append(move)
    return captures + quiet
