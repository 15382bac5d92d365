from __future__ import annotations

from typing import List, Optional

import chess
import pytest

from chessai import ChessRules, EngineConfig
from chessai.errors import IllegalMoveError
from chessai.rules import GameStatus, Move

# White queen takes an undefended black queen on d5
QUEEN_HANGS_FEN = "k7/8/8/3q4/8/8/8/3QK3 w - - 0 1"
STALEMATE_FEN = "7k/5Q2/6K1/8/8/8/8/8 b - - 0 1"
BACK_RANK_MATE_WHITE_FEN = "6k1/5ppp/8/8/8/8/5PPP/R5K1 w - - 0 1"
BACK_RANK_MATE_BLACK_FEN = "r5k1/5ppp/8/8/8/8/5PPP/6K1 b - - 0 1"
FOOLS_MATE_FEN = "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3"
BARE_KINGS_FEN = "4k3/8/8/8/8/8/8/4K3 w - - 0 1"


class TreePosition:
    """Minimal rules engine over an explicit game tree.

    A node is either a number (a terminal leaf scored by ``leaf_value``) or a
    list of child nodes. Child ``i`` is reached by the move ``<ply>-><i>``;
    a child wrapped in ``("x", node)`` is a capture.
    """

    def __init__(self, tree, white_to_move: bool = True) -> None:
        self.tree = tree
        self.white_to_move = white_to_move
        self.path: List[int] = []
        self.pushes = 0
        self.pops = 0
        self.max_ply = 0
        self.leaves_seen: List[float] = []

    def _node(self):
        node = self.tree
        for index in self.path:
            node = _unwrap(node)[index]
        return _unwrap(node)

    @property
    def turn(self) -> chess.Color:
        white = self.white_to_move if len(self.path) % 2 == 0 else not self.white_to_move
        return chess.WHITE if white else chess.BLACK

    def legal_moves(self, square: Optional[str] = None) -> List[Move]:
        node = self._node()
        if not isinstance(node, list):
            return []
        moves = []
        for index, child in enumerate(node):
            captured = "p" if isinstance(child, tuple) else None
            moves.append(Move(str(len(self.path)), str(index), captured=captured))
        return moves

    def pieces(self):
        return []

    def push(self, move: Move) -> None:
        node = self._node()
        index = int(move.to_square)
        if not isinstance(node, list) or not 0 <= index < len(node) or move.from_square != str(len(self.path)):
            raise IllegalMoveError(f"Illegal move: {move.uci()}")
        self.path.append(index)
        self.pushes += 1
        self.max_ply = max(self.max_ply, len(self.path))

    def pop(self) -> Move:
        index = self.path.pop()
        self.pops += 1
        return Move(str(len(self.path)), str(index))

    def status(self) -> GameStatus:
        return GameStatus.ONGOING if isinstance(self._node(), list) else GameStatus.DRAW

    def is_game_over(self) -> bool:
        return self.status().is_terminal

    def is_check(self) -> bool:
        return False

    def fingerprint(self):
        return tuple(self.path)

    def leaf_value(self) -> float:
        node = self._node()
        if isinstance(node, list):
            raise AssertionError(f"evaluated an interior node at {self.path}")
        self.leaves_seen.append(node)
        return node


def _unwrap(node):
    return node[1] if isinstance(node, tuple) else node


def tree_evaluate(position: TreePosition) -> float:
    return position.leaf_value()


@pytest.fixture
def start_position() -> ChessRules:
    return ChessRules()


@pytest.fixture
def fast_config() -> EngineConfig:
    return EngineConfig(depth=1, think_delay_ms=0)
