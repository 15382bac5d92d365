from __future__ import annotations

from typing import Dict

import chess

from .rules import RulesEngine


class Evaluator:
    """Static evaluation for chess positions.

    Positive scores favor White, negative scores favor Black. Units are centipawns.
    """

    MATERIAL_VALUES: Dict[chess.PieceType, int] = {
        chess.PAWN: 100,
        chess.KNIGHT: 320,
        chess.BISHOP: 330,
        chess.ROOK: 500,
        chess.QUEEN: 900,
        chess.KING: 0,
    }

    MOBILITY_WEIGHT = 0.5

    @classmethod
    def evaluate(cls, position: RulesEngine) -> float:
        score: float = cls.material(position)

        # Only the side to move is counted, signed by who that is
        mobility = cls.MOBILITY_WEIGHT * len(position.legal_moves())
        score += mobility if position.turn == chess.WHITE else -mobility

        return score

    @classmethod
    def material(cls, position: RulesEngine) -> int:
        score = 0
        for piece_type, color in position.pieces():
            value = cls.MATERIAL_VALUES[piece_type]
            score += value if color == chess.WHITE else -value
        return score
