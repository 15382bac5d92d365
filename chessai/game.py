from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

import chess

from .config import EngineConfig
from .controller import AIController, MoveOutcome
from .errors import IllegalMoveError
from .rules import ChessRules, GameStatus, Move

logger = logging.getLogger(__name__)


class FailureReason(Enum):
    ILLEGAL_MOVE = "illegal_move"
    NOT_YOUR_TURN = "not_your_turn"
    GAME_OVER = "game_over"


@dataclass
class MoveAttempt:
    move: Optional[Move] = None
    failure: Optional[FailureReason] = None
    detail: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.failure is None


_STATUS_TEXT = {
    GameStatus.STALEMATE: "Stalemate",
    GameStatus.REPETITION: "Draw by repetition",
    GameStatus.INSUFFICIENT_MATERIAL: "Draw by insufficient material",
    GameStatus.FIFTY_MOVES: "Draw",
    GameStatus.DRAW: "Draw",
}


class Game:
    """Owns the shared position and decides when the AI gets to move.

    All mutation of the position goes through this class: human moves, undo,
    reset, and the controller's own move. They are serialized on ``lock`` so
    nothing can touch the board while a search has moves pushed on it.
    """

    def __init__(self, config: Optional[EngineConfig] = None, starting_fen: Optional[str] = None) -> None:
        self.position = ChessRules(starting_fen)
        self.controller = AIController(config)
        self.lock = threading.RLock()

    @property
    def config(self) -> EngineConfig:
        return self.controller.config

    def configure(self, config: EngineConfig) -> None:
        with self.lock:
            self.controller.config = config

    def reset(self, starting_fen: Optional[str] = None) -> None:
        with self.lock:
            self.position.reset(starting_fen)

    def new_game(self, starting_fen: Optional[str] = None, config: Optional[EngineConfig] = None) -> None:
        """Reset and reconfigure together; an invalid FEN leaves both untouched."""
        with self.lock:
            self.position.reset(starting_fen)
            if config is not None:
                self.controller.config = config

    def undo(self) -> bool:
        with self.lock:
            if not self.position.board.move_stack:
                return False
            self.position.pop()
            return True

    @property
    def last_move(self) -> Optional[Move]:
        with self.lock:
            history = self.position.history()
        return history[-1] if history else None

    def get_turn_color(self) -> str:
        with self.lock:
            return "white" if self.position.turn == chess.WHITE else "black"

    def is_game_over(self) -> bool:
        with self.lock:
            return self.position.is_game_over()

    def status_text(self) -> Optional[str]:
        with self.lock:
            status = self.position.status()
            if status is GameStatus.ONGOING:
                return None
            if status is GameStatus.CHECKMATE:
                winner = "Black" if self.position.turn == chess.WHITE else "White"
                return f"{winner} wins by checkmate"
            return _STATUS_TEXT.get(status, "Game over")

    def legal_targets(self, square: str) -> List[str]:
        with self.lock:
            return [move.to_square for move in self.position.legal_moves(square)]

    def ai_should_move(self) -> bool:
        with self.lock:
            return (
                self.config.mode == "hva"
                and self.position.turn == self.config.ai_side
                and not self.position.is_game_over()
                and not self.controller.busy
            )

    def human_move(self, uci: str) -> MoveAttempt:
        with self.lock:
            # Every position without legal moves is checkmate or stalemate
            if self.position.is_game_over():
                return MoveAttempt(failure=FailureReason.GAME_OVER, detail=self.status_text())
            if self.config.mode == "hva" and self.position.turn == self.config.ai_side:
                return MoveAttempt(failure=FailureReason.NOT_YOUR_TURN, detail=f"{self.config.ai_color} is played by the AI")
            try:
                move = self.position.move_from_uci(uci)
                self.position.push(move)
            except IllegalMoveError as exc:
                return MoveAttempt(failure=FailureReason.ILLEGAL_MOVE, detail=str(exc))
            return MoveAttempt(move=move)

    def play_ai(self) -> Optional[MoveOutcome]:
        with self.lock:
            if not self.ai_should_move():
                return None
            outcome = self.controller.play_turn(self.position)
        logger.info("AI (%s) played %s score=%s", self.config.ai_color, outcome.move.uci(), outcome.score)
        return outcome

    def snapshot(self) -> Dict[str, object]:
        with self.lock:
            last = self.last_move
            in_check = self.position.is_check()
            check_square: Optional[str] = None
            if in_check:
                check_square = self.position.king_square(self.position.turn)

            return {
                "fen": self.position.fen(),
                "turn": self.get_turn_color(),
                "legal_moves": [move.uci() for move in self.position.legal_moves()],
                "game_over": self.is_game_over(),
                "status": self.status_text(),
                "result": self.position.result(),
                "last_move": {"from": last.from_square, "to": last.to_square} if last else None,
                "last_move_capture": last.is_capture if last else False,
                "in_check": in_check,
                "check_square": check_square,
                "history": self.position.san_history(),
                "config": self.config.to_dict(),
            }
