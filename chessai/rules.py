from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Hashable, Iterable, List, Optional, Protocol, Tuple

import chess

from .errors import IllegalMoveError


class GameStatus(Enum):
    ONGOING = "ongoing"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"
    INSUFFICIENT_MATERIAL = "insufficient_material"
    REPETITION = "repetition"
    FIFTY_MOVES = "fifty_moves"
    DRAW = "draw"

    @property
    def is_terminal(self) -> bool:
        return self is not GameStatus.ONGOING


@dataclass(frozen=True)
class Move:
    """A legal move as handed out by a rules engine.

    Squares are algebraic names ("e2"), promotion and captured are lowercase
    piece letters or None.
    """

    from_square: str
    to_square: str
    promotion: Optional[str] = None
    captured: Optional[str] = None

    @property
    def is_capture(self) -> bool:
        return self.captured is not None

    def uci(self) -> str:
        return f"{self.from_square}{self.to_square}{self.promotion or ''}"

    def __str__(self) -> str:
        return self.uci()


class RulesEngine(Protocol):
    """What the search core needs from a chess rules implementation.

    The object *is* the position: one shared, mutable board whose pushes and
    pops must stay strictly stack-ordered.
    """

    @property
    def turn(self) -> chess.Color: ...

    def legal_moves(self, square: Optional[str] = None) -> List[Move]: ...

    def pieces(self) -> Iterable[Tuple[chess.PieceType, chess.Color]]: ...

    def push(self, move: Move) -> None: ...

    def pop(self) -> Move: ...

    def status(self) -> GameStatus: ...

    def is_game_over(self) -> bool: ...

    def is_check(self) -> bool: ...

    def fingerprint(self) -> Hashable: ...


_TERMINATIONS = {
    chess.Termination.CHECKMATE: GameStatus.CHECKMATE,
    chess.Termination.STALEMATE: GameStatus.STALEMATE,
    chess.Termination.INSUFFICIENT_MATERIAL: GameStatus.INSUFFICIENT_MATERIAL,
    chess.Termination.SEVENTYFIVE_MOVES: GameStatus.FIFTY_MOVES,
    chess.Termination.FIVEFOLD_REPETITION: GameStatus.REPETITION,
}


class ChessRules:
    """RulesEngine backed by a python-chess Board."""

    def __init__(self, fen: Optional[str] = None) -> None:
        self.board = chess.Board(fen=fen) if fen else chess.Board()

    def reset(self, fen: Optional[str] = None) -> None:
        self.board = chess.Board(fen=fen) if fen else chess.Board()

    @property
    def turn(self) -> chess.Color:
        return self.board.turn

    def fen(self) -> str:
        return self.board.fen()

    def legal_moves(self, square: Optional[str] = None) -> List[Move]:
        if square is None:
            generated = self.board.generate_legal_moves()
        else:
            from_mask = chess.BB_SQUARES[chess.parse_square(square)]
            generated = self.board.generate_legal_moves(from_mask=from_mask)
        return [self._wrap(move) for move in generated]

    def pieces(self) -> Iterable[Tuple[chess.PieceType, chess.Color]]:
        return [(piece.piece_type, piece.color) for piece in self.board.piece_map().values()]

    def push(self, move: Move) -> None:
        native = chess.Move.from_uci(move.uci())
        if not self.board.is_legal(native):
            raise IllegalMoveError(f"Illegal move: {move.uci()}")
        self.board.push(native)

    def pop(self) -> Move:
        native = self.board.pop()
        # Wrap against the restored position so the capture flag is right
        return self._wrap(native)

    def move_from_uci(self, uci: str) -> Move:
        """Resolve a UCI string to a legal Move.

        Pawn moves to the last rank without a suffix are promoted to a queen.
        """
        try:
            native = chess.Move.from_uci(uci)
        except (TypeError, ValueError) as exc:
            raise IllegalMoveError(f"Illegal move: {uci}") from exc
        if self.board.is_legal(native):
            return self._wrap(native)

        if native.promotion is None:
            piece = self.board.piece_at(native.from_square)
            if piece and piece.piece_type == chess.PAWN:
                to_rank = chess.square_rank(native.to_square)
                if (piece.color == chess.WHITE and to_rank == 7) or (
                    piece.color == chess.BLACK and to_rank == 0
                ):
                    promo = chess.Move(native.from_square, native.to_square, promotion=chess.QUEEN)
                    if self.board.is_legal(promo):
                        return self._wrap(promo)

        raise IllegalMoveError(f"Illegal move: {uci}")

    def status(self) -> GameStatus:
        outcome = self.board.outcome()
        if outcome is not None:
            return _TERMINATIONS.get(outcome.termination, GameStatus.DRAW)
        if self.board.is_repetition(3):
            return GameStatus.REPETITION
        if self.board.is_fifty_moves():
            return GameStatus.FIFTY_MOVES
        return GameStatus.ONGOING

    def is_game_over(self) -> bool:
        return self.status().is_terminal

    def is_check(self) -> bool:
        return self.board.is_check()

    def king_square(self, color: chess.Color) -> Optional[str]:
        square = self.board.king(color)
        return chess.SQUARE_NAMES[square] if square is not None else None

    def history(self) -> List[Move]:
        replay = self.board.root()
        moves: List[Move] = []
        for native in self.board.move_stack:
            moves.append(self._wrap(native, replay))
            replay.push(native)
        return moves

    def san_history(self) -> List[str]:
        replay = self.board.root()
        sans: List[str] = []
        for native in self.board.move_stack:
            sans.append(replay.san_and_push(native))
        return sans

    def result(self) -> Optional[str]:
        if not self.is_game_over():
            return None
        status = self.status()
        if status is GameStatus.CHECKMATE:
            return "0-1" if self.board.turn == chess.WHITE else "1-0"
        return "1/2-1/2"

    def fingerprint(self) -> Hashable:
        return (self.board.fen(), tuple(move.uci() for move in self.board.move_stack))

    def _wrap(self, native: chess.Move, board: Optional[chess.Board] = None) -> Move:
        board = board if board is not None else self.board
        captured: Optional[str] = None
        if board.is_en_passant(native):
            captured = "p"
        else:
            target = board.piece_at(native.to_square)
            # Castling is encoded king-takes-own-rook only in chess960
            if target is not None and target.color != board.turn:
                captured = chess.piece_symbol(target.piece_type)
        promotion = chess.piece_symbol(native.promotion) if native.promotion else None
        return Move(
            from_square=chess.SQUARE_NAMES[native.from_square],
            to_square=chess.SQUARE_NAMES[native.to_square],
            promotion=promotion,
            captured=captured,
        )
