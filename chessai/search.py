from __future__ import annotations

import logging
import math
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, List, NamedTuple, Optional

import chess

from .errors import IllegalMoveError, SearchInvariantError
from .evaluator import Evaluator
from .ordering import order_moves
from .rules import Move, RulesEngine

logger = logging.getLogger(__name__)

INF = math.inf


class SearchFrame(NamedTuple):
    """Parameters of one recursion level."""

    depth: int
    alpha: float
    beta: float
    maximizing: bool


@dataclass
class SearchResult:
    move: Move
    score: float
    nodes: int


@dataclass
class _SearchStats:
    deadline_ts: Optional[float] = None
    nodes: int = 0
    timed_out: bool = False

    def expired(self) -> bool:
        if self.deadline_ts is None:
            return False
        if time.monotonic() >= self.deadline_ts:
            self.timed_out = True
        return self.timed_out


@contextmanager
def applied(position: RulesEngine, move: Move) -> Iterator[None]:
    """Push ``move`` for the duration of the block and pop it on every exit."""
    try:
        position.push(move)
    except IllegalMoveError as exc:
        raise SearchInvariantError(f"enumerated move {move.uci()} rejected by rules engine") from exc
    try:
        yield
    finally:
        position.pop()


class SearchEngine:
    """Fixed-depth minimax with alpha-beta pruning.

    White maximizes, Black minimizes. The position passed in is mutated during
    the search and restored before ``best_move`` returns. No state is kept
    between calls.
    """

    def __init__(
        self,
        evaluate: Callable[[RulesEngine], float] = Evaluator.evaluate,
        orderer: Callable[[Iterable[Move]], List[Move]] = order_moves,
    ) -> None:
        self.evaluate = evaluate
        self.orderer = orderer

    def best_move(
        self,
        position: RulesEngine,
        depth: int,
        time_limit_s: Optional[float] = None,
    ) -> Optional[SearchResult]:
        """Return the best move for the side to move, or None without legal moves.

        If ``time_limit_s`` expires, remaining nodes are scored statically
        instead of expanded, so a move is still returned.
        """
        if isinstance(depth, bool) or not isinstance(depth, int) or depth < 1:
            raise ValueError(f"depth must be a positive integer, got {depth!r}")

        stats = _SearchStats(
            deadline_ts=(time.monotonic() + time_limit_s) if time_limit_s else None
        )
        started = time.monotonic()
        before = position.fingerprint()

        result = self._search_root(position, depth, stats)

        assert position.fingerprint() == before, "position not restored after search"
        logger.debug(
            "depth=%d move=%s score=%s nodes=%d timed_out=%s elapsed=%.3fs",
            depth,
            result.move.uci() if result else None,
            result.score if result else None,
            stats.nodes,
            stats.timed_out,
            time.monotonic() - started,
        )
        return result

    def _search_root(self, position: RulesEngine, depth: int, stats: _SearchStats) -> Optional[SearchResult]:
        moves = self.orderer(position.legal_moves())
        if not moves:
            return None

        maximizing = position.turn == chess.WHITE
        best_move: Optional[Move] = None
        best_score = -INF if maximizing else INF

        for move in moves:
            with applied(position, move):
                stats.nodes += 1
                frame = SearchFrame(depth - 1, -INF, INF, position.turn == chess.WHITE)
                score = self._search(position, frame, stats)
            # Strict comparison keeps the first move found at a given score
            if best_move is None or (score > best_score if maximizing else score < best_score):
                best_score = score
                best_move = move

        return SearchResult(move=best_move, score=best_score, nodes=stats.nodes)

    def _search(self, position: RulesEngine, frame: SearchFrame, stats: _SearchStats) -> float:
        if frame.depth == 0 or position.is_game_over() or stats.expired():
            return self.evaluate(position)

        moves = self.orderer(position.legal_moves())
        if not moves:
            raise SearchInvariantError("no legal moves in a position not reported as game over")

        alpha, beta = frame.alpha, frame.beta
        if frame.maximizing:
            value = -INF
            for move in moves:
                with applied(position, move):
                    stats.nodes += 1
                    score = self._search(position, SearchFrame(frame.depth - 1, alpha, beta, False), stats)
                value = max(value, score)
                alpha = max(alpha, value)
                if beta <= alpha:
                    break
            return value
        else:
            value = INF
            for move in moves:
                with applied(position, move):
                    stats.nodes += 1
                    score = self._search(position, SearchFrame(frame.depth - 1, alpha, beta, True), stats)
                value = min(value, score)
                beta = min(beta, value)
                if beta <= alpha:
                    break
            return value
