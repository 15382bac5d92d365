from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from .config import EngineConfig
from .errors import GameOverError, NotAITurnError, ReentrantSearchError, SearchInvariantError
from .rules import Move, RulesEngine
from .search import SearchEngine

logger = logging.getLogger(__name__)


@dataclass
class MoveOutcome:
    """A move the controller applied for the automated side."""

    move: Move
    score: Optional[float]
    fallback: bool = False

    @property
    def from_square(self) -> str:
        return self.move.from_square

    @property
    def to_square(self) -> str:
        return self.move.to_square


class AIController:
    """Plays one turn for the automated side on a shared position."""

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        engine: Optional[SearchEngine] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config or EngineConfig()
        self.engine = engine or SearchEngine()
        self._sleep = sleep
        self._searching = False

    @property
    def busy(self) -> bool:
        return self._searching

    def play_turn(self, position: RulesEngine) -> MoveOutcome:
        if self._searching:
            raise ReentrantSearchError("a search is already running for this turn")
        if position.is_game_over():
            raise GameOverError("game is already over")
        if position.turn != self.config.ai_side:
            raise NotAITurnError(f"it is not {self.config.ai_color}'s turn")

        self._searching = True
        try:
            if self.config.think_delay_ms:
                self._sleep(self.config.think_delay_ms / 1000.0)

            result = self.engine.best_move(position, self.config.depth, self.config.time_limit_s)
            if result is not None:
                position.push(result.move)
                return MoveOutcome(move=result.move, score=result.score)

            legal = position.legal_moves()
            if not legal:
                raise SearchInvariantError("no legal moves in a position not reported as game over")
            logger.warning("search returned no move, falling back to %s", legal[0].uci())
            position.push(legal[0])
            return MoveOutcome(move=legal[0], score=None, fallback=True)
        finally:
            self._searching = False
