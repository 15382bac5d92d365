"""Chess AI package: fixed-depth alpha-beta search over a python-chess position.

Modules:
- rules: Move type and the python-chess backed rules adapter
- evaluator: Material plus side-to-move mobility evaluation
- ordering: Captures-first move ordering
- search: Minimax with alpha-beta pruning
- controller: Plays the automated side's turn
- game: Session state, human moves, undo and status reporting
"""

from .config import EngineConfig
from .controller import AIController, MoveOutcome
from .evaluator import Evaluator
from .game import FailureReason, Game, MoveAttempt
from .ordering import order_moves
from .rules import ChessRules, GameStatus, Move, RulesEngine
from .search import SearchEngine, SearchFrame, SearchResult

__all__ = [
    "AIController",
    "ChessRules",
    "EngineConfig",
    "Evaluator",
    "FailureReason",
    "Game",
    "GameStatus",
    "Move",
    "MoveAttempt",
    "MoveOutcome",
    "RulesEngine",
    "SearchEngine",
    "SearchFrame",
    "SearchResult",
    "order_moves",
]
