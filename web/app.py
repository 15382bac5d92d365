from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from flask import Flask, jsonify, request
from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr, ValidationError

# Ensure project root is importable when running this file directly
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from chessai import EngineConfig, FailureReason, Game
from chessai.errors import ConfigError, PayloadError

logger = logging.getLogger(__name__)

_CONFLICTS = (FailureReason.GAME_OVER, FailureReason.NOT_YOUR_TURN)


class NewGameRequest(BaseModel):
    """Optional starting FEN; any other keys are engine settings."""

    model_config = ConfigDict(extra="allow")

    fen: Optional[StrictStr] = None


class MoveRequest(BaseModel):
    move: StrictStr = Field(min_length=1)


class UndoRequest(BaseModel):
    to_human_turn: Optional[StrictBool] = None


def json_object() -> Dict[str, Any]:
    """The request body as a dict; an empty body counts as ``{}``."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise PayloadError(f"request body must be a JSON object, got {type(data).__name__}")
    return data


def create_app(config: Optional[EngineConfig] = None) -> Flask:
    app = Flask(__name__)

    game = Game(config or EngineConfig.from_env())

    def respond(ai_outcome=None, pre_fen: Optional[str] = None):
        snap = game.snapshot()
        snap["ai_move"] = ai_outcome.move.uci() if ai_outcome else None
        if pre_fen is not None:
            snap["pre_fen"] = pre_fen
        return jsonify(snap)

    @app.errorhandler(ConfigError)
    @app.errorhandler(PayloadError)
    def bad_payload(exc: Exception):
        return jsonify({"error": str(exc)}), 400

    @app.errorhandler(ValidationError)
    def invalid_request(exc: ValidationError):
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or "body"
        return jsonify({"error": f"{field}: {first['msg']}"}), 400

    @app.get("/api/state")
    def api_state():
        return respond()

    @app.post("/api/new")
    def api_new():
        data = json_object()
        req = NewGameRequest.model_validate(data)
        new_config = EngineConfig.from_mapping(data, base=game.config)

        with game.lock:
            try:
                game.new_game(req.fen, new_config)
            except ValueError as exc:
                return jsonify({"error": f"Invalid FEN: {exc}"}), 400

            # If the AI plays the side to move, it opens immediately
            pre_fen: Optional[str] = None
            ai_outcome = None
            if game.ai_should_move():
                # Capture starting position to allow frontend to animate the first AI move
                pre_fen = game.position.fen()
                ai_outcome = game.play_ai()
            return respond(ai_outcome, pre_fen)

    @app.post("/api/move")
    def api_move():
        payload = json_object()
        if not payload.get("move"):
            return jsonify({"error": "Missing move"}), 400
        req = MoveRequest.model_validate(payload)

        with game.lock:
            attempt = game.human_move(req.move)
            if not attempt.ok:
                status = 409 if attempt.failure in _CONFLICTS else 400
                return jsonify({"error": attempt.detail or attempt.failure.value, "reason": attempt.failure.value}), status
            return respond(game.play_ai())

    @app.post("/api/undo")
    def api_undo():
        req = UndoRequest.model_validate(json_object())

        with game.lock:
            plies = 1
            to_human_turn = req.to_human_turn if req.to_human_turn is not None else game.config.mode == "hva"
            # Against the AI, step back to the human's previous turn
            if to_human_turn:
                plies = 2 if game.position.turn != game.config.ai_side else 1
            for _ in range(plies):
                if not game.undo():
                    break
            return respond()

    @app.post("/api/settings")
    def api_settings():
        new_config = EngineConfig.from_mapping(json_object(), base=game.config)
        with game.lock:
            game.configure(new_config)
            return respond(game.play_ai())

    @app.get("/api/targets/<square>")
    def api_targets(square: str):
        try:
            targets = game.legal_targets(square)
        except ValueError:
            return jsonify({"error": f"Invalid square: {square}"}), 400
        return jsonify({"square": square, "targets": targets})

    return app


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    create_app().run(host="0.0.0.0", port=5000, debug=True)
