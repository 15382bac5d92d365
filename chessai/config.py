from __future__ import annotations

import os
from typing import Any, Dict, Literal, Mapping, Optional

import chess
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError

MIN_DEPTH = 1
MAX_DEPTH = 6

_ENV_KEYS = {
    "depth": "CHESSAI_DEPTH",
    "think_delay_ms": "CHESSAI_THINK_DELAY_MS",
    "ai_color": "CHESSAI_AI_COLOR",
    "mode": "CHESSAI_MODE",
    "time_limit_s": "CHESSAI_TIME_LIMIT_S",
}


class EngineConfig(BaseModel):
    """Session settings for the automated player.

    mode is "hvh" (human vs human) or "hva" (human vs AI). think_delay_ms is a
    purely cosmetic pause before the AI searches.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    depth: int = Field(2, ge=MIN_DEPTH, le=MAX_DEPTH)
    think_delay_ms: int = Field(300, ge=0)
    ai_color: Literal["white", "black"] = "black"
    mode: Literal["hvh", "hva"] = "hva"
    time_limit_s: Optional[float] = Field(None, gt=0, allow_inf_nan=False)

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as exc:
            raise ConfigError(f"Invalid configuration: {exc}") from exc

    @field_validator("depth", "think_delay_ms", mode="before")
    @classmethod
    def _no_bools(cls, v: Any) -> Any:
        if isinstance(v, bool):
            raise ValueError("expected an integer, got a boolean")
        return v

    @field_validator("ai_color", "mode", mode="before")
    @classmethod
    def _lowercase(cls, v: Any) -> Any:
        return v.lower() if isinstance(v, str) else v

    @field_validator("time_limit_s", mode="before")
    @classmethod
    def _blank_is_unset(cls, v: Any) -> Any:
        return None if v == "" else v

    @property
    def ai_side(self) -> chess.Color:
        return chess.WHITE if self.ai_color == "white" else chess.BLACK

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], base: Optional["EngineConfig"] = None) -> "EngineConfig":
        """Build a config from a JSON payload, keeping ``base`` for missing keys."""
        if not isinstance(data, Mapping):
            raise ConfigError(f"configuration must be an object, got {type(data).__name__}")
        base = base or cls()
        return cls(**{**base.to_dict(), **{str(key): value for key, value in data.items()}})

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EngineConfig":
        environ = os.environ if environ is None else environ
        data = {key: environ[name] for key, name in _ENV_KEYS.items() if environ.get(name)}
        return cls.from_mapping(data)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()
