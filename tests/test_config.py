from __future__ import annotations

import chess
import pytest

from chessai import EngineConfig
from chessai.errors import ConfigError


def test_defaults():
    config = EngineConfig()
    assert config.depth == 2
    assert config.think_delay_ms == 300
    assert config.ai_color == "black"
    assert config.ai_side == chess.BLACK
    assert config.mode == "hva"
    assert config.time_limit_s is None


def test_from_mapping_overrides_base_and_ignores_unknown_keys():
    base = EngineConfig(depth=3, think_delay_ms=0)
    config = EngineConfig.from_mapping({"ai_color": "White", "depth": "4", "fen": "ignored"}, base=base)
    assert config.depth == 4
    assert config.ai_color == "white"
    assert config.ai_side == chess.WHITE
    assert config.think_delay_ms == 0


@pytest.mark.parametrize(
    "data",
    [
        {"depth": 0},
        {"depth": 7},
        {"depth": "deep"},
        {"depth": True},
        {"think_delay_ms": -1},
        {"ai_color": "red"},
        {"ai_color": 1},
        {"mode": "ava"},
        {"time_limit_s": 0},
        {"time_limit_s": "soon"},
        {"time_limit_s": "nan"},
        {"time_limit_s": float("inf")},
        {"think_delay_ms": 1.5},
    ],
)
def test_invalid_values_raise_config_error(data):
    with pytest.raises(ConfigError):
        EngineConfig.from_mapping(data)


def test_config_error_is_a_value_error():
    with pytest.raises(ValueError):
        EngineConfig(depth=9)


def test_from_env():
    environ = {
        "CHESSAI_DEPTH": "3",
        "CHESSAI_THINK_DELAY_MS": "0",
        "CHESSAI_AI_COLOR": "white",
        "CHESSAI_MODE": "hvh",
        "CHESSAI_TIME_LIMIT_S": "1.5",
        "UNRELATED": "x",
    }
    config = EngineConfig.from_env(environ)
    assert config == EngineConfig(depth=3, think_delay_ms=0, ai_color="white", mode="hvh", time_limit_s=1.5)


def test_from_env_empty_gives_defaults():
    assert EngineConfig.from_env({}) == EngineConfig()


def test_to_dict_round_trips_through_from_mapping():
    config = EngineConfig(depth=5, ai_color="white")
    assert EngineConfig.from_mapping(config.to_dict()) == config


def test_from_mapping_rejects_non_objects():
    with pytest.raises(ConfigError):
        EngineConfig.from_mapping([1, 2])


def test_blank_time_limit_means_unset():
    assert EngineConfig.from_mapping({"time_limit_s": ""}).time_limit_s is None


def test_config_is_immutable():
    config = EngineConfig()
    with pytest.raises(Exception):
        config.depth = 4
    assert config.depth == 2
