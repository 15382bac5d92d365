from __future__ import annotations

from chessai import ChessRules, Move, order_moves


def test_captures_first_and_stable_within_groups():
    a = Move("a2", "a3")
    b = Move("b2", "b3", captured="p")
    c = Move("c2", "c3")
    d = Move("d2", "d3", captured="q")
    assert order_moves([a, b, c, d]) == [b, d, a, c]


def test_empty_and_single():
    assert order_moves([]) == []
    only = Move("e2", "e4")
    assert order_moves([only]) == [only]


def test_is_a_permutation_of_real_moves():
    position = ChessRules("r1bqkb1r/pppp1ppp/2n2n2/4p2Q/2B1P3/8/PPPP1PPP/RNB1K1NR w KQkq - 4 4")
    moves = position.legal_moves()
    ordered = order_moves(moves)
    assert sorted(m.uci() for m in ordered) == sorted(m.uci() for m in moves)
    captures = [m for m in ordered if m.is_capture]
    assert ordered[: len(captures)] == captures
    assert "h5f7" in {m.uci() for m in captures}
