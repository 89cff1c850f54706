"""unit tests for src/chess/castling.py"""

import pytest

from src.chess.castling import (
    CASTLING_RULES,
    CastlingSide,
    CastlingSquares,
    rook_castling_side,
    squares_between_on_rank,
)
from src.chess.pieces import Color
from src.chess.square import Square


def squares(*names: str) -> list[Square]:
    return [Square.from_algebraic(name) for name in names]


def test_castling_squares_creation() -> None:
    """Test one case, just to have a little contract stating: 'I want to be able to create this dataclass'"""
    castling_squares = CastlingSquares.from_algebraic("e1", "g1", "h1", "f1")
    assert castling_squares.king_from == Square.from_algebraic("e1")
    assert castling_squares.king_to == Square.from_algebraic("g1")
    assert castling_squares.rook_from == Square.from_algebraic("h1")
    assert castling_squares.rook_to == Square.from_algebraic("f1")


@pytest.mark.parametrize(
    "color, side, empty, passed",
    [
        (Color.WHITE, CastlingSide.KING_SIDE, ["f1", "g1"], ["f1"]),
        (Color.WHITE, CastlingSide.QUEEN_SIDE, ["d1", "c1", "b1"], ["d1"]),
        (Color.BLACK, CastlingSide.KING_SIDE, ["f8", "g8"], ["f8"]),
        (Color.BLACK, CastlingSide.QUEEN_SIDE, ["d8", "c8", "b8"], ["d8"]),
    ],
)
def test_castling_paths(color: Color, side: CastlingSide, empty: list[str], passed: list[str]) -> None:
    """Squares that need to be empty (between king and rook) vs. squares the king walks over"""
    rule = CASTLING_RULES[(color, side)]
    assert rule.must_be_empty == squares(*empty)
    assert rule.pass_through == squares(*passed)


def test_squares_between_on_rank() -> None:
    assert squares_between_on_rank(Square.from_algebraic("a1"), Square.from_algebraic("e1")) == squares("b1", "c1", "d1")
    assert squares_between_on_rank(Square.from_algebraic("e8"), Square.from_algebraic("g8")) == squares("f8")
    assert squares_between_on_rank(Square.from_algebraic("e8"), Square.from_algebraic("f8")) == []


def test_squares_between_requires_same_rank() -> None:
    with pytest.raises(ValueError):
        squares_between_on_rank(Square.from_algebraic("a1"), Square.from_algebraic("a2"))


@pytest.mark.parametrize(
    "color, square, side",
    [
        (Color.WHITE, "h1", CastlingSide.KING_SIDE),
        (Color.WHITE, "a1", CastlingSide.QUEEN_SIDE),
        (Color.BLACK, "h8", CastlingSide.KING_SIDE),
        (Color.BLACK, "a8", CastlingSide.QUEEN_SIDE),
        (Color.WHITE, "h8", None),
        (Color.BLACK, "a1", None),
        (Color.WHITE, "d4", None),
    ],
)
def test_rook_castling_side(color: Color, square: str, side: CastlingSide | None) -> None:
    assert rook_castling_side(color, Square.from_algebraic(square)) == side
