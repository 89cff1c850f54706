"""Helpers for implementing Castling rules. Need to be imported by multiple sources"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Self

from src.chess.pieces import Color
from src.chess.square import Square


class CastlingSide(Enum):
    """Values are the way the castling move is written down."""

    KING_SIDE = "O-O"
    QUEEN_SIDE = "O-O-O"


def squares_between_on_rank(from_square: Square, to_square: Square) -> list[Square]:
    """
    Find the squares in between the two squares specified that are on the same rank (both ends excluded)
    """
    if from_square.rank != to_square.rank:
        raise ValueError(
            f"squares_between_on_rank requires both squares to lie on the same rank. \n from: {from_square}\n to:{to_square}"
        )

    step = 1 if to_square.file > from_square.file else -1
    squares_found: list[Square] = []
    square = from_square.offset(step, 0)
    while square is not None and square != to_square:
        squares_found.append(square)
        square = square.offset(step, 0)
    return squares_found


@dataclass(frozen=True)
class CastlingSquares:
    """
    Store the squares where king/rook start from/end up in by castling.
    NOTE: If castling rights have not been revoked, we already know the king / rook are still at their starting squares.
    """

    king_from: Square
    king_to: Square
    rook_from: Square
    rook_to: Square

    @classmethod
    def from_algebraic(cls, k_from: str, k_to: str, r_from: str, r_to: str) -> Self:
        """Convenience method: to make mapping shown below more readable"""
        king_from = Square.from_algebraic(k_from)
        king_to = Square.from_algebraic(k_to)
        rook_from = Square.from_algebraic(r_from)
        rook_to = Square.from_algebraic(r_to)
        return cls(king_from, king_to, rook_from, rook_to)

    @property
    def must_be_empty(self) -> list[Square]:
        """Every square between the king and the rook."""
        return squares_between_on_rank(self.king_from, self.rook_from)

    @property
    def pass_through(self) -> list[Square]:
        """Squares the king crosses on its way (its start and destination excluded)."""
        return squares_between_on_rank(self.king_from, self.king_to)


# The moves (in classical chess) made when castling
CASTLING_RULES: dict[tuple[Color, CastlingSide], CastlingSquares] = {
    (Color.WHITE, CastlingSide.KING_SIDE): CastlingSquares.from_algebraic("e1", "g1", "h1", "f1"),
    (Color.WHITE, CastlingSide.QUEEN_SIDE): CastlingSquares.from_algebraic("e1", "c1", "a1", "d1"),
    (Color.BLACK, CastlingSide.KING_SIDE): CastlingSquares.from_algebraic("e8", "g8", "h8", "f8"),
    (Color.BLACK, CastlingSide.QUEEN_SIDE): CastlingSquares.from_algebraic("e8", "c8", "a8", "d8"),
}


def rook_castling_side(color: Color, square: Square) -> Optional[CastlingSide]:
    """Which castling right is tied to a rook of this color standing on its home square (None if it is not a home square)."""
    for side in CastlingSide:
        if CASTLING_RULES[(color, side)].rook_from == square:
            return side
    return None
