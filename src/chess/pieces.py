"""Defines the types of chess pieces"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import Self


class PieceKind(Enum):
    PAWN = auto()
    KNIGHT = auto()
    BISHOP = auto()
    ROOK = auto()
    QUEEN = auto()
    KING = auto()


class Color(Enum):
    WHITE = "white"
    BLACK = "black"

    @property
    def opposite(self) -> Color:
        return Color.BLACK if self == Color.WHITE else Color.WHITE


# One printable glyph per piece kind. Upper case for White, lower case for Black.
SYMBOL_TO_KIND: dict[str, PieceKind] = {
    "p": PieceKind.PAWN,
    "n": PieceKind.KNIGHT,
    "b": PieceKind.BISHOP,
    "r": PieceKind.ROOK,
    "q": PieceKind.QUEEN,
    "k": PieceKind.KING,
}

KIND_TO_SYMBOL: dict[PieceKind, str] = {value: key for key, value in SYMBOL_TO_KIND.items()}


@dataclass(frozen=True)
class Piece:
    kind: PieceKind
    color: Color
    # NOTE: only tracked for pawns (a pawn may advance two squares as long as it never moved)
    has_moved: bool = False

    @classmethod
    def from_symbol(cls, character: str) -> Self:
        # lower case: Black pieces, upper case: White pieces
        color = Color.WHITE if character.isupper() else Color.BLACK
        kind = SYMBOL_TO_KIND[character.lower()]
        return cls(kind, color)

    def to_symbol(self) -> str:
        symbol = KIND_TO_SYMBOL[self.kind]
        return symbol.upper() if self.color == Color.WHITE else symbol

    def after_move(self) -> Piece:
        """The piece as it stands on its destination square. Pawns remember they moved."""
        if self.kind == PieceKind.PAWN and not self.has_moved:
            return replace(self, has_moved=True)
        return self
