"""
Files, ranks and the squares they make up.

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

from src.core.exceptions import InvalidSquareError

# Chess board is always 8x8 (files, ranks).
BOARD_DIMENSIONS = (8, 8)


class File(IntEnum):
    """The a- through h-file. Values are 0-based so a File can directly index a rank of the board."""

    A = 0
    B = 1
    C = 2
    D = 3
    E = 4
    F = 5
    G = 6
    H = 7

    @classmethod
    def from_index(cls, index: int) -> File:
        """Raises ValueError when the index falls off the board (no wraparound)."""
        return cls(index)

    def abs_diff(self, other: File) -> int:
        return abs(self - other)

    def to_algebraic(self) -> str:
        return self.name.lower()


class Rank(IntEnum):
    """1st through 8th rank, 0-based like File."""

    R1 = 0
    R2 = 1
    R3 = 2
    R4 = 3
    R5 = 4
    R6 = 5
    R7 = 6
    R8 = 7

    @classmethod
    def from_index(cls, index: int) -> Rank:
        """Raises ValueError when the index falls off the board (no wraparound)."""
        return cls(index)

    def abs_diff(self, other: Rank) -> int:
        return abs(self - other)

    def to_algebraic(self) -> str:
        return str(self.value + 1)


@dataclass(frozen=True)
class Square:
    file: File
    rank: Rank

    @classmethod
    def from_indices(cls, file: int, rank: int) -> Square:
        """0-based indices. Off-board indices raise ValueError."""
        return cls(File.from_index(file), Rank.from_index(rank))

    @classmethod
    def from_algebraic(cls, sq: str) -> Square:
        """Algebraic notation: 'a1' - 'h8'"""
        sq = sq.strip().lower()
        if len(sq) != 2 or not ("a" <= sq[0] <= "h") or not ("1" <= sq[1] <= "8"):
            raise InvalidSquareError(f"Cannot interpret {sq!r} as a square (a1 - h8).")
        return cls.from_indices(ord(sq[0]) - ord("a"), int(sq[1]) - 1)

    def to_algebraic(self) -> str:
        return f"{self.file.to_algebraic()}{self.rank.to_algebraic()}"

    def delta(self, other: Square) -> tuple[int, int]:
        """Signed (file, rank) distance to travel from this square to the other."""
        return other.file - self.file, other.rank - self.rank

    def offset(self, df: int, dr: int) -> Optional[Square]:
        """The square df files and dr ranks away, or None if that falls off the board."""
        file = self.file + df
        rank = self.rank + dr
        if not (0 <= file < BOARD_DIMENSIONS[0] and 0 <= rank < BOARD_DIMENSIONS[1]):
            return None
        return Square(File(file), Rank(rank))

    def __str__(self) -> str:
        return self.to_algebraic()


# every square, a1, b1, ..., h1, a2, ..., h8
ALL_SQUARES: tuple[Square, ...] = tuple(Square(file, rank) for rank in Rank for file in File)
