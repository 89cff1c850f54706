"""The Game board: storage of which piece stands on which square. Owns no rules beyond relocating pieces."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Self, overload

from src.chess.castling import CASTLING_RULES, CastlingSide
from src.chess.moves import NormalMove
from src.chess.pieces import Color, Piece, PieceKind
from src.chess.square import ALL_SQUARES, File, Rank, Square
from src.core.exceptions import BoardInvariantError

BACK_RANK: tuple[PieceKind, ...] = (
    PieceKind.ROOK,
    PieceKind.KNIGHT,
    PieceKind.BISHOP,
    PieceKind.QUEEN,
    PieceKind.KING,
    PieceKind.BISHOP,
    PieceKind.KNIGHT,
    PieceKind.ROOK,
)


@dataclass
class Board:
    """
    8x8 container mapping every square to the piece standing on it (or None).

    Addressable by square, `board[square]`, or rank-then-file, `board[rank][file]`.
    """

    position: dict[Square, Optional[Piece]] = field(
        default_factory=lambda: {square: None for square in ALL_SQUARES}
    )

    @classmethod
    def empty(cls) -> Self:
        return cls()

    @classmethod
    def starting_position(cls) -> Self:
        """White pieces on ranks 1-2, Black pieces on ranks 7-8"""
        board = cls()
        for file, kind in zip(File, BACK_RANK):
            board.place_piece(Piece(kind, Color.WHITE), Square(file, Rank.R1))
            board.place_piece(Piece(PieceKind.PAWN, Color.WHITE), Square(file, Rank.R2))
            board.place_piece(Piece(PieceKind.PAWN, Color.BLACK), Square(file, Rank.R7))
            board.place_piece(Piece(kind, Color.BLACK), Square(file, Rank.R8))
        return board

    @classmethod
    def from_symbols(cls, placement: dict[str, str]) -> Self:
        """
        Build a board from {square: glyph}, ex. {"e1": "K", "e8": "k"}
        (Upper case letters are White pieces, lower case letters are Black pieces)
        """
        board = cls()
        for square_name, symbol in placement.items():
            board.place_piece(Piece.from_symbol(symbol), Square.from_algebraic(square_name))
        return board

    @overload
    def __getitem__(self, key: Square) -> Optional[Piece]: ...
    @overload
    def __getitem__(self, key: Rank) -> list[Optional[Piece]]: ...

    def __getitem__(self, key: Square | Rank) -> Optional[Piece] | list[Optional[Piece]]:
        if isinstance(key, Rank):
            return [self.position[Square(file, key)] for file in File]
        return self.position[key]

    def copy(self) -> Board:
        """Full clone of the grid. Pieces are immutable, so a new dict is all it takes."""
        return Board(dict(self.position))

    def place_piece(self, piece: Piece, square: Square) -> None:
        self.position[square] = piece

    def remove_piece(self, square: Square) -> Optional[Piece]:
        piece = self.position[square]
        self.position[square] = None
        return piece

    def move_piece(self, move: NormalMove) -> Optional[Piece]:
        """Update the position on the board. Returns the captured piece (if any)."""
        piece = self.remove_piece(move.from_square)
        if piece is None:
            raise ValueError(f"No piece on {move.from_square} to move.")
        captured = self.position[move.to_square]
        self.position[move.to_square] = piece.after_move()
        return captured

    def castle(self, color: Color, side: CastlingSide) -> None:
        """Move both the King and the Rook"""
        squares = CASTLING_RULES[(color, side)]
        self.move_piece(NormalMove(squares.king_from, squares.king_to))
        self.move_piece(NormalMove(squares.rook_from, squares.rook_to))

    def occupied_squares(self) -> list[Square]:
        return [square for square, piece in self.position.items() if piece is not None]

    def locate_color(self, color: Color) -> list[Square]:
        return [
            square
            for square, piece in self.position.items()
            if piece is not None and piece.color == color
        ]

    def locate_king(self, color: Color) -> Square:
        """There must be exactly one king per color. Anything else is a bug, not a rule violation."""
        king = Piece(PieceKind.KING, color)
        squares = [square for square, piece in self.position.items() if piece == king]
        if len(squares) != 1:
            raise BoardInvariantError(f"Expected exactly one {color.value} king, found {len(squares)}.")
        return squares[0]

    def render(self) -> list[str]:
        """One string of glyphs per rank, from the 8th rank down to the 1st. Empty squares are '.'"""
        return [
            "".join(piece.to_symbol() if piece else "." for piece in self[rank])
            for rank in reversed(Rank)
        ]


@dataclass
class MoveBoard:
    """
    The board of moves reachable from a single square.
    Every square maps to the move landing there, or None. Addressable just like the Board.
    """

    moves: dict[Square, NormalMove] = field(default_factory=dict)

    @classmethod
    def from_moves(cls, moves: list[NormalMove]) -> Self:
        return cls({move.to_square: move for move in moves})

    @overload
    def __getitem__(self, key: Square) -> Optional[NormalMove]: ...
    @overload
    def __getitem__(self, key: Rank) -> list[Optional[NormalMove]]: ...

    def __getitem__(self, key: Square | Rank) -> Optional[NormalMove] | list[Optional[NormalMove]]:
        if isinstance(key, Rank):
            return [self.moves.get(Square(file, key)) for file in File]
        return self.moves.get(key)

    def __contains__(self, square: Square) -> bool:
        return square in self.moves

    def __len__(self) -> int:
        return len(self.moves)

    def all_moves(self) -> list[NormalMove]:
        return list(self.moves.values())

    def destinations(self) -> list[Square]:
        return list(self.moves.keys())
