"""
Geometry/Base movement and capturing rules

Key idea: Use strategy pattern to define the movement rule for each piece type.
`movement_error()` is the single source of truth for "can this piece get from here to there?":
* the Game uses it to validate a move that is attempted directly,
* the candidate move generators use it to filter the squares they enumerate.

Whether a move leaves your own king in check is checked later by Game
"""

from dataclasses import dataclass
from typing import Callable, Optional, Protocol, Self

from src.chess.castling import CastlingSide
from src.chess.pieces import Color, Piece, PieceKind
from src.chess.square import Square
from src.core.exceptions import (
    CollisionError,
    IllegalMoveError,
    InvalidMoveNotationError,
    InvalidSquareError,
    PawnDoubleMoveError,
    WrongPieceMovementError,
)


class Board(Protocol):
    """Just the parts the movement rules need"""

    def __getitem__(self, square: Square) -> Optional[Piece]: ...


Vector = tuple[int, int]


@dataclass(frozen=True)
class NormalMove:
    """Relocate the piece on from_square to to_square (capturing whatever stands there)."""

    from_square: Square
    to_square: Square

    @classmethod
    def from_coordinates(cls, text: str) -> Self:
        """ex. 'e2e4': move the piece that was on e2 to e4"""
        text = text.strip()
        if len(text) != 4:
            raise InvalidMoveNotationError(f"Cannot interpret {text!r} as a move.")
        try:
            return cls(Square.from_algebraic(text[:2]), Square.from_algebraic(text[2:]))
        except InvalidSquareError as e:
            raise InvalidMoveNotationError(f"Cannot interpret {text!r} as a move.") from e

    def to_coordinates(self) -> str:
        return f"{self.from_square.to_algebraic()}{self.to_square.to_algebraic()}"


@dataclass(frozen=True)
class CastleMove:
    """Castling. Which king and rook move follows from the player on turn."""

    side: CastlingSide

    def to_coordinates(self) -> str:
        return self.side.value


Move = NormalMove | CastleMove


def parse_move(text: str) -> Move:
    """Inverse of `to_coordinates()`: 'e2e4', 'O-O' or 'O-O-O'"""
    text = text.strip()
    for side in CastlingSide:
        if text.upper().replace("0", "O") == side.value:
            return CastleMove(side)
    return NormalMove.from_coordinates(text)


# --- LINE OF SIGHT ---
def collision_check(board: Board, square: Square, color: Color) -> bool:
    """Is the square occupied by a piece of the given color?"""
    piece = board[square]
    return piece is not None and piece.color == color


def collision_check_line(
    board: Board, from_square: Square, to_square: Square, color: Color
) -> Optional[Square]:
    """
    Walk the straight or diagonal line from `from_square` towards `to_square` (start excluded, end included).
    ---

    Returns the first square a piece of `color` cannot get to, or None if the whole line is passable.

    * A piece of your own color blocks its own square.
    * An enemy piece can be captured, so it only blocks the squares behind it.

    NOTE: The caller is responsible for making sure the two squares lie on one line.
    """
    df, dr = from_square.delta(to_square)
    step_file = (df > 0) - (df < 0)
    step_rank = (dr > 0) - (dr < 0)
    distance = abs(df) if df != 0 else abs(dr)

    passed_enemy = False
    for i in range(1, distance + 1):
        square = from_square.offset(step_file * i, step_rank * i)
        if square is None:
            return to_square
        if passed_enemy:
            return square
        piece = board[square]
        if piece is None:
            continue
        if piece.color == color:
            return square
        passed_enemy = True
    return None


def is_path_blocked(board: Board, from_square: Square, to_square: Square, color: Color) -> bool:
    return collision_check_line(board, from_square, to_square, color) is not None


# --- MOVEMENT RULES ---
def _is_diagonal(df: int, dr: int) -> bool:
    return abs(df) == abs(dr) and df != 0


def _is_straight(df: int, dr: int) -> bool:
    return (df == 0) != (dr == 0)


def pawn_direction(color: Color) -> int:
    """White moves UP the board, black moves DOWN"""
    return 1 if color == Color.WHITE else -1


def pawn_rule(board: Board, from_square: Square, to_square: Square, piece: Piece) -> Optional[IllegalMoveError]:
    """
    A pawn:
    - moves by a single square forward, onto an empty square.
    - can move by two as long as it never moved, if both squares are empty.
    - takes diagonally (and only takes: a diagonal step onto an empty square is not a pawn move)
    """
    df, dr = from_square.delta(to_square)
    forward = pawn_direction(piece.color)

    if df == 0 and dr == forward:
        if board[to_square] is not None:
            return CollisionError(f"Pawn on {from_square} is blocked by the piece on {to_square}.")
        return None

    if df == 0 and dr == 2 * forward:
        if piece.has_moved:
            return PawnDoubleMoveError(f"Pawn on {from_square} already moved and cannot advance two squares.")
        if is_path_blocked(board, from_square, to_square, piece.color) or board[to_square] is not None:
            return CollisionError(f"Pawn on {from_square} cannot jump over or onto a piece.")
        return None

    if abs(df) == 1 and dr == forward:
        if collision_check(board, to_square, piece.color.opposite):
            return None
        return WrongPieceMovementError(f"Pawn on {from_square} only moves diagonally to take a piece.")

    return WrongPieceMovementError(f"A pawn cannot move from {from_square} to {to_square}.")


def knight_rule(board: Board, from_square: Square, to_square: Square, piece: Piece) -> Optional[IllegalMoveError]:
    """Knights always move such that one of the distances is 1 and the other is 2"""
    df, dr = from_square.delta(to_square)
    if sorted((abs(df), abs(dr))) != [1, 2]:
        return WrongPieceMovementError(f"A knight cannot move from {from_square} to {to_square}.")
    return None


def bishop_rule(board: Board, from_square: Square, to_square: Square, piece: Piece) -> Optional[IllegalMoveError]:
    """Bishops move diagonally: |delta_rank| = |delta_file|"""
    df, dr = from_square.delta(to_square)
    if not _is_diagonal(df, dr):
        return WrongPieceMovementError(f"A bishop cannot move from {from_square} to {to_square}.")
    if is_path_blocked(board, from_square, to_square, piece.color):
        return CollisionError(f"The path from {from_square} to {to_square} is blocked.")
    return None


def rook_rule(board: Board, from_square: Square, to_square: Square, piece: Piece) -> Optional[IllegalMoveError]:
    """Rooks move either horizontally or vertically"""
    df, dr = from_square.delta(to_square)
    if not _is_straight(df, dr):
        return WrongPieceMovementError(f"A rook cannot move from {from_square} to {to_square}.")
    if is_path_blocked(board, from_square, to_square, piece.color):
        return CollisionError(f"The path from {from_square} to {to_square} is blocked.")
    return None


def queen_rule(board: Board, from_square: Square, to_square: Square, piece: Piece) -> Optional[IllegalMoveError]:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    df, dr = from_square.delta(to_square)
    if not (_is_straight(df, dr) or _is_diagonal(df, dr)):
        return WrongPieceMovementError(f"A queen cannot move from {from_square} to {to_square}.")
    if is_path_blocked(board, from_square, to_square, piece.color):
        return CollisionError(f"The path from {from_square} to {to_square} is blocked.")
    return None


def king_rule(board: Board, from_square: Square, to_square: Square, piece: Piece) -> Optional[IllegalMoveError]:
    """
    The king can move by a single square at the time.

    Castling is modelled as a separate move (see CastleMove).
    """
    df, dr = from_square.delta(to_square)
    if max(abs(df), abs(dr)) != 1:
        return WrongPieceMovementError(f"A king cannot move from {from_square} to {to_square}.")
    return None


# -- STRATEGY PATTERN: MOVEMENT RULES ---
MovementRuleFn = Callable[[Board, Square, Square, Piece], Optional[IllegalMoveError]]
MOVEMENT_RULES: dict[PieceKind, MovementRuleFn] = {
    PieceKind.PAWN: pawn_rule,
    PieceKind.KNIGHT: knight_rule,
    PieceKind.BISHOP: bishop_rule,
    PieceKind.ROOK: rook_rule,
    PieceKind.QUEEN: queen_rule,
    PieceKind.KING: king_rule,
}


def movement_error(board: Board, from_square: Square, to_square: Square) -> Optional[IllegalMoveError]:
    """
    Check the piece geometry and the collision rules (NOT whether you put yourself in check).
    ---

    Returns the error describing why the piece on `from_square` cannot go to `to_square`, or None if it can.
    """
    piece = board[from_square]
    if piece is None:
        raise ValueError(f"movement_error requires a piece on {from_square}")

    if collision_check(board, to_square, piece.color):
        return CollisionError(f"Cannot move onto your own piece on {to_square}.")

    return MOVEMENT_RULES[piece.kind](board, from_square, to_square, piece)


# --- CANDIDATE MOVES ---
KNIGHT_DELTAS: list[Vector] = [(2, 1), (2, -1), (-2, 1), (-2, -1), (1, 2), (1, -2), (-1, 2), (-1, -2)]
DIAGONALS: list[Vector] = [(1, 1), (-1, 1), (-1, -1), (1, -1)]
STRAIGHTS: list[Vector] = [(1, 0), (0, 1), (-1, 0), (0, -1)]
KING_DELTAS: list[Vector] = STRAIGHTS + DIAGONALS


def raycasting_move(square: Square, board: Board, directions: list[Vector]) -> list[NormalMove]:
    """
    Raycasting algorithm
    -----

    The main trick we use to check the 'line of sight of a piece'.
    Walk along each direction until the movement rule rejects a square (an own piece, the square behind an enemy piece)
    or until we step off the board.
    """
    moves: list[NormalMove] = []
    for df, dr in directions:
        target_square = square.offset(df, dr)
        while target_square is not None:
            if movement_error(board, square, target_square) is not None:
                break
            moves.append(NormalMove(square, target_square))
            target_square = target_square.offset(df, dr)
    return moves


def single_step_move(square: Square, board: Board, deltas: list[Vector]) -> list[NormalMove]:
    """Raycasting is for sliding pieces. This is the equivalent for pawns, kings, and knights that just take a single step along a direction"""
    moves: list[NormalMove] = []
    for df, dr in deltas:
        target_square = square.offset(df, dr)
        if target_square is None:
            continue
        if movement_error(board, square, target_square) is None:
            moves.append(NormalMove(square, target_square))
    return moves


def candidate_pawn_moves(square: Square, board: Board) -> list[NormalMove]:
    """One or two steps forward, and the two diagonal captures. The movement rule sorts out which ones apply."""
    piece = board[square]
    assert piece is not None
    forward = pawn_direction(piece.color)
    return single_step_move(square, board, [(0, forward), (0, 2 * forward), (1, forward), (-1, forward)])


def candidate_knight_moves(square: Square, board: Board) -> list[NormalMove]:
    return single_step_move(square, board, KNIGHT_DELTAS)


def candidate_bishop_moves(square: Square, board: Board) -> list[NormalMove]:
    return raycasting_move(square, board, DIAGONALS)


def candidate_rook_moves(square: Square, board: Board) -> list[NormalMove]:
    return raycasting_move(square, board, STRAIGHTS)


def candidate_queen_moves(square: Square, board: Board) -> list[NormalMove]:
    """Union of the rook and bishop rays"""
    return raycasting_move(square, board, STRAIGHTS + DIAGONALS)


def candidate_king_moves(square: Square, board: Board) -> list[NormalMove]:
    return single_step_move(square, board, KING_DELTAS)


# -- STRATEGY PATTERN: CANDIDATE MOVE GENERATION ---
CandidateMovesFn = Callable[[Square, Board], list[NormalMove]]
CANDIDATE_RULES: dict[PieceKind, CandidateMovesFn] = {
    PieceKind.PAWN: candidate_pawn_moves,
    PieceKind.KNIGHT: candidate_knight_moves,
    PieceKind.BISHOP: candidate_bishop_moves,
    PieceKind.ROOK: candidate_rook_moves,
    PieceKind.QUEEN: candidate_queen_moves,
    PieceKind.KING: candidate_king_moves,
}
