"""Unit tests for /src/chess/moves.py"""

import pytest

from src.chess.board import Board
from src.chess.castling import CastlingSide
from src.chess.moves import (
    CANDIDATE_RULES,
    MOVEMENT_RULES,
    CastleMove,
    NormalMove,
    collision_check,
    collision_check_line,
    is_path_blocked,
    movement_error,
    parse_move,
)
from src.chess.pieces import Color, Piece, PieceKind
from src.chess.square import ALL_SQUARES, Square
from src.core.exceptions import (
    CollisionError,
    IllegalMoveError,
    InvalidMoveNotationError,
    PawnDoubleMoveError,
    WrongPieceMovementError,
)

# a position with a bit of everything: pins, blocked sliders, pawns that can take
MIDDLE_GAME = {
    "e1": "K", "d1": "Q", "a1": "R", "f1": "R", "c4": "B", "f3": "N", "a2": "P", "b2": "P", "e4": "P", "d3": "P",
    "e8": "k", "d8": "q", "a8": "r", "h8": "r", "b7": "b", "c6": "n", "f6": "n", "d5": "p", "e5": "p", "h7": "p",
}  # fmt: skip


def sq(name: str) -> Square:
    return Square.from_algebraic(name)


def move(text: str) -> NormalMove:
    return NormalMove.from_coordinates(text)


# --- LINE OF SIGHT ---
def test_collision_check() -> None:
    board = Board.starting_position()
    assert collision_check(board, sq("e2"), Color.WHITE)
    assert not collision_check(board, sq("e2"), Color.BLACK)
    assert not collision_check(board, sq("e4"), Color.WHITE)


def test_scanner_enemy_blocks_only_squares_behind_it() -> None:
    """Bishop c1 with an enemy on e3: it can take on e3, but not go any further"""
    board = Board.from_symbols({"c1": "B", "e3": "p"})
    assert collision_check_line(board, sq("c1"), sq("e3"), Color.WHITE) is None
    assert collision_check_line(board, sq("c1"), sq("f4"), Color.WHITE) == sq("f4")
    assert is_path_blocked(board, sq("c1"), sq("f4"), Color.WHITE)
    assert movement_error(board, sq("c1"), sq("e3")) is None
    assert isinstance(movement_error(board, sq("c1"), sq("f4")), CollisionError)


def test_scanner_own_piece_blocks_its_own_square() -> None:
    board = Board.from_symbols({"c1": "B", "d2": "P"})
    assert collision_check_line(board, sq("c1"), sq("e3"), Color.WHITE) == sq("d2")
    assert collision_check_line(board, sq("c1"), sq("d2"), Color.WHITE) == sq("d2")


def test_scanner_free_line() -> None:
    board = Board.from_symbols({"a1": "R"})
    assert collision_check_line(board, sq("a1"), sq("a8"), Color.WHITE) is None
    assert not is_path_blocked(board, sq("a1"), sq("h1"), Color.WHITE)


# --- MOVEMENT RULES ---
def test_rule_tables_cover_every_piece() -> None:
    assert set(MOVEMENT_RULES) == set(PieceKind)
    assert set(CANDIDATE_RULES) == set(PieceKind)


def test_movement_error_requires_a_piece() -> None:
    with pytest.raises(ValueError):
        movement_error(Board.empty(), sq("e4"), sq("e5"))


@pytest.mark.parametrize("coordinates", ["e1e2", "a1b1", "d1e2", "g1e2"])
def test_cannot_move_onto_own_piece(coordinates: str) -> None:
    board = Board.starting_position()
    m = move(coordinates)
    assert isinstance(movement_error(board, m.from_square, m.to_square), CollisionError)


@pytest.mark.parametrize(
    "placement, coordinates, expected",
    [
        # pawn
        ({"e2": "P"}, "e2e3", None),
        ({"e2": "P"}, "e2e4", None),
        ({"e7": "p"}, "e7e5", None),
        ({"e2": "P"}, "e2e5", WrongPieceMovementError),
        ({"e2": "P"}, "e2e1", WrongPieceMovementError),
        ({"e7": "p"}, "e7e8", WrongPieceMovementError),
        ({"e2": "P"}, "e2d3", WrongPieceMovementError),
        ({"e2": "P", "d3": "p"}, "e2d3", None),
        ({"e2": "P", "e3": "p"}, "e2e3", CollisionError),
        ({"e2": "P", "e3": "n"}, "e2e4", CollisionError),
        ({"e2": "P", "e4": "n"}, "e2e4", CollisionError),
        ({"e7": "p", "d6": "P"}, "e7d6", None),
        # knight
        ({"g1": "N"}, "g1f3", None),
        ({"g1": "N", "f2": "P", "g2": "P"}, "g1f3", None),
        ({"g1": "N"}, "g1g3", WrongPieceMovementError),
        ({"b8": "n", "c6": "P"}, "b8c6", None),
        # bishop
        ({"c1": "B"}, "c1h6", None),
        ({"c1": "B"}, "c1c3", WrongPieceMovementError),
        ({"c1": "B", "d2": "P"}, "c1e3", CollisionError),
        # rook
        ({"a1": "R"}, "a1a8", None),
        ({"a1": "R"}, "a1b2", WrongPieceMovementError),
        ({"a1": "R", "a4": "p"}, "a1a4", None),
        ({"a1": "R", "a4": "p"}, "a1a5", CollisionError),
        # queen
        ({"d4": "Q"}, "d4h8", None),
        ({"d4": "Q"}, "d4d1", None),
        ({"d4": "Q"}, "d4e6", WrongPieceMovementError),
        ({"d1": "Q", "d2": "P"}, "d1d3", CollisionError),
        # king
        ({"e4": "K"}, "e4e5", None),
        ({"e4": "K"}, "e4d3", None),
        ({"e1": "K"}, "e1e3", WrongPieceMovementError),
        ({"e1": "K"}, "e1g1", WrongPieceMovementError),
    ],
)
def test_movement_rules(
    placement: dict[str, str], coordinates: str, expected: type[IllegalMoveError] | None
) -> None:
    board = Board.from_symbols(placement)
    m = move(coordinates)
    error = movement_error(board, m.from_square, m.to_square)
    if expected is None:
        assert error is None
    else:
        assert isinstance(error, expected)


def test_moved_pawn_cannot_double_step() -> None:
    board = Board.empty()
    board.place_piece(Piece(PieceKind.PAWN, Color.WHITE, has_moved=True), sq("e3"))
    assert isinstance(movement_error(board, sq("e3"), sq("e5")), PawnDoubleMoveError)
    assert movement_error(board, sq("e3"), sq("e4")) is None


# --- CANDIDATE MOVES ---
def destinations(board: Board, name: str) -> set[str]:
    square = sq(name)
    piece = board[square]
    return {m.to_square.to_algebraic() for m in CANDIDATE_RULES[piece.kind](square, board)}


@pytest.mark.parametrize(
    "square, expected",
    [
        ("e2", {"e3", "e4"}),
        ("g1", {"f3", "h3"}),
        ("b8", {"a6", "c6"}),
        ("a1", set()),
        ("c1", set()),
        ("d1", set()),
        ("e1", set()),
    ],
)
def test_candidates_in_starting_position(square: str, expected: set[str]) -> None:
    assert destinations(Board.starting_position(), square) == expected


@pytest.mark.parametrize(
    "placement, square, count",
    [
        ({"d4": "Q"}, "d4", 27),
        ({"d4": "B"}, "d4", 13),
        ({"d4": "R"}, "d4", 14),
        ({"d4": "N"}, "d4", 8),
        ({"a1": "N"}, "a1", 2),
        ({"e4": "K"}, "e4", 8),
        ({"a1": "K"}, "a1", 3),
    ],
)
def test_candidates_on_empty_board(placement: dict[str, str], square: str, count: int) -> None:
    assert len(destinations(Board.from_symbols(placement), square)) == count


def test_raycast_stops_at_enemy_after_capture() -> None:
    board = Board.from_symbols({"a1": "R", "a4": "p", "d1": "P"})
    assert destinations(board, "a1") == {"a2", "a3", "a4", "b1", "c1"}


def test_pawn_captures_but_does_not_push_into_piece() -> None:
    board = Board.from_symbols({"e4": "P", "e5": "p", "d5": "p", "f5": "N"})
    assert destinations(board, "e4") == {"d5"}


@pytest.mark.parametrize("placement", [None, MIDDLE_GAME])
def test_generators_agree_with_movement_rules(placement: dict[str, str] | None) -> None:
    """Whatever the generator offers is exactly what the movement rule accepts, for every piece on the board"""
    board = Board.starting_position() if placement is None else Board.from_symbols(placement)
    for origin in board.occupied_squares():
        accepted = {target for target in ALL_SQUARES if movement_error(board, origin, target) is None}
        generated = {m.to_square for m in CANDIDATE_RULES[board[origin].kind](origin, board)}
        assert generated == accepted, origin


# --- NOTATION ---
@pytest.mark.parametrize(
    "text, expected",
    [
        ("e2e4", NormalMove(Square.from_algebraic("e2"), Square.from_algebraic("e4"))),
        (" G8F6 ", NormalMove(Square.from_algebraic("g8"), Square.from_algebraic("f6"))),
        ("O-O", CastleMove(CastlingSide.KING_SIDE)),
        ("0-0", CastleMove(CastlingSide.KING_SIDE)),
        ("o-o-o", CastleMove(CastlingSide.QUEEN_SIDE)),
        ("O-O-O", CastleMove(CastlingSide.QUEEN_SIDE)),
    ],
)
def test_parse_move(text: str, expected: NormalMove | CastleMove) -> None:
    assert parse_move(text) == expected


@pytest.mark.parametrize("text", ["", "e2", "e2e9", "i2e4", "e2-e4", "O-O-", "castle"])
def test_parse_invalid_move(text: str) -> None:
    with pytest.raises(InvalidMoveNotationError):
        parse_move(text)


@pytest.mark.parametrize("text", ["e2e4", "a7a8", "O-O", "O-O-O"])
def test_move_coordinates_roundtrip(text: str) -> None:
    assert parse_move(text).to_coordinates() == text
