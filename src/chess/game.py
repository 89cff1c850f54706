"""
The Game class is the entrypoint into the domain layer for the service layer.
It owns the one authoritative board and everything that goes with it (turn, captures, castling rights, check, status),
and it is the only thing allowed to change them: through `try_move()`.

Answering "does this move leave a king in check?" means generating the moves of every enemy piece on a
hypothetical board. That generation runs with the check filter switched off, so it never asks the question again:
the recursion is exactly two levels deep.
"""

import logging
from enum import Enum, auto
from typing import NamedTuple, Optional, Self

from src.chess.board import Board, MoveBoard
from src.chess.castling import CASTLING_RULES, CastlingSide, rook_castling_side
from src.chess.moves import (
    CANDIDATE_RULES,
    CastleMove,
    Move,
    NormalMove,
    movement_error,
    parse_move,
)
from src.chess.pieces import Color, Piece, PieceKind
from src.chess.square import Square
from src.core.exceptions import (
    CastlingError,
    CollisionError,
    EmptySquareError,
    GameStateError,
    IllegalMoveError,
    OpponentPieceError,
    SelfCheckError,
)
from src.core.models import GameModel

_LOGGER = logging.getLogger(__name__)


class Status(Enum):
    ONGOING = auto()
    CHECKMATE = auto()
    # NOTE: placeholder. Pawn promotion is not implemented, so the game never enters this state.
    PROMOTING = auto()


class PossibleMoves(NamedTuple):
    """Answer to 'where can the piece on this square go?'"""

    board: MoveBoard
    castles: list[CastleMove]


def full_castling_rights() -> dict[Color, set[CastlingSide]]:
    return {color: set(CastlingSide) for color in Color}


def apply_move(board: Board, move: Move, mover: Color) -> Optional[Piece]:
    """Play the move on the given board. Returns the captured piece (if any)."""
    if isinstance(move, CastleMove):
        board.castle(mover, move.side)
        return None
    return board.move_piece(move)


class Game:
    """A game of chess in progress. Everything is readable, but it only changes through `try_move()`."""

    def __init__(self) -> None:
        """A new game in the standard starting position, White to move."""
        self._board = Board.starting_position()
        self._turn = Color.WHITE
        self._captured: list[Piece] = []
        self._castling = full_castling_rights()
        self._check = False
        self._status = Status.ONGOING
        self._checkmated: Optional[Color] = None
        self._moves: list[Move] = []

    @classmethod
    def from_board(
        cls,
        board: Board,
        turn: Color = Color.WHITE,
        castling_rights: Optional[dict[Color, set[CastlingSide]]] = None,
    ) -> Self:
        """
        Start from a custom position (ex. a scratch board in a test).
        Castling rights default to all rights that are still possible given where the kings and rooks stand.
        """
        game = cls()
        game._board = board.copy()
        game._turn = turn
        if castling_rights is None:
            castling_rights = {color: game._plausible_castling_sides(color) for color in Color}
        game._castling = {color: set(castling_rights.get(color, set())) for color in Color}
        game._check = game._king_attacked(game._board, turn)
        return game

    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """
        Define how to construct a Game from the information the Service layer actually has.

        The recorded moves are replayed from the starting position, so a stored game gets validated on the way in.
        """
        game = cls()
        for move_text in model.moves:
            try:
                game.try_move(parse_move(move_text))
            except IllegalMoveError as e:
                raise GameStateError(f"Stored game contains an illegal move {move_text!r}: {e}") from e
        return game

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""
        return GameModel(
            moves=[move.to_coordinates() for move in self._moves],
            status=self._status.name.lower(),
        )

    # --- READ ACCESS ---
    @property
    def board(self) -> Board:
        """A copy: changing it does not change the game."""
        return self._board.copy()

    @property
    def turn(self) -> Color:
        return self._turn

    @property
    def captured(self) -> tuple[Piece, ...]:
        """Captured pieces, oldest first"""
        return tuple(self._captured)

    @property
    def castling_rights(self) -> dict[Color, frozenset[CastlingSide]]:
        return {color: frozenset(sides) for color, sides in self._castling.items()}

    @property
    def check(self) -> bool:
        """Is the player on turn in check?"""
        return self._check

    @property
    def status(self) -> Status:
        return self._status

    @property
    def checkmated(self) -> Optional[Color]:
        """The color that got mated, once the game ended in checkmate."""
        return self._checkmated

    @property
    def winner(self) -> Optional[Color]:
        return self._checkmated.opposite if self._checkmated else None

    @property
    def moves(self) -> tuple[Move, ...]:
        """Accepted moves, oldest first"""
        return tuple(self._moves)

    # --- QUERIES ---
    def possible_moves(self, square: Square, check_filter: bool = True) -> PossibleMoves:
        """
        Every move the piece on the square can make.
        ----

        * check_filter=True: leave out moves that would put (or leave) the mover's own king in check. Use this for anything user facing.
        * check_filter=False: raw geometry and collision rules only. Used to find out what squares a piece attacks.

        Castling is surfaced when asking for the moves of a rook on its home square (only with the check filter on,
        since castling legality itself depends on squares being attacked).

        NOTE: any square can be queried, not just the pieces of the player on turn.
        """
        return self._generate(self._board, square, check_filter)

    def legal_moves(self) -> list[Move]:
        """All legal moves (castling included) for the player on turn."""
        legal: list[Move] = []
        for square in self._board.locate_color(self._turn):
            legal.extend(self._generate(self._board, square, check_filter=True).board.all_moves())
        legal.extend(
            CastleMove(side)
            for side in CastlingSide
            if self._castling_error(self._board, self._turn, side) is None
        )
        return legal

    def check_check(self, move: Move, color: Color) -> bool:
        """
        Would the king of `color` be attacked after playing the move?
        ----

        The move is played on a copy of the board: the game itself is never touched.
        Normal moves are made by whoever owns the piece on the origin square; castling by the player on turn.
        """
        return self._check_check(self._board, move, color, self._mover(move))

    def checkmate_check(self, move: Move, color: Color) -> bool:
        """
        After playing the move, is there no response left for `color` that gets its king out of check?
        ----

        NOTE: only meaningful when `check_check(move, color)` is True. Otherwise a True answer means `color` has no legal move at all.
        """
        return self._checkmate_check(self._board, move, color, self._mover(move))

    # --- THE ONLY MUTATOR ---
    def try_move(self, move: Move) -> None:
        """
        Attempt to make a move for the player on turn.
        -----

        Raises an IllegalMoveError subclass if the move is not allowed. In that case nothing changed, so just try again.

        On success:
        1. the board is updated (and captured pieces are recorded)
        2. castling rights are revoked where needed
        3. check / checkmate status of the opponent is updated
        4. it is the opponent's turn

        NOTE: a move is accepted even when the game already ended in checkmate. Callers need to guard that themselves.
        """
        try:
            if isinstance(move, CastleMove):
                self._try_castle(move)
            else:
                self._try_normal_move(move)
        except IllegalMoveError as e:
            _LOGGER.debug("Rejected %s for %s: %s", move.to_coordinates(), self._turn.value, e)
            raise

    # -- PRIVATE HELPERS ---
    def _mover(self, move: Move) -> Color:
        if isinstance(move, CastleMove):
            return self._turn
        piece = self._board[move.from_square]
        if piece is None:
            raise EmptySquareError(f"There is no piece on {move.from_square}.")
        return piece.color

    def _try_normal_move(self, move: NormalMove) -> None:
        """Validate everything first, only then commit. The order of the checks decides which error you get."""
        player_color = self._turn
        opponent_color = player_color.opposite

        piece = self._board[move.from_square]
        if piece is None:
            raise EmptySquareError(f"There is no piece on {move.from_square}.")
        if piece.color != player_color:
            raise OpponentPieceError(f"The piece on {move.from_square} belongs to {piece.color.value}.")

        error = movement_error(self._board, move.from_square, move.to_square)
        if error is not None:
            raise error

        if self._check_check(self._board, move, player_color, player_color):
            raise SelfCheckError(f"{move.to_coordinates()} leaves your king in check.")

        gives_check = self._check_check(self._board, move, opponent_color, player_color)
        gives_mate = gives_check and self._checkmate_check(self._board, move, opponent_color, player_color)

        # survived the checks? commit.
        captured = self._board.move_piece(move)
        if captured is not None:
            self._captured.append(captured)
        self._revoke_castling_rights_if_needed(piece, move, captured)
        self._finish_turn(move, gives_check, gives_mate)

    def _try_castle(self, move: CastleMove) -> None:
        player_color = self._turn
        opponent_color = player_color.opposite

        error = self._castling_error(self._board, player_color, move.side)
        if error is not None:
            raise error

        gives_check = self._check_check(self._board, move, opponent_color, player_color)
        gives_mate = gives_check and self._checkmate_check(self._board, move, opponent_color, player_color)

        self._board.castle(player_color, move.side)
        self._castling[player_color].clear()
        self._finish_turn(move, gives_check, gives_mate)

    def _finish_turn(self, move: Move, gives_check: bool, gives_mate: bool) -> None:
        player_color = self._turn
        self._moves.append(move)
        self._check = gives_check
        if gives_mate:
            self._status = Status.CHECKMATE
            self._checkmated = player_color.opposite
            _LOGGER.info("%s plays %s: checkmate, %s wins", player_color.value, move.to_coordinates(), player_color.value)
        elif gives_check:
            _LOGGER.info("%s plays %s: check", player_color.value, move.to_coordinates())
        else:
            _LOGGER.info("%s plays %s", player_color.value, move.to_coordinates())
        self._turn = player_color.opposite

    def _revoke_castling_rights_if_needed(self, piece: Piece, move: NormalMove, captured: Optional[Piece]) -> None:
        """
        1. If you are moving your king --> revoke both
        2. If you are moving your rook away from its home square --> revoke that side
        3. If you are taking your opponent's rook on its home square --> revoke that side for your opponent
        """
        if piece.kind == PieceKind.KING:
            self._castling[piece.color].clear()
        elif piece.kind == PieceKind.ROOK:
            side = rook_castling_side(piece.color, move.from_square)
            if side is not None:
                self._castling[piece.color].discard(side)

        if captured is not None and captured.kind == PieceKind.ROOK:
            side = rook_castling_side(captured.color, move.to_square)
            if side is not None:
                self._castling[captured.color].discard(side)

    def _plausible_castling_sides(self, color: Color) -> set[CastlingSide]:
        """Castling sides for which king and rook still stand on their home squares."""
        sides: set[CastlingSide] = set()
        for side in CastlingSide:
            squares = CASTLING_RULES[(color, side)]
            king_home = self._board[squares.king_from] == Piece(PieceKind.KING, color)
            rook_home = self._board[squares.rook_from] == Piece(PieceKind.ROOK, color)
            if king_home and rook_home:
                sides.add(side)
        return sides

    # -- MOVE GENERATION ---
    def _generate(self, board: Board, square: Square, check_filter: bool) -> PossibleMoves:
        piece = board[square]
        if piece is None:
            raise EmptySquareError(f"There is no piece on {square}.")

        candidates = CANDIDATE_RULES[piece.kind](square, board)
        if not check_filter:
            return PossibleMoves(MoveBoard.from_moves(candidates), [])

        # keep those moves that do not put (or leave) you in check
        legal = [
            move
            for move in candidates
            if not self._check_check(board, move, piece.color, piece.color)
        ]

        castles: list[CastleMove] = []
        if piece.kind == PieceKind.ROOK:
            side = rook_castling_side(piece.color, square)
            if side is not None and self._castling_error(board, piece.color, side) is None:
                castles.append(CastleMove(side))

        return PossibleMoves(MoveBoard.from_moves(legal), castles)

    # -- CHECK / CHECKMATE ORACLE ---
    def _king_attacked(self, board: Board, color: Color) -> bool:
        """Can any piece of the other color move onto the square of this color's king?"""
        king_square = board.locate_king(color)
        for square in board.locate_color(color.opposite):
            if king_square in self._generate(board, square, check_filter=False).board:
                return True
        return False

    def _check_check(self, board: Board, move: Move, color: Color, mover: Color) -> bool:
        """Play the move on a clone of the board and see if the king of `color` is under attack."""
        # Taking the king outright counts as an attack: no need to look any further.
        if isinstance(move, NormalMove) and board[move.to_square] == Piece(PieceKind.KING, color):
            return True

        hypothetical = board.copy()
        apply_move(hypothetical, move, mover)
        return self._king_attacked(hypothetical, color)

    def _checkmate_check(self, board: Board, move: Move, color: Color, mover: Color) -> bool:
        """
        Brute force: after the move, try every response of `color`. One that escapes check is enough to say 'no mate'.

        NOTE: castling is never a way out, as you cannot castle out of check.
        """
        hypothetical = board.copy()
        apply_move(hypothetical, move, mover)

        for square in hypothetical.locate_color(color):
            responses = self._generate(hypothetical, square, check_filter=False).board.all_moves()
            for response in responses:
                if not self._check_check(hypothetical, response, color, color):
                    return False
        return True

    # -- CASTLING RULE HELPERS ---
    def _castling_error(self, board: Board, color: Color, side: CastlingSide) -> Optional[IllegalMoveError]:
        """
        **you are allowed to castle if**

        * Castling rights are not yet revoked.
        * Every square in between the king and the rook is empty.
        * You are not currently in check (you cannot castle out of a check).
        * The king does not pass through, or end up on, a square that is under attack.
        """
        if side not in self._castling[color]:
            return CastlingError(f"{color.value} has no right to castle {side.value}.")

        squares = CASTLING_RULES[(color, side)]
        if board[squares.king_from] != Piece(PieceKind.KING, color) or board[squares.rook_from] != Piece(PieceKind.ROOK, color):
            return CastlingError(f"King and rook are not on their home squares for {side.value}.")

        if any(board[square] is not None for square in squares.must_be_empty):
            return CollisionError(f"Cannot castle {side.value}: there are pieces in between king and rook.")

        if self._king_attacked(board, color):
            return CastlingError("Cannot castle out of check.")

        for square in squares.pass_through:
            if self._check_check(board, NormalMove(squares.king_from, square), color, color):
                return CastlingError(f"Cannot castle {side.value}: the king passes through check on {square}.")

        if self._check_check(board, CastleMove(side), color, color):
            return CastlingError(f"Cannot castle {side.value}: the king would end up in check.")

        return None
