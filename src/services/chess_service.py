"""Orchestration of communication from API layer to business logic and persistence layers (and the reverse direction)."""

import logging
from uuid import UUID

from src.api.models import (
    DeleteGameRequest,
    GameResponse,
    GetGameRequest,
    MoveRequest,
    PossibleMovesRequest,
    PossibleMovesResponse,
)
from src.chess.game import Game, Status
from src.chess.moves import parse_move
from src.chess.square import Square
from src.core.exceptions import GameStateError, RepositoryError
from src.core.models import GameModel
from src.core.shared_types import CastlingSide, Color
from src.db.repository import GameRepository

_LOGGER = logging.getLogger(__name__)


class ChessService:
    """Orchestration of layers for chess game."""

    def __init__(self, repository: GameRepository) -> None:
        self.repo = repository

    # -- API logic ---
    def create_new_game(self) -> GameResponse:
        """Start a game in the standard starting position."""
        new_game = Game()
        stored_game, game_id = self.repo.create_game(new_game.to_model())
        _LOGGER.info("Created game %s", game_id)
        return self._create_game_response(game_id, Game.from_model(stored_game))

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        """Retrieve current game state."""
        game = self._load_game(request.game_id)
        return self._create_game_response(request.game_id, game)

    def possible_moves(self, request: PossibleMovesRequest) -> PossibleMovesResponse:
        """Where can the piece on the requested square go? (Moves leaving your own king in check are left out.)"""
        game = self._load_game(request.game_id)
        possible = game.possible_moves(Square.from_algebraic(request.square))
        return PossibleMovesResponse(
            game_id=request.game_id,
            square=request.square,
            destinations=sorted(square.to_algebraic() for square in possible.board.destinations()),
            castles=[CastlingSide(castle.side.value) for castle in possible.castles],
        )

    def make_move(self, request: MoveRequest) -> GameResponse:
        """
        Make a move attempt.

        NOTE: The Game keeps accepting moves after checkmate, so guarding the end of the game is done here.
        """
        game = self._load_game(request.game_id)
        if game.status == Status.CHECKMATE:
            raise GameStateError(f"Game {request.game_id} is over: checkmate.")

        # Attempt the move (raises if illegal, in which case nothing gets stored)
        game.try_move(parse_move(request.to_coordinates()))

        self.repo.update_game(request.game_id, game.to_model())
        return self._create_game_response(request.game_id, game)

    def delete_game(self, request: DeleteGameRequest) -> None:
        """Handle a request to delete a Game record."""
        self.repo.delete_game(request.game_id)
        _LOGGER.info("Deleted game %s", request.game_id)

    # -- Internal helpers --
    def _create_game_response(self, game_id: UUID, game: Game) -> GameResponse:
        """Convert the state of the Game into a GameResponse"""
        return GameResponse(
            game_id=game_id,
            board=game.board.render(),
            turn=Color(game.turn.value),
            captured=[piece.to_symbol() for piece in game.captured],
            castling_rights={
                Color(color.value): sorted(CastlingSide(side.value) for side in sides)
                for color, sides in game.castling_rights.items()
            },
            check=game.check,
            status=game.status.name.lower(),
            checkmated=Color(game.checkmated.value) if game.checkmated else None,
            move_history=[move.to_coordinates() for move in game.moves],
        )

    def _load_game(self, game_id: UUID) -> Game:
        """Attempt to find the game in the repository (raise error if it fails), then rebuild it."""
        return Game.from_model(self._fetch_game(game_id))

    def _fetch_game(self, game_id: UUID) -> GameModel:
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return game_model
