"""
Text interface: play a game of chess in the terminal.

Prompt loop: pick a square, see where that piece can go, pick a destination (or O-O / O-O-O), repeat.
Games are stored in the database configured in src/core/config.py, so a game can be resumed by its ID.
"""

import argparse
import logging
from typing import Callable, Optional
from uuid import UUID

from src.api.models import (
    GameResponse,
    GetGameRequest,
    MoveRequest,
    PossibleMovesRequest,
)
from src.core.config import LOG_LEVEL
from src.core.exceptions import GameError
from src.core.shared_types import CastlingSide, Status
from src.db.database import SessionLocal, init_db
from src.db.sql_repository import SQLGameRepository
from src.services.chess_service import ChessService

QUIT_COMMANDS = ("q", "quit", "exit")
FILES = "abcdefgh"

ReadFn = Callable[[str], str]
WriteFn = Callable[[str], None]


def format_board(rows: list[str], reachable: Optional[list[str]] = None) -> str:
    """Rows of glyphs (8th rank first) as a grid. Reachable squares are marked with '#'."""
    reachable = reachable or []
    lines = ["  " + "".join(f" {file.upper()} " for file in FILES)]
    for row_idx, row in enumerate(rows):
        rank = 8 - row_idx
        cells = []
        for file, glyph in zip(FILES, row):
            cells.append(f"[{'#' if f'{file}{rank}' in reachable else glyph}]")
        lines.append(f"{rank} {''.join(cells)}")
    return "\n".join(lines)


def format_status(state: GameResponse) -> str:
    lines = [f"It is {state.turn}'s turn."]
    if state.check:
        lines.append(f"{state.turn} is in check!")
    castles = ", ".join(side.value for side in state.castling_rights.get(state.turn, [])) or "none"
    lines.append(f"Remaining castles for {state.turn}: {castles}")
    lines.append(f"Captured pieces: {' '.join(state.captured) or 'none'}")
    return "\n".join(lines)


def build_move_request(game_id: UUID, from_square: str, answer: str) -> MoveRequest:
    answer = answer.strip()
    for side in CastlingSide:
        if answer.upper().replace("0", "O") == side.value:
            return MoveRequest(game_id=game_id, castle=side)
    return MoveRequest(game_id=game_id, from_square=from_square, to_square=answer)


def play(service: ChessService, game_id: UUID, read: ReadFn = input, write: WriteFn = print) -> GameResponse:
    """Run the prompt loop until checkmate or until the player quits. Returns the last known game state."""
    state = service.get_game_state(GetGameRequest(game_id=game_id))
    write(format_board(state.board))

    while state.status != Status.CHECKMATE:
        write(format_status(state))

        square = read("Which piece do you want to move? (e.g. e2) ").strip().lower()
        if square in QUIT_COMMANDS:
            break
        try:
            possible = service.possible_moves(PossibleMovesRequest(game_id=game_id, square=square))
        except GameError as e:
            write(str(e))
            continue

        write("Possible moves:")
        write(format_board(state.board, possible.destinations))
        if possible.castles:
            write(f"Available castles: {', '.join(side.value for side in possible.castles)}")

        answer = read("Where do you want to move it? (e.g. e4, O-O or O-O-O) ").strip()
        if answer.lower() in QUIT_COMMANDS:
            break
        try:
            state = service.make_move(build_move_request(game_id, square, answer))
        except GameError as e:
            write(f"Move not allowed: {e}")
            continue
        write(format_board(state.board))

    if state.status == Status.CHECKMATE:
        winner = "black" if state.checkmated == "white" else "white"
        write(f"Checkmate! {winner} wins.")
    return state


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="chess-cli", description="Play chess in the terminal.")
    parser.add_argument("--resume", type=UUID, default=None, help="ID of a stored game to continue")
    args = parser.parse_args(argv)

    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    init_db()

    with SessionLocal() as session:
        service = ChessService(SQLGameRepository(session))
        if args.resume is not None:
            game_id = args.resume
        else:
            game_id = service.create_new_game().game_id
            print(f"Started game {game_id}")

        try:
            play(service, game_id)
        except GameError as e:
            print(e)
            return 1
        except (EOFError, KeyboardInterrupt):
            print()
        print(f"Resume this game with: chess-cli --resume {game_id}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
