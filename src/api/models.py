"""Requests and Response models"""

from typing import Optional, Self
from uuid import UUID

from pydantic import BaseModel, field_validator, model_validator

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import CastlingSide, Color, Status


def _is_algebraic_notation(value: str) -> bool:
    if len(value) != 2:
        return False
    return ("a" <= value[0] <= "h") and ("1" <= value[1] <= "8")


# --- REQUEST MODELS ---
class GetGameRequest(BaseModel):
    game_id: UUID


class DeleteGameRequest(BaseModel):
    game_id: UUID


class PossibleMovesRequest(BaseModel):
    game_id: UUID
    square: str

    @field_validator("square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        value = value.strip().lower()
        if not _is_algebraic_notation(value):
            raise InvalidRequestError(f"Cannot interpret square: {value!r} as a valid square name.")
        return value


class MoveRequest(BaseModel):
    """Either a castle, or a move from one square to another."""

    game_id: UUID
    from_square: Optional[str] = None
    to_square: Optional[str] = None
    castle: Optional[CastlingSide] = None

    @field_validator(*["from_square", "to_square"])
    @classmethod
    def validate_square(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip().lower()
        if not _is_algebraic_notation(value):
            raise InvalidRequestError(f"Cannot interpret square: {value!r} as a valid square name.")
        return value

    @model_validator(mode="after")
    def validate_move_kind(self) -> Self:
        has_squares = self.from_square is not None and self.to_square is not None
        has_any_square = self.from_square is not None or self.to_square is not None
        if self.castle is not None and has_any_square:
            raise InvalidRequestError("A castling move cannot also name squares.")
        if self.castle is None and not has_squares:
            raise InvalidRequestError("Name both from_square and to_square, or a castling side.")
        return self

    def to_coordinates(self) -> str:
        """'e2e4', 'O-O' or 'O-O-O'"""
        if self.castle is not None:
            return self.castle.value
        return f"{self.from_square}{self.to_square}"


# --- RESPONSE MODELS ---
class GameResponse(BaseModel):
    game_id: UUID
    board: list[str]  # one row of glyphs per rank, 8th rank first
    turn: Color
    captured: list[str]
    castling_rights: dict[Color, list[CastlingSide]]
    check: bool
    status: Status
    checkmated: Optional[Color]
    move_history: list[str]


class PossibleMovesResponse(BaseModel):
    game_id: UUID
    square: str
    destinations: list[str]
    castles: list[CastlingSide]
