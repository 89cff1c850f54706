"""
Type definitions used across layers (API, service, database)
"""

from enum import StrEnum

# --- NOTE The domain layer has its own Color / CastlingSide enums (src/chess). These string versions are the ones
# --- that travel across the boundary. Same names on purpose: the imports show which versions are used where.


class Status(StrEnum):
    ONGOING = "ongoing"
    CHECKMATE = "checkmate"
    PROMOTING = "promoting"


class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"


class CastlingSide(StrEnum):
    KING_SIDE = "O-O"
    QUEEN_SIDE = "O-O-O"
