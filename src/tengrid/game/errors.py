from __future__ import annotations


class TenGridError(Exception):
    """Base class for engine errors."""


class OutOfBoundsError(TenGridError, IndexError):
    def __init__(self, row: int, col: int, size: int) -> None:
        super().__init__(f"cell ({row}, {col}) is outside a {size}x{size} board")
        self.row = row
        self.col = col
        self.size = size


class MalformedPieceError(TenGridError, ValueError):
    """Raised when a shape definition is ragged, empty or badly tagged."""
