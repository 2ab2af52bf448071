"""
Exceptions raised by the Deadblock engine.

Only integration errors are exceptions. Running out of search time and having
no legal move are normal outcomes and are reported through return values.
"""


class DeadblockError(ValueError):
    """Base class for engine errors."""


class UnknownShapeIdentifier(DeadblockError):
    """A shape id outside the fixed 12-piece catalog was supplied."""

    def __init__(self, shape_id):
        self.shape_id = shape_id
        super().__init__(f"Unknown shape identifier: {shape_id!r}")


class InvalidBoardDimensions(DeadblockError):
    """The supplied grid is not SIZE x SIZE."""

    def __init__(self, shape, expected: int):
        self.shape = shape
        self.expected = expected
        super().__init__(f"Board must be {expected}x{expected}, got {shape}")


class IllegalMoveError(DeadblockError):
    """A placement overlaps, leaves the board, or reuses a consumed shape."""
