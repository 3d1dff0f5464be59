"""
moves.py
Defines the Move type: the four slide directions a player can choose on the tile board.
Moves are always enumerated in the fixed order Up, Down, Left, Right, which is also the
order of the candidate score vector produced by a MoveEvaluator.
Related modules:
- scoring.py: Indexes candidate scores with Move.index.
- events.py: Stores Move.label in the detailed log.
"""

from enum import Enum
from typing import Union


class Move(Enum):
    """
    One of the four slide directions. The value is the label written to the detailed log.
    """
    UP = "Up"
    DOWN = "Down"
    LEFT = "Left"
    RIGHT = "Right"

    @property
    def label(self) -> str:
        return self.value

    @property
    def index(self) -> int:
        """Position of this direction in a candidate score vector."""
        return MOVE_ORDER.index(self)

    @classmethod
    def parse(cls, value: Union["Move", str]) -> "Move":
        """
        Resolve a Move from a Move instance or a label (case-insensitive, e.g. 'left').
        Raises:
            ValueError: If the label is not one of the four directions.
        """
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        for move in cls:
            if move.value.lower() == text:
                return move
        raise ValueError(f"Unknown move: {value!r}")


# canonical enumeration order, shared by score vectors and reports
MOVE_ORDER = (Move.UP, Move.DOWN, Move.LEFT, Move.RIGHT)

# keyboard bindings used by the interactive loop
KEY_BINDINGS = {
    "w": Move.UP,
    "a": Move.LEFT,
    "s": Move.DOWN,
    "d": Move.RIGHT,
}
