"""
board.py
Board-state accessor consumed by the recorder. The game engine owns the real board; the
telemetry layer only ever needs the flattened 4x4 grid of tile values.
Related modules:
- recorder.py: Calls flatten_board() before building a MoveEvent.
- collaborators.py: TileGame.board() returns a BoardState or a plain tile sequence.
"""

from abc import ABC, abstractmethod
from typing import List, Sequence, Union

BOARD_SIZE = 4
CELL_COUNT = BOARD_SIZE * BOARD_SIZE


class BoardState(ABC):
    """
    Abstract accessor for a 4x4 board. Engines wrap their own representation
    (bit-packed integers, numpy arrays, ...) and expose the tile values row by row.
    """

    @abstractmethod
    def to_vec(self) -> List[int]:
        """
        Return the 16 tile values in row-major order (0 for an empty cell).
        """
        raise NotImplementedError

    def highest_tile(self) -> int:
        return max(self.to_vec())

    def to_str(self) -> str:
        return format_board(self.to_vec())


class GridBoard(BoardState):
    """
    Plain list-backed board, used by tests and by engines that already keep a flat list.
    """
    def __init__(self, tiles: Sequence[int]):
        self._tiles = flatten_board(tiles)

    def to_vec(self) -> List[int]:
        return list(self._tiles)

    def __repr__(self):
        return f"GridBoard({self._tiles!r})"


BoardLike = Union[BoardState, Sequence[int], Sequence[Sequence[int]]]


def flatten_board(board: BoardLike) -> List[int]:
    """
    Normalize a board to a flat list of 16 ints.
    Args:
        board: A BoardState, a flat sequence of 16 values or a 4x4 nested grid.
    Returns:
        list[int]: Tile values in row-major order.
    Raises:
        ValueError: If the board does not hold exactly 16 cells.
    """
    if isinstance(board, BoardState):
        tiles = list(board.to_vec())
    else:
        tiles = []
        for cell in board:
            if isinstance(cell, (list, tuple)):
                tiles.extend(cell)
            else:
                tiles.append(cell)
    if len(tiles) != CELL_COUNT:
        raise ValueError(f"Board must have {CELL_COUNT} cells, got {len(tiles)}")
    return [int(t) for t in tiles]


def board_to_string(board: BoardLike) -> str:
    """Serialize a board as the comma-joined tile values stored in the detailed log."""
    return ",".join(str(t) for t in flatten_board(board))


def board_from_string(text: str) -> List[int]:
    """Inverse of board_to_string()."""
    return flatten_board([int(part) for part in text.split(",")])


def format_board(board: BoardLike) -> str:
    """Render the grid for the terminal, one row per line."""
    tiles = flatten_board(board)
    width = max(len(str(t)) for t in tiles)
    rows = []
    for r in range(BOARD_SIZE):
        row = tiles[r * BOARD_SIZE:(r + 1) * BOARD_SIZE]
        rows.append(" ".join(("." if t == 0 else str(t)).rjust(width) for t in row))
    return "\n".join(rows)
