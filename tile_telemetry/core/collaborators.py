"""
collaborators.py
Abstract interfaces for the external game engine and move evaluator.
The telemetry pipeline never implements game rules or search; the interactive loop in UI/cli.py
drives whatever engine and evaluator are plugged in through these classes.
"""

from abc import ABC, abstractmethod
from typing import List

from .board import BoardLike
from .moves import Move


class TileGame(ABC):
    """
    Minimal view of a running tile-merging game.
    """

    @abstractmethod
    def board(self) -> BoardLike:
        """Current board (BoardState, flat 16-value sequence or 4x4 grid)."""
        raise NotImplementedError

    @abstractmethod
    def can_move(self, move: Move) -> bool:
        """True if sliding in this direction changes the board."""
        raise NotImplementedError

    @abstractmethod
    def apply_move(self, move: Move) -> None:
        """Slide, merge and spawn a new tile."""
        raise NotImplementedError

    @abstractmethod
    def score(self) -> int:
        raise NotImplementedError

    @abstractmethod
    def highest_tile(self) -> int:
        raise NotImplementedError

    @abstractmethod
    def is_over(self) -> bool:
        raise NotImplementedError


class MoveEvaluator(ABC):
    """
    Scores the four candidate directions of the current position.
    """

    @abstractmethod
    def score_moves(self, game: TileGame) -> List[float]:
        """
        Return [Up, Down, Left, Right] scores; a direction that does not change the board
        must be scored with scoring.SENTINEL_SCORE.
        """
        raise NotImplementedError
