import os
import datetime
import itertools
import tempfile
import unittest
from contextlib import redirect_stdout
import io

from UI.cli import play_session, prompt_move
from tile_telemetry.core.collaborators import MoveEvaluator, TileGame
from tile_telemetry.core.config import TelemetryConfig
from tile_telemetry.core.moves import Move
from tile_telemetry.persistence import csv_io
from tile_telemetry.persistence.recorder import MoveRecorder


class ScriptedGame(TileGame):
    """
    Fake engine: Right never changes the board, every other move adds 4 points,
    and the game ends after `max_moves` committed moves.
    """
    def __init__(self, max_moves):
        self.tiles = [0] * 14 + [2, 2]
        self.points = 0
        self.moves = 0
        self.max_moves = max_moves

    def board(self):
        return list(self.tiles)

    def can_move(self, move):
        return move is not Move.RIGHT

    def apply_move(self, move):
        self.moves += 1
        self.points += 4
        self.tiles[self.moves] = 2

    def score(self):
        return self.points

    def highest_tile(self):
        return max(self.tiles)

    def is_over(self):
        return self.moves >= self.max_moves


class FixedEvaluator(MoveEvaluator):
    def score_moves(self, game):
        return [100.0, 50.0, 95.0, -1.0]


class TestPlaySession(unittest.TestCase):
    """
    Tests for the interactive loop: illegal and unknown inputs are not recorded, every
    committed move is, and the session is saved at game end.
    """

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.config = TelemetryConfig(data_dir=self._tmp.name)
        start = datetime.datetime(2024, 3, 9, 14, 5, 0, tzinfo=datetime.timezone.utc)
        ticks = itertools.count()
        self.recorder = MoveRecorder(clock=lambda: start + datetime.timedelta(seconds=next(ticks)))
        times = itertools.count(step=0.5)
        self.timer = lambda: next(times)

    def tearDown(self):
        self._tmp.cleanup()

    def _play(self, keys, max_moves):
        inputs = iter(keys)
        with redirect_stdout(io.StringIO()):
            return play_session(ScriptedGame(max_moves), FixedEvaluator(), self.config,
                                read_input=lambda prompt: next(inputs), timer=self.timer,
                                recorder=self.recorder)

    def test_full_game_is_recorded(self):
        result = self._play(["w", "x", "d", "s", "a"], max_moves=3)
        self.assertTrue(result.ok)
        events = csv_io.read_move_events(result.moves_path)
        self.assertEqual([e.move_chosen for e in events], ["Up", "Down", "Left"])
        self.assertEqual([e.move_number for e in events], [1, 2, 3])
        self.assertEqual([e.game_score for e in events], [0, 4, 8])
        self.assertEqual([e.is_bad_move for e in events], [False, True, False])
        self.assertEqual(result.summary.final_score, 12)
        self.assertEqual(result.summary.bad_moves, 1)
        # each prompt spans one timer tick of 0.5s
        self.assertEqual(events[0].time_taken_ms, 500)

    def test_quit_saves_partial_session(self):
        result = self._play(["w", "q"], max_moves=10)
        self.assertTrue(result.ok)
        self.assertEqual(result.summary.total_moves, 1)
        self.assertTrue(os.path.exists(self.config.ledger_path()))


class TestPromptMove(unittest.TestCase):
    def test_end_of_input_quits(self):
        def closed(prompt):
            raise EOFError
        self.assertIsNone(prompt_move(closed))

    def test_retries_until_valid(self):
        inputs = iter(["", "up", "A"])
        with redirect_stdout(io.StringIO()):
            self.assertIs(prompt_move(lambda prompt: next(inputs)), Move.LEFT)


if __name__ == '__main__':
    unittest.main()
