import math
import unittest

from tile_telemetry.core.moves import Move
from tile_telemetry.core import scoring


class TestScoring(unittest.TestCase):
    """
    Tests for the per-move derivation rules: best score fold, chosen score, dispersion,
    the 10% bad-move rule and the difficulty classes.
    """

    def test_best_chosen_and_bad_move(self):
        scores = [10.0, 20.0, 5.0, -1.0]
        best = scoring.best_score(scores)
        chosen = scoring.chosen_score(scores, Move.LEFT)
        self.assertEqual(best, 20.0)
        self.assertEqual(chosen, 5.0)
        self.assertTrue(scoring.is_bad_move(best, chosen))

    def test_all_sentinels_never_bad(self):
        scores = [-1.0, -1.0, -1.0, -1.0]
        best = scoring.best_score(scores)
        self.assertEqual(best, scoring.SENTINEL_SCORE)
        for move in Move:
            self.assertFalse(scoring.is_bad_move(best, scoring.chosen_score(scores, move)))

    def test_threshold_is_strict(self):
        # exactly 10% loss is not bad, anything above is
        self.assertFalse(scoring.is_bad_move(100.0, 90.0))
        self.assertTrue(scoring.is_bad_move(100.0, 89.0))

    def test_best_score_skips_nan(self):
        self.assertEqual(scoring.best_score([float("nan"), 3.0, -1.0, 2.0]), 3.0)
        self.assertEqual(scoring.best_score([float("nan")] * 4), scoring.SENTINEL_SCORE)

    def test_dispersion_includes_sentinels(self):
        # mean 8.5, deviations 1.5, 11.5, -3.5, -9.5
        expected = math.sqrt((1.5 ** 2 + 11.5 ** 2 + 3.5 ** 2 + 9.5 ** 2) / 4)
        self.assertAlmostEqual(scoring.dispersion([10.0, 20.0, 5.0, -1.0]), expected)
        self.assertEqual(scoring.dispersion([7.0, 7.0, 7.0, 7.0]), 0.0)

    def test_valid_dispersion_ignores_sentinels(self):
        self.assertAlmostEqual(scoring.valid_dispersion([10.0, -1.0, 30.0, -1.0]), 10.0)
        self.assertIsNone(scoring.valid_dispersion([-1.0] * 4))

    def test_classify_difficulty(self):
        self.assertEqual(scoring.classify_difficulty([100.0, 120.0, -1.0, -1.0]), "EASY")
        self.assertEqual(scoring.classify_difficulty([100.0, 300.0, -1.0, -1.0]), "MEDIUM")
        self.assertEqual(scoring.classify_difficulty([100.0, 900.0, -1.0, -1.0]), "HARD")
        self.assertEqual(scoring.classify_difficulty([-1.0] * 4), "NONE")

    def test_check_scores_requires_four_values(self):
        with self.assertRaises(ValueError):
            scoring.check_scores([1.0, 2.0, 3.0])


class TestMove(unittest.TestCase):
    def test_fixed_order_and_index(self):
        self.assertEqual([m.index for m in (Move.UP, Move.DOWN, Move.LEFT, Move.RIGHT)], [0, 1, 2, 3])

    def test_parse_labels(self):
        self.assertIs(Move.parse("left"), Move.LEFT)
        self.assertIs(Move.parse("Right"), Move.RIGHT)
        self.assertIs(Move.parse(Move.UP), Move.UP)
        with self.assertRaises(ValueError):
            Move.parse("diagonal")


if __name__ == '__main__':
    unittest.main()
