"""
plots.py
Charts for the session analyzer. Always renders with the non-interactive Agg backend.
"""

from typing import Sequence

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt


def plot_good_move_trend(trend: Sequence[float], window: int, out_path: str) -> None:
    """
    Save a line chart of the rolling good-move percentage.
    Args:
        trend: One percentage per window end, as returned by good_move_trend().
        window (int): Window size, used for the x offset and the title.
        out_path (str): PNG destination.
    """
    xs = list(range(window, window + len(trend)))
    plt.figure(figsize=(8, 4))
    plt.plot(xs, list(trend), color='C0')
    plt.xlabel('Move number')
    plt.ylabel('Good move percentage (%)')
    plt.ylim(0, 100)
    plt.title(f'Good moves per {window}-move window')
    plt.tight_layout()
    plt.savefig(out_path)
    plt.close()
