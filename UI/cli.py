"""
Terminal game loop for a human player with AI move scoring.
The game engine and the evaluator are supplied by the caller (see core/collaborators.py); this module
only handles input, timing, the AI analysis display and the telemetry recording.

    from UI.cli import play_session
    play_session(MyEngine(), MyExpectimax(), TelemetryConfig(data_dir="data"))
"""
import time
from typing import Callable, List, Optional

from tile_telemetry.core.board import format_board
from tile_telemetry.core.collaborators import MoveEvaluator, TileGame
from tile_telemetry.core.config import TelemetryConfig
from tile_telemetry.core.moves import KEY_BINDINGS, MOVE_ORDER, Move
from tile_telemetry.core.scoring import SENTINEL_SCORE, classify_difficulty, valid_dispersion
from tile_telemetry.persistence.finalizer import SaveResult, SessionFinalizer
from tile_telemetry.persistence.recorder import MoveRecorder

QUIT_WORDS = ("q", "quit", "exit")


def print_state(game: TileGame, move_number: int):
    """
    Print the move counter, the score and the board.
    """
    print(f"Move #{move_number} | Score: {game.score()}")
    print(format_board(game.board()))


def display_ai_analysis(scores: List[float]):
    """
    Print the legal moves ranked by evaluator score, with the decision difficulty.
    Args:
        scores (list[float]): [Up, Down, Left, Right] scores, SENTINEL_SCORE for illegal directions.
    """
    valid = [(move, score) for move, score in zip(MOVE_ORDER, scores) if score != SENTINEL_SCORE]
    if not valid:
        print("No valid moves available!")
        return
    valid.sort(key=lambda item: item[1], reverse=True)
    print("AI Analysis:")
    for rank, (move, score) in enumerate(valid):
        marker = "*" if rank == 0 else " "
        tag = "BEST" if rank == 0 else "    "
        print(f"  {marker}{move.label}: {score:.1f} ({tag})")
    print(f"  Decision difficulty: {classify_difficulty(scores)} (variation: {valid_dispersion(scores):.1f})")
    print()


def prompt_move(read_input: Callable[[str], str] = input) -> Optional[Move]:
    """
    Ask for W/A/S/D until a valid key is entered.
    Returns:
        Move or None: The chosen move, or None if the player quits (Q or end of input).
    """
    while True:
        try:
            text = read_input("Your move (WASD or Q to quit): ")
        except EOFError:
            return None
        key = text.strip().lower()
        if key in KEY_BINDINGS:
            return KEY_BINDINGS[key]
        if key in QUIT_WORDS:
            return None
        print("Invalid input! Use W/A/S/D for moves or Q to quit.")


def play_session(game: TileGame, evaluator: MoveEvaluator, config: Optional[TelemetryConfig] = None,
                 read_input: Callable[[str], str] = input,
                 timer: Callable[[], float] = time.perf_counter,
                 recorder: Optional[MoveRecorder] = None) -> SaveResult:
    """
    Play one game in the terminal, recording every committed move, then save the session.
    Args:
        game (TileGame): Running game engine.
        evaluator (MoveEvaluator): Scores the four directions before each move.
        config (TelemetryConfig, optional): Where to write the sinks.
        read_input: Input function (defaults to input()).
        timer: Monotonic clock in seconds used to time decisions.
        recorder (MoveRecorder, optional): Recorder to use; a new one is created if omitted.
    Returns:
        SaveResult: Outcome of the session save.
    """
    recorder = recorder or MoveRecorder()
    finalizer = SessionFinalizer(recorder, config)
    move_number = 1

    print("=== 2048 Human Player with AI Scoring ===")
    print("Use WASD keys to move (W = Up, A = Left, S = Down, D = Right, Q = Quit)")
    print(f"Session ID: {recorder.session_id}")
    print("Starting game...\n")

    while not game.is_over():
        print_state(game, move_number)
        scores = evaluator.score_moves(game)
        display_ai_analysis(scores)

        start = timer()
        move = prompt_move(read_input)
        if move is None:
            print("Quitting game...")
            break
        time_taken_ms = int((timer() - start) * 1000)

        if not game.can_move(move):
            print("Invalid move! Try again.")
            continue

        recorder.record_move(game.board(), move, time_taken_ms, scores, game.score(), move_number)
        game.apply_move(move)
        move_number += 1
        print(f"Move made in {time_taken_ms / 1000.0:.2f}s\n")

    final_score = game.score()
    highest_tile = game.highest_tile()
    print("\n=== GAME OVER ===")
    print(f"Final Score: {final_score}")
    print(f"Highest Tile: {highest_tile}")
    print(f"Total Moves: {move_number - 1}")
    print_state(game, move_number)

    result = finalizer.save_session(final_score, highest_tile)
    if result.ok:
        print("Game data saved successfully!")
        print(f"Data saved to {result.moves_path} and {result.ledger_path}")
    else:
        print(f"Error saving game data ({result.failed_step.value}): {result.error}")
    return result
