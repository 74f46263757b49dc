"""
End-to-end Tests

Drive a Fish session against a real subprocess: the fake engine script
from conftest, and Stockfish when it is installed.
"""

import time

import chess
import pytest

from chess_uci import Fish, LaunchError, SessionClosedError, SessionState, UCIError, find_engine
from chess_uci.analysis import EngineEvaluator


@pytest.fixture
def session(fake_engine_config):
    """Session with the fake engine, quit after the test."""
    with Fish(config=fake_engine_config) as fish:
        yield fish


@pytest.fixture
def stockfish():
    """Session with a real Stockfish, skipped when none is installed."""
    try:
        path = find_engine()
    except LaunchError:
        pytest.skip("Stockfish not installed")
    with Fish(path) as fish:
        yield fish


class TestFakeEngine:
    """Protocol exchange with the fake engine."""

    def test_banner_in_log(self, session):
        assert session.log[0] == "FakeFish 1.0 by the chess_uci test suite"

    def test_handshake(self, session):
        session.uci()

        assert session.info.name == "FakeFish 1.0"
        assert session.info.uciok
        assert list(session.info.options) == ["Hash", "Clear Hash", "Style"]
        assert session.info.options["Style"].vars == ["Solid", "Normal", "Risky"]
        assert session.output[-1] == "uciok"

        assert session.is_ready()

    def test_structured_commands_reach_engine(self, session):
        session.set_option("Threads", "4")
        assert session.output == ["info string received setoption name Threads value 4"]

        session.set_option("Clear Hash")
        assert session.output == ["info string received setoption name Clear Hash"]

        session.position(kind="startpos", moves=["e2e4"])
        assert session.output == ["info string received position startpos moves e2e4"]

    def test_new_game(self, session):
        session.new_game()
        assert session.output == ["readyok"]

    def test_bounded_search(self, session):
        session.position(kind="startpos")
        best = session.go(depth=5)

        assert best == "bestmove e2e4 ponder e7e5"
        assert session.output == [
            "info depth 5 seldepth 7 score cp 25 nodes 1000 nps 50000 pv e2e4 e7e5",
            "bestmove e2e4 ponder e7e5",
        ]

    def test_infinite_search_then_stop(self, session, fake_engine_config):
        session.position(kind="startpos")
        output_before = list(session.output)

        start = time.time()
        assert session.go(infinite=True) is None
        assert time.time() - start < fake_engine_config.poll_timeout_ms / 1000.0
        assert session.output == output_before

        assert session.stop() == "bestmove d2d4"
        assert "info depth 1 score cp 10 nodes 20 pv e2e4" in session.output
        assert session.best_move().move == "d2d4"

    def test_stop_with_delayed_bestmove(self, session, fake_engine_config):
        # Reply lands after 100ms, inside the first poll window
        session.set_option("StopDelay", 100)
        session.position(kind="startpos")
        assert session.go(infinite=True) is None

        start = time.time()
        assert session.stop() == "bestmove d2d4"
        assert time.time() - start >= 0.1
        assert session.output[-2] == "info depth 3 score cp 15 nodes 300 pv d2d4"
        assert session.best_move().move == "d2d4"

    def test_quit(self, session):
        session.quit()

        assert session.state is SessionState.TERMINATED
        assert not session.process.is_alive()
        with pytest.raises(SessionClosedError):
            session.is_ready()

    def test_engine_crash_ends_session(self, session):
        session.run("crash")
        deadline = time.time() + 5.0
        while session.process.is_alive() and time.time() < deadline:
            time.sleep(0.02)

        with pytest.raises(UCIError):
            session.is_ready()

        assert session.state is SessionState.TERMINATED

    def test_evaluator(self, session):
        evaluation = EngineEvaluator(session, depth=5).evaluate_position(chess.Board())

        assert evaluation.centipawn_score == 25
        assert evaluation.depth == 5
        assert evaluation.nodes == 1000
        assert evaluation.best_move == "e2e4"


class TestStockfish:
    """Smoke tests against a real Stockfish."""

    def test_handshake(self, stockfish):
        stockfish.uci()

        assert stockfish.info.uciok
        assert "Threads" in stockfish.info.options
        assert stockfish.is_ready()

    def test_search(self, stockfish):
        stockfish.new_game()
        stockfish.position(kind="startpos", moves=["e2e4"])
        best = stockfish.go(depth=8)

        assert best.startswith("bestmove ")
        move = chess.Move.from_uci(stockfish.best_move().move)
        board = chess.Board()
        board.push_uci("e2e4")
        assert move in board.legal_moves

    def test_mate_in_one(self, stockfish):
        evaluation = EngineEvaluator(stockfish, depth=10).evaluate_position(
            "6k1/5ppp/8/8/8/8/5PPP/4Q1K1 w - - 0 1"
        )

        assert evaluation.is_mate
        assert evaluation.mate_in > 0
        assert evaluation.best_move == "e1e8"
