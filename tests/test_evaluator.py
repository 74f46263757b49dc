"""
Tests for the engine-backed position evaluator.
"""

import chess
import pytest

from chess_uci import Fish, InvalidArgument, SessionConfig
from chess_uci.analysis import EngineEvaluator, Evaluation
from tests.conftest import ScriptedProcess

START_FEN = chess.STARTING_FEN
MATE_FEN = "6k1/5ppp/8/8/8/8/5PPP/4Q1K1 w - - 0 1"


@pytest.fixture
def evaluator():
    """Evaluator over a scripted engine with canned search output."""
    process = ScriptedProcess(
        responses={
            "go depth 3": [
                "info depth 1 score cp 10 nodes 5 pv e2e4\n",
                "info depth 3 multipv 1 score cp 35 nodes 80 pv e2e4 e7e5\n"
                "info depth 3 multipv 2 score cp -20 nodes 80 pv a2a3\n",
                "bestmove e2e4 ponder e7e5\n",
            ],
        },
    )
    fish = Fish("engine", config=SessionConfig(line_separator="\n"), process=process)
    return EngineEvaluator(fish, depth=3)


class TestEvaluation:
    """Test Evaluation dataclass."""

    def test_centipawn_evaluation(self):
        evaluation = Evaluation(centipawn_score=150, mate_in=None, depth=10, nodes=1000)

        assert not evaluation.is_mate
        assert evaluation.to_centipawns() == 150

    def test_mate_evaluation_positive(self):
        evaluation = Evaluation(centipawn_score=None, mate_in=3, depth=10, nodes=1000)

        assert evaluation.is_mate
        assert evaluation.to_centipawns() == 10000

    def test_mate_evaluation_negative(self):
        evaluation = Evaluation(centipawn_score=None, mate_in=-2, depth=10, nodes=1000)

        assert evaluation.to_centipawns() == -10000

    def test_clamping(self):
        evaluation = Evaluation(centipawn_score=-15000, mate_in=None, depth=10, nodes=1000)

        assert evaluation.to_centipawns(clamp=5000) == -5000


class TestEngineEvaluator:
    """Test EngineEvaluator against a scripted engine."""

    def test_sends_position_and_go(self, evaluator):
        evaluator.evaluate_position(chess.Board())

        assert evaluator.session.process.written[-2:] == [
            f"position fen {START_FEN}",
            "go depth 3",
        ]

    def test_uses_principal_line(self, evaluator):
        evaluation = evaluator.evaluate_position(START_FEN)

        assert evaluation.centipawn_score == 35
        assert evaluation.mate_in is None
        assert evaluation.depth == 3
        assert evaluation.nodes == 80
        assert evaluation.best_move == "e2e4"

    def test_mate_score(self):
        process = ScriptedProcess(
            responses={"go depth 2": ["info depth 2 score mate 1 nodes 40 pv e1e8\nbestmove e1e8\n"]}
        )
        fish = Fish("engine", config=SessionConfig(line_separator="\n"), process=process)

        evaluation = EngineEvaluator(fish, depth=2).evaluate_position(MATE_FEN)

        assert evaluation.is_mate
        assert evaluation.mate_in == 1
        assert evaluation.best_move == "e1e8"

    def test_no_reply(self):
        fish = Fish("engine", config=SessionConfig(line_separator="\n"), process=ScriptedProcess())

        evaluation = EngineEvaluator(fish, depth=2).evaluate_position(START_FEN)

        assert evaluation.centipawn_score is None
        assert evaluation.best_move is None
        assert evaluation.to_centipawns() == 0

    def test_batch(self, evaluator):
        evaluations = evaluator.evaluate_batch([chess.Board(), START_FEN])

        assert len(evaluations) == 2
        assert all(isinstance(e, Evaluation) for e in evaluations)

    def test_invalid_depth(self, evaluator):
        with pytest.raises(InvalidArgument):
            EngineEvaluator(evaluator.session, depth=0)
