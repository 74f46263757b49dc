"""
Position evaluation through a UCI session.

Runs a fixed-depth search on each position and reads the score from the
engine's 'info' lines, giving a quick way to label positions with an
engine's opinion.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Union

import chess

from chess_uci.errors import InvalidArgument
from chess_uci.session.fish import Fish
from chess_uci.session.parsing import clamp_score, parse_bestmove, parse_info

logger = logging.getLogger(__name__)


@dataclass
class Evaluation:
    """Evaluation result from the engine."""

    centipawn_score: Optional[int]  # None if mate score
    mate_in: Optional[int]  # None if centipawn score
    depth: int
    nodes: int
    best_move: Optional[str] = None

    @property
    def is_mate(self) -> bool:
        """Check if evaluation is a mate score."""
        return self.mate_in is not None

    def to_centipawns(self, clamp: int = 10000) -> int:
        """Clamped centipawn score; 0 when the engine reported none."""
        score = clamp_score(self.centipawn_score, self.mate_in, clamp)
        return 0 if score is None else score


class EngineEvaluator:
    """Evaluate positions with the engine behind a session."""

    def __init__(self, session: Fish, depth: int = 15):
        """
        Args:
            session: Running UCI session
            depth: Search depth for each evaluation
        """
        if depth <= 0:
            raise InvalidArgument(f"depth must be positive, got {depth}")

        self.session = session
        self.depth = depth

    def evaluate_position(self, position: Union[chess.Board, str]) -> Evaluation:
        """
        Evaluate a single position.

        Args:
            position: Board or FEN string

        Returns:
            Evaluation with the deepest score reported and the best move
        """
        fen = position.fen() if isinstance(position, chess.Board) else position

        self.session.position(fen, kind="fen")
        last_line = self.session.go(depth=self.depth)

        centipawn_score = None
        mate_in = None
        depth = 0
        nodes = 0

        for line in self.session.output:
            info = parse_info(line)
            if info is None or not info.has_score:
                continue
            # Multi-PV lines other than the principal one describe weaker moves
            if info.multipv not in (None, 1):
                continue
            if info.depth is not None:
                depth = info.depth
            if info.nodes is not None:
                nodes = info.nodes
            centipawn_score = info.centipawns
            mate_in = info.mate_in

        best = parse_bestmove(last_line)
        if best is None:
            logger.warning(f"No bestmove in reply for {fen}")

        return Evaluation(
            centipawn_score=centipawn_score,
            mate_in=mate_in,
            depth=depth,
            nodes=nodes,
            best_move=best.move if best else None,
        )

    def evaluate_batch(self, positions: Iterable[Union[chess.Board, str]]) -> List[Evaluation]:
        """
        Evaluate multiple positions, one after another.

        Args:
            positions: Boards or FEN strings

        Returns:
            List of evaluations in input order
        """
        return [self.evaluate_position(position) for position in positions]
