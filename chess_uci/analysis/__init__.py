"""
Engine-backed position evaluation.
"""

from chess_uci.analysis.evaluator import EngineEvaluator, Evaluation

__all__ = ["EngineEvaluator", "Evaluation"]
