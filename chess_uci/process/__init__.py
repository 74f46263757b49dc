"""
Process supervision for UCI engines.

EngineProcess owns one engine subprocess and provides the primitives the
session is built on: write a line, poll for output with a timeout, and
terminate. find_engine() locates a default binary.
"""

from chess_uci.process.discovery import find_engine
from chess_uci.process.supervisor import EngineProcess

__all__ = ["EngineProcess", "find_engine"]
