"""
Structured UCI command builders.

These functions turn typed parameters into single protocol lines. They
perform no I/O, so malformed input is rejected before anything reaches the
engine.

Examples:
    build_setoption("Threads", 4)          -> "setoption name Threads value 4"
    build_setoption("Clear Hash")          -> "setoption name Clear Hash"
    build_position(kind="startpos",
                   moves=["e2e4", "e7e5"]) -> "position startpos moves e2e4 e7e5"
    build_go(GoParams(wtime=60000, btime=60000, depth=12))
                                           -> "go wtime 60000 btime 60000 depth 12"

The go sub-parameters are always written in the protocol order given by
GO_FIELDS, whatever order the caller supplied them in.
"""

import re
from collections.abc import Sequence as SequenceABC
from dataclasses import dataclass, fields
from enum import Enum
from typing import Dict, Optional, Sequence, Union

from chess_uci.errors import InvalidArgument


class PositionKind(str, Enum):
    """Ways of describing the position in a 'position' command."""

    FEN = "fen"
    STARTPOS = "startpos"


GO_FIELDS = (
    "searchmoves",
    "ponder",
    "wtime",
    "btime",
    "winc",
    "binc",
    "movestogo",
    "depth",
    "nodes",
    "mate",
    "movetime",
)

NUMERIC_GO_FIELDS = GO_FIELDS[2:]

_INTEGER = re.compile(r"^-?\d+$")


def _check_single_line(value: str, what: str) -> str:
    """Reject text that would split a command into several protocol lines."""
    if "\n" in value or "\r" in value:
        raise InvalidArgument(f"{what} must not contain line breaks: {value!r}")
    return value


def format_value(value) -> str:
    """Format an option value the way UCI spells it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _join_moves(moves: Union[str, Sequence[str]], what: str) -> str:
    if isinstance(moves, str):
        text = " ".join(moves.split())
    elif isinstance(moves, SequenceABC) and all(isinstance(move, str) for move in moves):
        text = " ".join(moves)
    else:
        raise InvalidArgument(f"{what} must be a string or a sequence of move strings, got {moves!r}")
    return _check_single_line(text, what)


def build_setoption(name: str, value=None) -> str:
    """
    Build a 'setoption' command.

    Args:
        name: Option name (may contain spaces, e.g. "Clear Hash")
        value: Option value, or None for 'button' options

    Returns:
        Command string

    Raises:
        InvalidArgument: If the name is empty or either part spans lines
    """
    name = _check_single_line(str(name), "Option name").strip()
    if not name:
        raise InvalidArgument("Option name must not be empty")

    command = f"setoption name {name}"
    if value is not None:
        text = _check_single_line(format_value(value), "Option value").strip()
        if not text:
            raise InvalidArgument(f"Value for option {name!r} must not be empty; pass None for button options")
        command += " value " + text
    return command


def build_position(
    spec: Optional[str] = None,
    kind: Union[str, PositionKind] = PositionKind.FEN,
    moves: Optional[Union[str, Sequence[str]]] = None,
) -> str:
    """
    Build a 'position' command.

    Args:
        spec: FEN string (kind="fen"), or text passed verbatim after
            'startpos' (usually empty)
        kind: "fen" or "startpos"
        moves: Optional moves in long algebraic notation, appended as
            'moves ...'

    Returns:
        Command string

    Raises:
        InvalidArgument: If kind is unknown or a FEN is missing
    """
    try:
        kind = PositionKind(kind)
    except ValueError:
        raise InvalidArgument(
            f"Position kind must be 'fen' or 'startpos', got {kind!r}"
        ) from None

    if spec is not None and not isinstance(spec, str):
        raise InvalidArgument(f"Position must be a string, got {spec!r}")

    parts = ["position", kind.value]

    if spec is not None and spec.strip():
        parts.append(_check_single_line(spec.strip(), "Position"))
    elif kind is PositionKind.FEN:
        raise InvalidArgument("A FEN string is required when kind is 'fen'")

    if moves:
        move_text = _join_moves(moves, "Moves")
        if move_text:
            parts.extend(["moves", move_text])

    return " ".join(parts)


@dataclass
class GoParams:
    """Search limits for a 'go' command.

    Unset (None) fields are left out of the command. Time values are in
    milliseconds, as in the protocol.
    """

    searchmoves: Optional[Union[str, Sequence[str]]] = None
    """Restrict the search to these moves (LAN, space separated or a list)"""

    ponder: Optional[Union[bool, str]] = None
    """True for a bare 'ponder' flag, or a ponder move string"""

    wtime: Optional[Union[int, str]] = None
    """White's remaining clock time in ms"""

    btime: Optional[Union[int, str]] = None
    """Black's remaining clock time in ms"""

    winc: Optional[Union[int, str]] = None
    """White increment per move in ms"""

    binc: Optional[Union[int, str]] = None
    """Black increment per move in ms"""

    movestogo: Optional[Union[int, str]] = None
    """Moves until the next time control"""

    depth: Optional[Union[int, str]] = None
    """Search this many plies only"""

    nodes: Optional[Union[int, str]] = None
    """Search this many nodes only"""

    mate: Optional[Union[int, str]] = None
    """Search for a mate in this many moves"""

    movetime: Optional[Union[int, str]] = None
    """Search exactly this many ms"""

    def __post_init__(self):
        """Validate and normalise fields."""
        if self.searchmoves is not None:
            self.searchmoves = _join_moves(self.searchmoves, "searchmoves") or None

        if self.ponder is False:
            self.ponder = None
        elif isinstance(self.ponder, str):
            self.ponder = _check_single_line(self.ponder.strip(), "ponder") or None
        elif self.ponder is not None and self.ponder is not True:
            raise InvalidArgument(f"ponder must be a bool or a move string, got {self.ponder!r}")

        for name in NUMERIC_GO_FIELDS:
            value = getattr(self, name)
            if value is None:
                continue
            if isinstance(value, bool) or not _INTEGER.match(str(value).strip()):
                raise InvalidArgument(f"{name} must be an integer, got {value!r}")

    @classmethod
    def from_dict(cls, limits: Dict[str, object]) -> "GoParams":
        """Build from a mapping of field name to value; unknown names are rejected."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(limits) - known)
        if unknown:
            raise InvalidArgument(f"Unknown go parameter(s): {', '.join(unknown)}")
        return cls(**limits)

    def to_dict(self) -> Dict[str, Union[str, bool]]:
        """
        Present fields in protocol order.

        Returns:
            Ordered mapping of field name to its serialised value
            (True for the bare ponder flag)
        """
        present: Dict[str, Union[str, bool]] = {}
        for name in GO_FIELDS:
            value = getattr(self, name)
            if value is None:
                continue
            present[name] = True if value is True else str(value).strip()
        return present


def build_go(params: Optional[GoParams] = None, infinite: bool = False) -> str:
    """
    Build a 'go' command.

    Args:
        params: Search limits (None = no limits)
        infinite: Emit 'go infinite' (search until 'stop')

    Returns:
        Command string, e.g. "go infinite searchmoves e2e4 d2d4"
    """
    parts = ["go infinite" if infinite else "go"]
    for name, value in (params or GoParams()).to_dict().items():
        parts.append(name if value is True else f"{name} {value}")
    return " ".join(parts)


def parse_go(command: str) -> Dict[str, Union[str, bool]]:
    """
    Tokenize a 'go' command back into its parameters.

    Args:
        command: A 'go ...' line

    Returns:
        Ordered mapping of parameter to value as it appears in the command.
        'infinite' and a bare 'ponder' map to True; searchmoves maps to the
        space-joined move list.

    Raises:
        InvalidArgument: If the line is not a 'go' command
    """
    tokens = command.split()
    if not tokens or tokens[0] != "go":
        raise InvalidArgument(f"Not a go command: {command!r}")

    keywords = set(GO_FIELDS) | {"infinite"}
    parsed: Dict[str, Union[str, bool]] = {}
    i = 1
    while i < len(tokens):
        token = tokens[i]
        if token == "infinite":
            parsed["infinite"] = True
            i += 1
        elif token == "searchmoves":
            j = i + 1
            while j < len(tokens) and tokens[j] not in keywords:
                j += 1
            parsed["searchmoves"] = " ".join(tokens[i + 1:j])
            i = j
        elif token == "ponder":
            if i + 1 < len(tokens) and tokens[i + 1] not in keywords:
                parsed["ponder"] = tokens[i + 1]
                i += 2
            else:
                parsed["ponder"] = True
                i += 1
        elif token in NUMERIC_GO_FIELDS and i + 1 < len(tokens):
            parsed[token] = tokens[i + 1]
            i += 2
        else:
            i += 1
    return parsed
