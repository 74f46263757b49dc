"""
Parsers for engine replies.

Engine → "id name Stockfish 16"
Engine → "option name Hash type spin default 16 min 1 max 33554432"
Engine → "uciok"
Engine → "info depth 12 seldepth 17 score cp 31 nodes 48123 nps 950000 time 50 pv e2e4 e7e5"
Engine → "bestmove e2e4 ponder e7e5"

Each parser takes one line (or the lines of one reply) and returns a typed
result, or None when the line is not of the expected kind.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional


@dataclass
class BestMove:
    """Result of a finished search."""

    move: str  # LAN, or "(none)" when there is no legal move
    ponder: Optional[str] = None


@dataclass
class SearchInfo:
    """Fields of one 'info' line. Unset fields are None."""

    depth: Optional[int] = None
    seldepth: Optional[int] = None
    nodes: Optional[int] = None
    nps: Optional[int] = None
    time: Optional[int] = None
    multipv: Optional[int] = None
    centipawns: Optional[int] = None  # None if mate score
    mate_in: Optional[int] = None  # None if centipawn score
    bound: Optional[str] = None  # "lowerbound" / "upperbound"
    pv: List[str] = field(default_factory=list)
    string: Optional[str] = None

    @property
    def has_score(self) -> bool:
        return self.centipawns is not None or self.mate_in is not None

    @property
    def is_mate(self) -> bool:
        """Check if the score is a mate score."""
        return self.mate_in is not None

    def to_centipawns(self, clamp: int = 10000) -> Optional[int]:
        """Score in centipawns clamped to ±clamp, or None if the line carried no score."""
        return clamp_score(self.centipawns, self.mate_in, clamp)


@dataclass
class OptionSpec:
    """An 'option' line announced by the engine in reply to 'uci'."""

    name: str
    type: str
    default: Optional[str] = None
    min: Optional[int] = None
    max: Optional[int] = None
    vars: List[str] = field(default_factory=list)


@dataclass
class EngineInfo:
    """Identification and options from the reply to 'uci'."""

    name: Optional[str] = None
    author: Optional[str] = None
    options: Dict[str, OptionSpec] = field(default_factory=dict)
    uciok: bool = False


def clamp_score(centipawns: Optional[int], mate_in: Optional[int], clamp: int = 10000) -> Optional[int]:
    """
    Fold a cp or mate score into one clamped centipawn value.

    Mate scores become ±clamp by the sign of mate_in (positive: the side to
    move mates).

    Args:
        centipawns: Centipawn score, or None
        mate_in: Moves to mate, or None
        clamp: Maximum absolute centipawn value

    Returns:
        Clamped centipawns, or None when neither score is set
    """
    if mate_in is not None:
        return clamp if mate_in > 0 else -clamp
    if centipawns is None:
        return None
    return max(-clamp, min(clamp, centipawns))


_INFO_INT_FIELDS = ("depth", "seldepth", "nodes", "nps", "time", "multipv",
                    "hashfull", "tbhits", "currmovenumber")

_INFO_KEYWORDS = set(_INFO_INT_FIELDS) | {
    "score", "pv", "string", "currmove", "refutation", "currline", "wdl", "sbhits", "cpuload",
}

_OPTION_KEYWORDS = {"name", "type", "default", "min", "max", "var"}


def parse_bestmove(line: Optional[str]) -> Optional[BestMove]:
    """
    Parse a 'bestmove' line.

    Args:
        line: A reply line (None is accepted and yields None)

    Returns:
        BestMove, or None if the line is not a bestmove line
    """
    if not line:
        return None
    tokens = line.split()
    if len(tokens) < 2 or tokens[0] != "bestmove":
        return None
    ponder = None
    if len(tokens) >= 4 and tokens[2] == "ponder":
        ponder = tokens[3]
    return BestMove(move=tokens[1], ponder=ponder)


def _to_int(token: str) -> Optional[int]:
    try:
        return int(token)
    except ValueError:
        return None


def parse_info(line: str) -> Optional[SearchInfo]:
    """
    Parse an 'info' line.

    Args:
        line: A reply line

    Returns:
        SearchInfo, or None if the line is not an info line
    """
    tokens = line.split()
    if not tokens or tokens[0] != "info":
        return None

    info = SearchInfo()
    i = 1
    while i < len(tokens):
        token = tokens[i]

        if token == "string":
            info.string = " ".join(tokens[i + 1:])
            break

        if token == "score" and i + 2 < len(tokens):
            score_type, value = tokens[i + 1], _to_int(tokens[i + 2])
            if score_type == "cp":
                info.centipawns = value
            elif score_type == "mate":
                info.mate_in = value
            i += 3
            if i < len(tokens) and tokens[i] in ("lowerbound", "upperbound"):
                info.bound = tokens[i]
                i += 1
            continue

        if token == "pv":
            j = i + 1
            while j < len(tokens) and tokens[j] not in _INFO_KEYWORDS:
                j += 1
            info.pv = tokens[i + 1:j]
            i = j
            continue

        if token in _INFO_INT_FIELDS and i + 1 < len(tokens):
            if hasattr(info, token):
                setattr(info, token, _to_int(tokens[i + 1]))
            i += 2
            continue

        i += 1

    return info


def parse_option(line: str) -> Optional[OptionSpec]:
    """
    Parse an 'option' line.

    Names, defaults and combo values may contain spaces; each runs until
    the next option keyword.

    Args:
        line: A reply line, e.g. "option name Clear Hash type button"

    Returns:
        OptionSpec, or None if the line is not a well-formed option line
    """
    tokens = line.split()
    if not tokens or tokens[0] != "option":
        return None

    segments = []
    for token in tokens[1:]:
        if token in _OPTION_KEYWORDS:
            segments.append((token, []))
        elif segments:
            segments[-1][1].append(token)

    values = {}
    combo_vars = []
    for key, words in segments:
        text = " ".join(words)
        if key == "var":
            combo_vars.append(text)
        else:
            values[key] = text

    if not values.get("name") or "type" not in values:
        return None

    return OptionSpec(
        name=values["name"],
        type=values["type"],
        default=values.get("default"),
        min=_to_int(values["min"]) if "min" in values else None,
        max=_to_int(values["max"]) if "max" in values else None,
        vars=combo_vars,
    )


def parse_uci_response(lines: Iterable[str]) -> EngineInfo:
    """
    Parse the reply to 'uci'.

    Args:
        lines: Reply lines in order

    Returns:
        EngineInfo with id fields, options (in announcement order) and
        whether 'uciok' was seen
    """
    engine_info = EngineInfo()
    for line in lines:
        stripped = line.strip()
        if stripped.startswith("id name "):
            engine_info.name = stripped[len("id name "):]
        elif stripped.startswith("id author "):
            engine_info.author = stripped[len("id author "):]
        elif stripped.startswith("option "):
            option = parse_option(stripped)
            if option is not None:
                engine_info.options[option.name] = option
        elif stripped == "uciok":
            engine_info.uciok = True
    return engine_info
