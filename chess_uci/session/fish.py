"""
UCI Session

This module implements the client side of the Universal Chess Interface
(UCI) protocol on top of an EngineProcess. A Fish session starts the engine
when it is created, sends one command at a time, and collects each reply by
polling until the engine goes quiet.

Protocol Flow:
    Client → "uci"
    Engine → "id name Stockfish 16"
    Engine → "option name Hash type spin default 16 min 1 max 33554432"
    Engine → "uciok"
    Client → "isready"
    Engine → "readyok"
    Client → "position startpos moves e2e4"
    Client → "go depth 10"
    Engine → "info depth 10 score cp 25 nodes 12345 pv e7e5"
    Engine → "bestmove e7e5 ponder g1f3"
    Client → "quit"

Collecting replies:
    UCI has no end-of-reply marker for most commands. run() polls the
    engine with a fixed per-iteration timeout (SessionConfig.poll_timeout_ms,
    500ms by default) and treats the first empty poll as the end of the
    reply. An engine that pauses longer than the timeout in the middle of
    a reply will have it split across two commands. Raising the timeout
    avoids that at the cost of latency on every command.

    'go infinite' is the exception: the engine keeps searching until told
    to stop, so run() returns a Deferred result without reading anything,
    and the search output is collected by the following stop().

Lifecycle:
    UNINITIALIZED → RUNNING → TERMINATED

    The constructor starts the engine. quit(), or noticing that the engine
    exited, terminates the session; any command after that raises
    SessionClosedError without touching the process. Use the session as a
    context manager to guarantee quit() on every exit path.

References:
    - UCI Protocol: https://www.chessprogramming.org/UCI
"""

import logging
import os
import threading
from enum import Enum
from typing import List, Optional, Sequence, Union

from chess_uci.config import SessionConfig
from chess_uci.errors import InvalidArgument, SessionClosedError, WriteError
from chess_uci.process.discovery import find_engine
from chess_uci.process.supervisor import EngineProcess
from chess_uci.session.commands import (
    GoParams,
    PositionKind,
    build_go,
    build_position,
    build_setoption,
)
from chess_uci.session.parsing import BestMove, EngineInfo, parse_bestmove, parse_uci_response
from chess_uci.session.results import Collected, Deferred, RunResult, split_lines

logger = logging.getLogger(__name__)


class SessionState(Enum):
    UNINITIALIZED = "uninitialized"
    RUNNING = "running"
    TERMINATED = "terminated"


class Fish:
    """
    UCI session with a single engine process.

    Attributes:
        process: Supervisor owning the engine subprocess
        output: Lines returned by the most recent blocking command
        log: Every line observed since the engine started, in order
        info: Engine identification and options from the last uci() call
        state: Current SessionState
        config: Polling and I/O settings

    Methods:
        run: Send any command and collect its reply
        uci, is_ready, set_option, new_game, position, go, stop,
        ponder_hit, quit: Structured protocol commands
    """

    def __init__(
        self,
        path: Optional[Union[str, os.PathLike]] = None,
        config: Optional[SessionConfig] = None,
        process: Optional[EngineProcess] = None,
    ):
        """
        Start an engine session.

        Args:
            path: Engine executable (default: config.engine_path, then
                auto-detection)
            config: Session settings (default: SessionConfig())
            process: Supervisor to use instead of a new EngineProcess

        Raises:
            LaunchError: If the engine cannot be found or started
        """
        self.config = config if config is not None else SessionConfig()
        self.process = process if process is not None else EngineProcess(encoding=self.config.encoding)

        self.output: List[str] = []
        self.log: List[str] = []
        self.info: Optional[EngineInfo] = None
        self.state = SessionState.UNINITIALIZED

        self._lock = threading.RLock()

        self._start(path)

    def _start(self, path):
        if path is None:
            path = self.config.engine_path
        if path is None:
            path = find_engine()

        banner = self.process.start(
            path,
            startup_timeout_ms=self.config.startup_timeout_ms,
            args=self.config.engine_args,
        )

        self.output = split_lines(banner, self.config.line_separator)
        self.log = list(self.output)
        self.state = SessionState.RUNNING
        logger.info(f"Session started: {path}")

    @property
    def running(self) -> bool:
        return self.state is SessionState.RUNNING

    def _ensure_running(self):
        """Raise SessionClosedError unless the engine can take a command."""
        if self.state is not SessionState.RUNNING:
            raise SessionClosedError(f"Session is {self.state.value}; start a new one")

        if not self.process.is_alive():
            logger.warning(f"Engine exited unexpectedly (code {self.process.returncode})")
            self._teardown()
            raise SessionClosedError("Engine process has exited")

    def _teardown(self):
        """Release the process. Errors are logged, never raised."""
        try:
            self.process.terminate(timeout=self.config.quit_timeout)
        except OSError as e:
            logger.warning(f"Error terminating engine: {e}")
        self.state = SessionState.TERMINATED

    def run(self, command: str, wait_for_output: bool = True) -> RunResult:
        """
        Send a command to the engine and collect its reply.

        Send one command per call; a newline is appended automatically.

        Args:
            command: Protocol command, e.g. "go depth 10"
            wait_for_output: Poll until the engine goes quiet. Pass False
                only for 'go infinite', whose output is collected by the
                next stop().

        Returns:
            Collected with the reply lines, or Deferred when not waiting

        Raises:
            SessionClosedError: If the session is terminated
            WriteError: If the engine's input is closed (the session is
                terminated before this is raised)
        """
        with self._lock:
            self._ensure_running()

            logger.debug(f">>> {command}")
            try:
                self.process.write_line(command)
            except WriteError as e:
                logger.error(f"Failed to send {command!r}: {e}")
                self._teardown()
                raise

            if not wait_for_output:
                return Deferred(command)

            lines: List[str] = []
            while True:
                chunk = self.process.poll_output(self.config.poll_timeout_ms)
                if not chunk:
                    break
                lines.extend(split_lines(chunk, self.config.line_separator))

            for line in lines:
                logger.debug(f"<<< {line}")

            self.output = lines
            self.log.extend(lines)
            return Collected(command, tuple(lines))

    def uci(self):
        """
        Tell the engine to use UCI.

        The engine replies with its 'id' lines, one 'option' line per
        setting, and 'uciok'; the parsed reply is stored in self.info.
        """
        result = self.run("uci")
        self.info = parse_uci_response(result.lines)

    def is_ready(self) -> bool:
        """
        Ask whether the engine is ready for more commands.

        Returns:
            True iff the first reply line is exactly "readyok"
        """
        return self.run("isready").first == "readyok"

    def set_option(self, name: str, value=None):
        """
        Change an engine option.

        set_option("Threads", 4)   sends "setoption name Threads value 4"
        set_option("Clear Hash")   sends "setoption name Clear Hash"

        Args:
            name: Option name as announced by the engine
            value: New value, or None for 'button' options
        """
        self.run(build_setoption(name, value))

    def new_game(self):
        """Tell the engine the next search is from a different game, then sync with isready."""
        self.run("ucinewgame\nisready")

    def position(
        self,
        spec: Optional[str] = None,
        kind: Union[str, PositionKind] = PositionKind.FEN,
        moves: Optional[Union[str, Sequence[str]]] = None,
    ):
        """
        Set up the position on the engine's internal board.

        Args:
            spec: FEN string, or verbatim text after 'startpos'
            kind: "fen" or "startpos"
            moves: Moves in long algebraic notation (e.g. ["e2e4", "e7e5"])

        Raises:
            InvalidArgument: If kind is not "fen"/"startpos" (nothing is sent)
        """
        self.run(build_position(spec, kind, moves))

    def go(self, params: Optional[GoParams] = None, infinite: bool = False, **limits) -> Optional[str]:
        """
        Start calculating on the current position.

        Limits are given either as a GoParams or as keyword arguments:

            fish.go(depth=12)
            fish.go(GoParams(wtime=60000, btime=60000, winc=1000, binc=1000))

        Args:
            params: Search limits
            infinite: Search until stop(); returns immediately
            **limits: GoParams fields, when params is not given

        Returns:
            The last reply line (normally "bestmove ..."), or None for an
            infinite search

        Raises:
            InvalidArgument: If both params and keyword limits are given,
                or a limit is malformed
        """
        if params is not None and limits:
            raise InvalidArgument("Pass either a GoParams or keyword limits, not both")
        if params is None:
            params = GoParams.from_dict(limits)

        result = self.run(build_go(params, infinite), wait_for_output=not infinite)
        if isinstance(result, Deferred):
            return None
        return result.last

    def stop(self) -> Optional[str]:
        """
        Stop calculating as soon as possible.

        Returns:
            The last reply line (normally "bestmove ..."), or None if no
            search was underway
        """
        return self.run("stop").last

    def ponder_hit(self):
        """Tell the engine the opponent played the expected ponder move."""
        self.run("ponderhit")

    def best_move(self) -> Optional[BestMove]:
        """Parse the last line of the most recent reply as a bestmove line."""
        return parse_bestmove(self.output[-1] if self.output else None)

    def quit(self):
        """
        Quit the engine and end the session.

        Sends 'quit', drains the remaining output, then releases the
        process. Calling quit() on a terminated session does nothing.
        """
        with self._lock:
            if self.state is SessionState.TERMINATED:
                return
            if self.state is SessionState.RUNNING:
                try:
                    self.run("quit")
                except (WriteError, SessionClosedError) as e:
                    logger.warning(f"Engine was gone before quit: {e}")
            if self.state is not SessionState.TERMINATED:
                self._teardown()
            logger.info("Session terminated")

    close = quit

    def __enter__(self) -> "Fish":
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.quit()
        return False

    def __repr__(self) -> str:
        return f"<Fish {self.state.value} {self.process!r}>"
