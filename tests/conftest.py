"""
Shared fixtures: a scripted in-memory supervisor and a fake engine script.
"""

import sys
import textwrap
from collections import deque

import pytest

from chess_uci import Fish, SessionConfig
from chess_uci.errors import WriteError


class ScriptedProcess:
    """
    In-memory stand-in for EngineProcess.

    Each command written queues its scripted reply chunks; every
    poll_output() call returns the next chunk, or "" once they run out.
    """

    def __init__(self, responses=None, banner=""):
        self.responses = responses or {}
        self.banner = banner
        self.written = []
        self.polls = 0
        self.terminations = 0
        self.started_with = None
        self.alive = False
        self._pending = deque()

    def start(self, executable_path, startup_timeout_ms=100, args=()):
        self.started_with = executable_path
        self.alive = True
        return self.banner

    def write_line(self, text):
        if not self.alive:
            raise WriteError("Engine process has exited")
        self.written.append(text)
        for command in text.split("\n"):
            self._pending.extend(self.responses.get(command, []))
        if text == "quit":
            self.alive = False

    def poll_output(self, timeout_ms):
        self.polls += 1
        return self._pending.popleft() if self._pending else ""

    def is_alive(self):
        return self.alive

    @property
    def returncode(self):
        return None if self.alive else 0

    def terminate(self, timeout=1.0):
        self.terminations += 1
        self.alive = False


FAKE_ENGINE = textwrap.dedent(
    '''
    import sys
    import time

    def send(line):
        sys.stdout.write(line + "\\n")
        sys.stdout.flush()

    send("FakeFish 1.0 by the chess_uci test suite")
    searching = False
    stop_delay = 0.0
    while True:
        line = sys.stdin.readline()
        if not line:
            break
        command = line.strip()
        if command == "uci":
            send("id name FakeFish 1.0")
            send("id author chess_uci")
            send("option name Hash type spin default 16 min 1 max 1024")
            send("option name Clear Hash type button")
            send("option name Style type combo default Normal var Solid var Normal var Risky")
            send("uciok")
        elif command == "isready":
            send("readyok")
        elif command.startswith("setoption") or command.startswith("position"):
            if command.startswith("setoption name StopDelay value "):
                stop_delay = int(command.split()[-1]) / 1000.0
            send("info string received " + command)
        elif command.startswith("go"):
            if "infinite" in command.split():
                searching = True
                send("info depth 1 score cp 10 nodes 20 pv e2e4")
            else:
                send("info depth 5 seldepth 7 score cp 25 nodes 1000 nps 50000 pv e2e4 e7e5")
                send("bestmove e2e4 ponder e7e5")
        elif command == "stop":
            if searching:
                searching = False
                time.sleep(stop_delay)
                send("info depth 3 score cp 15 nodes 300 pv d2d4")
                send("bestmove d2d4")
        elif command == "warn":
            sys.stderr.write("warning: low on hash\\n")
            sys.stderr.flush()
        elif command == "crash":
            sys.exit(3)
        elif command == "quit":
            break
    '''
)


@pytest.fixture
def scripted():
    """Scripted supervisor with the usual handshake replies."""
    return ScriptedProcess(
        responses={
            "uci": ["id name Scripted\nid author Tests\n", "uciok\n"],
            "isready": ["readyok\n"],
            "go depth 5": ["info depth 5 score cp 20 nodes 100\n", "bestmove e2e4\n"],
            "stop": ["bestmove d2d4 ponder d7d5\n"],
        },
        banner="Scripted engine\n",
    )


@pytest.fixture
def fish(scripted):
    """Session over the scripted supervisor."""
    return Fish("scripted-engine", config=SessionConfig(line_separator="\n"), process=scripted)


@pytest.fixture
def fake_engine_config(tmp_path):
    """Config that runs the fake engine script with the current interpreter."""
    script = tmp_path / "fake_engine.py"
    script.write_text(FAKE_ENGINE)
    return SessionConfig(
        engine_path=sys.executable,
        engine_args=(str(script),),
        poll_timeout_ms=200,
        startup_timeout_ms=5000,
        quit_timeout=5.0,
        line_separator="\n",
    )
