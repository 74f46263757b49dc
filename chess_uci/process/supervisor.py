"""
Engine Process Supervisor

Owns the engine subprocess and exposes line-level I/O against it:

    start(path)          launch with piped stdin/stdout/stderr, drain the banner
    write_line(text)     write one newline-terminated command
    poll_output(ms)      return whatever output arrived within the timeout
    terminate()          close stdin, wait, kill as a fallback (idempotent)

Reading:
    Pipes are read by daemon threads so that polling never blocks longer
    than its timeout on any platform. The stdout thread pushes complete
    raw lines (terminators included) onto a queue; poll_output() waits for
    the first one and then drains everything already queued. The stderr
    thread only records lines, so a chatty engine cannot fill the pipe.

An empty string from poll_output() means "nothing arrived in time", not
end-of-stream: the engine may still emit more later.
"""

import logging
import os
import queue
import shutil
import subprocess
import threading
from collections import deque
from pathlib import Path
from typing import Deque, List, Optional, Sequence, Union

from chess_uci.errors import LaunchError, WriteError

logger = logging.getLogger(__name__)

# Marks end of the stdout stream on the queue
_EOF = None

# Error stream lines kept per engine
STDERR_HISTORY = 1000


class EngineProcess:
    """Supervisor for a single engine subprocess.

    Attributes:
        path: Resolved executable path (None until started)
        encoding: Text encoding of the engine's standard streams
        stderr_lines: Most recent lines the engine wrote to its error stream
    """

    def __init__(self, encoding: str = "utf-8", stderr_history: int = STDERR_HISTORY):
        self.encoding = encoding
        self.path: Optional[str] = None
        self.stderr_lines: Deque[str] = deque(maxlen=stderr_history)

        self._popen: Optional[subprocess.Popen] = None
        self._queue: "queue.Queue[Optional[str]]" = queue.Queue()
        self._eof = False
        self._terminated = False
        self._readers: List[threading.Thread] = []

    @staticmethod
    def resolve(executable_path: Union[str, os.PathLike]) -> str:
        """
        Resolve an executable path or bare program name.

        Args:
            executable_path: Absolute/relative path or a name on PATH

        Returns:
            Absolute path to the executable

        Raises:
            LaunchError: If the path does not resolve to an executable file
        """
        candidate = os.path.expanduser(str(executable_path))
        resolved = shutil.which(candidate)
        if resolved is None or not Path(resolved).is_file():
            raise LaunchError(f"Engine executable not found or not runnable: {executable_path}")
        return os.path.abspath(resolved)

    def start(
        self,
        executable_path: Union[str, os.PathLike],
        startup_timeout_ms: int = 100,
        args: Sequence[str] = (),
    ) -> str:
        """
        Launch the engine and drain its startup banner.

        Args:
            executable_path: Path to the engine executable
            startup_timeout_ms: Bounded wait for the banner
            args: Extra command line arguments for the engine

        Returns:
            Banner text printed by the engine (may be empty)

        Raises:
            LaunchError: If already started, or the executable cannot be run
        """
        if self._popen is not None:
            raise LaunchError(f"Engine process already started: {self.path}")

        path = self.resolve(executable_path)

        try:
            self._popen = subprocess.Popen(
                [path, *args],
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except OSError as e:
            raise LaunchError(f"Failed to start engine {path}: {e}") from e

        self.path = path
        self._readers = [
            threading.Thread(target=self._read_stdout, name="uci-stdout", daemon=True),
            threading.Thread(target=self._read_stderr, name="uci-stderr", daemon=True),
        ]
        for reader in self._readers:
            reader.start()

        logger.info(f"Started engine: {path} (pid={self._popen.pid})")

        banner = self.poll_output(startup_timeout_ms)
        if banner:
            logger.debug(f"Startup banner: {banner.strip()}")
        return banner

    def _read_stdout(self):
        """Background thread: push every raw stdout line onto the queue."""
        stream = self._popen.stdout
        try:
            for raw in iter(stream.readline, b""):
                self._queue.put(raw.decode(self.encoding, errors="replace"))
        except (OSError, ValueError) as e:
            logger.debug(f"stdout reader stopped: {e}")
        finally:
            self._queue.put(_EOF)

    def _read_stderr(self):
        """Background thread: record stderr lines."""
        stream = self._popen.stderr
        try:
            for raw in iter(stream.readline, b""):
                line = raw.decode(self.encoding, errors="replace").rstrip("\r\n")
                self.stderr_lines.append(line)
                logger.debug(f"<<< [stderr] {line}")
        except (OSError, ValueError) as e:
            logger.debug(f"stderr reader stopped: {e}")

    def write_line(self, text: str):
        """
        Write a command followed by a newline to the engine's stdin.

        Args:
            text: Command text without terminator

        Raises:
            WriteError: If the process is not running or the pipe is closed
        """
        if self._popen is None:
            raise WriteError("Engine process has not been started")
        if self._popen.poll() is not None:
            raise WriteError(f"Engine process has exited (code {self._popen.returncode})")

        try:
            self._popen.stdin.write((text + "\n").encode(self.encoding))
            self._popen.stdin.flush()
        except (OSError, ValueError) as e:
            raise WriteError(f"Failed to write to engine: {e}") from e

    def poll_output(self, timeout_ms: int) -> str:
        """
        Read whatever output arrives within the timeout.

        Waits up to timeout_ms for the first line, then takes every line
        already buffered without waiting further.

        Args:
            timeout_ms: Maximum wait for the first line, in milliseconds

        Returns:
            Concatenated raw output, or "" if nothing arrived in time
        """
        if self._popen is None:
            return ""

        chunks: List[str] = []

        if not self._eof:
            try:
                first = self._queue.get(timeout=max(timeout_ms, 0) / 1000.0)
            except queue.Empty:
                return ""
            if first is _EOF:
                self._eof = True
            else:
                chunks.append(first)

        while True:
            try:
                chunk = self._queue.get_nowait()
            except queue.Empty:
                break
            if chunk is _EOF:
                self._eof = True
                continue
            chunks.append(chunk)

        return "".join(chunks)

    def is_alive(self) -> bool:
        """True if the engine process is running."""
        return self._popen is not None and self._popen.poll() is None

    @property
    def pid(self) -> Optional[int]:
        return self._popen.pid if self._popen is not None else None

    @property
    def returncode(self) -> Optional[int]:
        return self._popen.poll() if self._popen is not None else None

    def terminate(self, timeout: float = 1.0):
        """
        Stop the engine process.

        Closes stdin (end of input for a UCI engine), waits up to timeout
        seconds and kills the process if it is still running. Calling this
        on a process that is not running is a no-op.

        Args:
            timeout: Seconds to wait for a clean exit
        """
        popen = self._popen
        if popen is None or self._terminated:
            return

        try:
            popen.stdin.close()
        except OSError as e:
            logger.warning(f"Error closing engine stdin: {e}")

        try:
            popen.wait(timeout=timeout)
        except subprocess.TimeoutExpired:
            logger.warning(f"Engine did not exit within {timeout}s, killing pid {popen.pid}")
            popen.kill()
            popen.wait()

        for reader in self._readers:
            reader.join(timeout=1.0)

        for stream in (popen.stdout, popen.stderr):
            try:
                stream.close()
            except OSError as e:
                logger.warning(f"Error closing engine stream: {e}")

        self._terminated = True
        logger.info(f"Engine exited with code {popen.returncode}")

    def __repr__(self) -> str:
        if self._popen is None:
            status = "not started"
        elif self.is_alive():
            status = f"running, pid {self._popen.pid}"
        else:
            status = f"finished, exit code {self._popen.returncode}"
        return f"<EngineProcess {self.path or '?'} ({status})>"
