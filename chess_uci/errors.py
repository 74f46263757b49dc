"""
Error taxonomy for UCI sessions.

Every error raised by this package derives from UCIError. Each subclass
also derives from the closest built-in exception, so callers that only
know about the standard library still catch the right thing:

    LaunchError         -> FileNotFoundError (engine binary missing or not runnable)
    WriteError          -> BrokenPipeError   (engine stdin closed / process gone)
    SessionClosedError  -> RuntimeError      (command issued after quit)
    InvalidArgument     -> ValueError        (malformed command builder input)

No operation retries: a dead process is permanent for its session.
"""


class UCIError(Exception):
    """Base class for all chess_uci errors."""


class LaunchError(UCIError, FileNotFoundError):
    """Engine executable could not be found or started."""


class WriteError(UCIError, BrokenPipeError):
    """Writing to the engine's input stream failed."""


class SessionClosedError(UCIError, RuntimeError):
    """A protocol command was issued on a terminated session."""


class InvalidArgument(UCIError, ValueError):
    """A structured command builder received malformed input."""
