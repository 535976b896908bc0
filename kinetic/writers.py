"""Sinks for human-readable diagnostic messages.

Metrics are passed a writer when their cached potential values are updated so
that variants which can detect numerical problems (for example an
ill-conditioned metric) have somewhere to report them. The Euclidean metrics
in `kinetic.metrics` never write anything.
"""

from abc import ABC, abstractmethod
import logging

logger = logging.getLogger(__name__)


class Writer(ABC):
    """Base class for diagnostic writers."""

    @abstractmethod
    def __call__(self, *lines):
        """Write zero or more lines of diagnostic text.

        Args:
            *lines (str): Lines of text to write, without trailing newlines.
        """


class NoOpWriter(Writer):
    """Writer which discards all messages."""

    def __call__(self, *lines):
        pass


class StreamWriter(Writer):
    """Writer which writes each line to a text stream."""

    def __init__(self, stream, prefix=''):
        """
        Args:
            stream (io.TextIOBase): Text stream to write to, for example
                `sys.stderr` or an `io.StringIO` instance.
            prefix (str): String to prepend to every line written.
        """
        self.stream = stream
        self.prefix = prefix

    def __call__(self, *lines):
        for line in lines:
            self.stream.write(f'{self.prefix}{line}\n')


class LoggingWriter(Writer):
    """Writer which records each line as a log message."""

    def __init__(self, logger=None, level=logging.WARNING):
        """
        Args:
            logger (None or logging.Logger): Logger to record messages with.
                Defaults to the logger of this module if `None`.
            level (int): Logging level to record messages at. Defaults to
                `logging.WARNING`.
        """
        self.logger = logging.getLogger(__name__) if logger is None else logger
        self.level = level

    def __call__(self, *lines):
        for line in lines:
            self.logger.log(self.level, line)
