"""
Line reader for the CO2 monitor.
Reassembles CRLF-terminated lines from the serial byte stream and keeps
only the ones carrying sensor data.
"""

import logging

from . import settings

logger = logging.getLogger(__name__)


class LineReader(object):
    """
    Reads device output from a byte stream and yields data lines.

    Incoming bytes are appended to a buffer; each complete
    terminator-delimited segment is taken from the front of the buffer, so
    lines split across reads or several lines in one read are both handled.
    Only segments starting with 'CO2' are yielded; everything else (command
    echoes, blank lines, noise) is dropped.

    Read errors from the stream (StreamDisconnected) are not handled here.
    """

    READ_SIZE = settings.READ_SIZE
    MAX_BUFFER = settings.MAX_BUFFER

    def __init__(self, stream, cancel=None, poll_interval=settings.POLL_INTERVAL):
        """
        Create a line reader.

        Args:
            stream: ByteStream to read from
            cancel: optional threading.Event; read_lines() stops once it is set
            poll_interval: read timeout so cancel is noticed while the
                           device is silent (None blocks forever)
        """
        self._stream = stream
        self._cancel = cancel
        self._poll_interval = poll_interval
        self._buffer = b''
        self.dropped = 0

    def _cancelled(self):
        return self._cancel is not None and self._cancel.is_set()

    def read_lines(self):
        """
        Yield data lines (text, terminator removed) until cancelled.

        Raises:
            StreamDisconnected: if the stream fails
        """
        self._stream.set_timeout(self._poll_interval)
        while not self._cancelled():
            data = self._stream.read(self.READ_SIZE)
            if self._cancelled():
                return
            if not data:
                continue
            self._buffer += data
            for line in self._take_lines():
                yield line

    def _take_lines(self):
        """Extract complete lines from the buffer, keeping any partial tail."""
        lines = []
        while settings.TERMINATOR in self._buffer:
            raw, self._buffer = self._buffer.split(settings.TERMINATOR, 1)
            line = self._accept(raw)
            if line is not None:
                lines.append(line)

        if len(self._buffer) > self.MAX_BUFFER:
            logger.debug("discarding %d unterminated bytes", len(self._buffer))
            self._buffer = b''
            self.dropped += 1
        return lines

    def _accept(self, raw):
        """Return the decoded line if it is a data line, else None."""
        try:
            text = raw.decode('ascii')
        except UnicodeDecodeError:
            logger.debug("dropping non-ASCII line: %r", raw)
            self.dropped += 1
            return None

        if not text.startswith(settings.LINE_PREFIX):
            logger.debug("dropping line: %r", text)
            self.dropped += 1
            return None
        return text


def read_lines(stream, cancel=None, poll_interval=settings.POLL_INTERVAL):
    """Shortcut for LineReader(stream, cancel, poll_interval).read_lines()."""
    return LineReader(stream, cancel, poll_interval).read_lines()
