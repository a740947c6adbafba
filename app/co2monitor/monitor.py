"""
Read-parse-render loop for the CO2 monitor.
"""

import logging
import sys

from .parser import ParseError, parse
from .reader import LineReader
from .render import present
from . import settings

logger = logging.getLogger(__name__)


class Monitor(object):
    """
    Prints every sample read from a stream until cancelled.

    A bad line is logged and skipped; stream errors propagate.
    """

    def __init__(self, stream, out=None, cancel=None, poll_interval=settings.POLL_INTERVAL):
        """
        Args:
            stream: ByteStream the device writes to
            out: text file for rendered records (default sys.stdout)
            cancel: threading.Event that ends run()
            poll_interval: read timeout used to check cancel
        """
        self._reader = LineReader(stream, cancel, poll_interval)
        self._out = out if out is not None else sys.stdout
        self.records = 0
        self.rejected = 0

    def run(self):
        """
        Process lines until the cancel event is set.

        Returns:
            number of records written

        Raises:
            StreamDisconnected: if reading fails
        """
        for line in self._reader.read_lines():
            self.handle_line(line)
        logger.debug("stopped: %d records, %d rejected", self.records, self.rejected)
        return self.records

    def handle_line(self, line):
        """Parse and print one line. Returns True if a record was written."""
        try:
            record = parse(line)
        except ParseError as e:
            logger.warning("Failed to parse sensor data: %s", e)
            self.rejected += 1
            return False

        if not present(record, self._out):
            self.rejected += 1
            return False
        self.records += 1
        return True
