"""
Session control for the CO2 monitor.

SessionController owns the serial stream: it opens it, resets the device's
logging session with a stop/start handshake and sends the stop command on
shutdown. Signals only set a cancellation event; the read loop notices it
and the controller does the shutdown.
"""

import logging
import signal
import time

from . import settings

logger = logging.getLogger(__name__)


class SessionController(object):
    """
    Owns the connection to one sensor.

    Usable as a context manager; the stream is closed on every exit path.
    """

    def __init__(self, stream_factory=None, sleep=time.sleep):
        """
        Args:
            stream_factory: callable(path, baudrate) returning a ByteStream
                            (default SerialStream)
            sleep: delay function, replaced in tests
        """
        if stream_factory is None:
            from .stream import SerialStream
            stream_factory = SerialStream
        self._stream_factory = stream_factory
        self._sleep = sleep
        self.stream = None

    @property
    def is_open(self):
        return self.stream is not None

    def open(self, path, baudrate=settings.BAUDRATE):
        """
        Open the connection.

        Raises:
            StreamError: if the port cannot be opened
        """
        self.close()
        logger.debug("opening %s @ %s", path, baudrate)
        self.stream = self._stream_factory(path, baudrate)
        return self.stream

    def handshake(self):
        """
        Reset the device session: stop any logging already running, then start.

        Raises:
            StreamError: if a command cannot be written
        """
        self._sleep(settings.PRE_STOP_DELAY)
        self._send(settings.CMD_STOP)
        self._sleep(settings.POST_STOP_DELAY)
        self._send(settings.CMD_START)
        logger.debug("handshake complete")

    def shutdown(self):
        """
        Send the stop command once, give the device time to settle, close.

        The stream is closed even if the write fails.

        Raises:
            StreamError: if the stop command cannot be written
        """
        if self.stream is None:
            return
        try:
            self._send(settings.CMD_STOP)
            self._sleep(settings.SHUTDOWN_DELAY)
        finally:
            self.close()

    def close(self):
        """Close the connection if it is open."""
        if self.stream is not None:
            self.stream.close()
            self.stream = None
            logger.debug("closed")

    def _send(self, command):
        logger.debug("sending %r", command)
        self.stream.write(command)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, tb):
        self.close()
        return False


def install_signal_handlers(cancel, signals=(signal.SIGINT, signal.SIGTERM)):
    """
    Make the given signals set the cancellation event.

    Must be called from the main thread.

    Args:
        cancel: threading.Event observed by the read loop

    Returns:
        dict of signal number -> previous handler, for restore_signal_handlers()
    """
    def handler(signum, frame):
        logger.debug("signal %d received", signum)
        cancel.set()

    previous = {}
    for signum in signals:
        previous[signum] = signal.signal(signum, handler)
    return previous


def restore_signal_handlers(previous):
    """Put back handlers returned by install_signal_handlers()."""
    for signum, handler in previous.items():
        signal.signal(signum, handler)
