"""
Byte stream abstraction for the CO2 monitor.
Wraps the pyserial port behind a small read/write interface.
"""

import logging

logger = logging.getLogger(__name__)


class StreamError(Exception):
    """Raised when the stream cannot be opened or written."""

    def __init__(self, reason=None):
        self.reason = reason or "Stream error"
        super(StreamError, self).__init__(self.reason)


class StreamDisconnected(StreamError):
    """Raised when a stream is disconnected or a read fails."""

    def __init__(self, reason=None):
        super(StreamDisconnected, self).__init__(reason or "Stream disconnected")


class ByteStream(object):
    """
    Abstract base class for byte streams.
    Subclasses must implement read(), write(), close(), and set_timeout().
    """

    def read(self, size):
        """
        Read up to size bytes from the stream.
        Blocks until data is available or timeout expires.
        Returns bytes, or b'' if timeout with no data.
        Raises StreamDisconnected on disconnect or read failure.
        """
        raise NotImplementedError()

    def write(self, data):
        """
        Write all of data to the stream.
        Raises StreamError on failure.
        """
        raise NotImplementedError()

    def close(self):
        """Close the stream."""
        raise NotImplementedError()

    def set_timeout(self, timeout):
        """
        Set read timeout in seconds.
        None means block forever.
        """
        raise NotImplementedError()


class SerialStream(ByteStream):
    """
    ByteStream implementation for serial ports.
    Wraps pyserial.
    """

    def __init__(self, port, baudrate=115200):
        """
        Open a serial stream.

        Args:
            port: serial device path (e.g., '/dev/tty.usbmodem1101')
            baudrate: baud rate (default 115200)

        Raises:
            StreamError: if the port cannot be opened
        """
        import serial
        self._serial_module = serial
        self.port = port
        try:
            self._serial = serial.Serial(
                port=port,
                baudrate=baudrate,
                timeout=None  # Blocking by default
            )
        except (serial.SerialException, OSError, ValueError) as e:
            raise StreamError("Cannot open {}: {}".format(port, e))
        logger.debug("opened %s @ %s", port, baudrate)

    def read(self, size):
        """Read up to size bytes from serial port."""
        try:
            # Block for at least 1 byte, then grab everything available up to size
            data = self._serial.read(1)
            if data:
                waiting = self._serial.in_waiting
                extra = min(waiting, size - 1)
                if extra > 0:
                    data += self._serial.read(extra)
            return data
        except (self._serial_module.SerialException, OSError) as e:
            raise StreamDisconnected("Serial error: {}".format(e))

    def write(self, data):
        """Write data to the serial port and wait until it is sent."""
        try:
            self._serial.write(data)
            self._serial.flush()
        except (self._serial_module.SerialException, OSError) as e:
            raise StreamError("Serial write error: {}".format(e))
        logger.debug("wrote %r", data)

    def close(self):
        """Close the serial port."""
        self._serial.close()

    def set_timeout(self, timeout):
        """Set read timeout in seconds."""
        self._serial.timeout = timeout
