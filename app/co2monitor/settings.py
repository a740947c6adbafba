"""
Fixed settings for the CO2 monitor.
The device is auto-discovered; there is no settings file.
"""

# Device discovery
DEVICE_DIR = '/dev'
DEVICE_PREFIX = 'tty.usbmodem'

# Serial line
BAUDRATE = 115200

# Device commands
CMD_STOP = b'STP\r\n'
CMD_START = b'STA\r\n'

# Handshake timing in seconds
PRE_STOP_DELAY = 0.1
POST_STOP_DELAY = 0.5
SHUTDOWN_DELAY = 0.5

# Framing
TERMINATOR = b'\r\n'
LINE_PREFIX = 'CO2'
READ_SIZE = 27  # 25 data bytes + CRLF
MAX_BUFFER = 1024

# Read timeout used to poll for cancellation
POLL_INTERVAL = 0.5


DEFAULTS = {
    'device_dir': DEVICE_DIR,
    'device_prefix': DEVICE_PREFIX,
    'baudrate': BAUDRATE,
    'poll_interval': POLL_INTERVAL,
}


def load_settings(overrides=None):
    """
    Build the runtime settings.

    Args:
        overrides: optional dict of values replacing the defaults

    Returns:
        dict with the keys of DEFAULTS
    """
    settings = dict(DEFAULTS)
    if overrides:
        for key, value in overrides.items():
            if key not in DEFAULTS:
                raise KeyError("Unknown setting: {}".format(key))
            settings[key] = value
    return settings
