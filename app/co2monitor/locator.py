"""
Device discovery for the CO2 monitor.
"""

import logging
import os

from . import settings

logger = logging.getLogger(__name__)


def locate(dev_dir=settings.DEVICE_DIR, prefix=settings.DEVICE_PREFIX):
    """
    Find the sensor's serial device.

    Args:
        dev_dir: directory holding device entries (default /dev)
        prefix: device name prefix (default 'tty.usbmodem')

    Returns:
        path of the first entry, by name, whose name starts
        with prefix, or '' if there is none

    Raises:
        OSError: if dev_dir cannot be listed
    """
    for name in sorted(os.listdir(dev_dir)):
        if name.startswith(prefix):
            path = os.path.join(dev_dir, name)
            logger.debug("found device %s", path)
            return path
    logger.debug("no %s* entry in %s", prefix, dev_dir)
    return ''
