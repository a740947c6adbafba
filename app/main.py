#!/usr/bin/env python
# SPDX-License-Identifier: MIT
"""
CO2 Monitor - Main entry point.

Finds the sensor under /dev, starts a logging session and prints each
sample as JSON until interrupted (Ctrl+C or SIGTERM).

Usage:
    python main.py                     # Normal mode
    python main.py --debug reader,parser  # Enable debug logging for modules
"""

import argparse
import logging
import sys
import threading
import time

from co2monitor.locator import locate
from co2monitor.log import setup_logging
from co2monitor.monitor import Monitor
from co2monitor.session import (
    SessionController,
    install_signal_handlers,
    restore_signal_handlers,
)
from co2monitor.settings import load_settings
from co2monitor.stream import StreamError

logger = logging.getLogger('co2monitor.main')


def run(config, stream_factory=None, out=None, cancel=None, sleep=None):
    """
    Locate the device, run a monitoring session and shut it down.

    Args:
        config: dict from load_settings()
        stream_factory: callable(path, baudrate) -> ByteStream (default serial)
        out: text file for rendered samples (default sys.stdout)
        cancel: threading.Event that ends the session (set by SIGINT/SIGTERM)
        sleep: delay function passed to the controller

    Returns:
        process exit status: 0 after a requested stop, 1 on a fatal error
    """
    try:
        path = locate(config['device_dir'], config['device_prefix'])
    except OSError as e:
        logger.error("Cannot list %s: %s", config['device_dir'], e)
        return 1
    if not path:
        logger.error("No device found (%s/%s*)", config['device_dir'], config['device_prefix'])
        return 1

    if cancel is None:
        cancel = threading.Event()
    controller = SessionController(stream_factory, sleep=sleep or time.sleep)

    with controller:
        try:
            stream = controller.open(path, config['baudrate'])
        except StreamError as e:
            logger.error("%s", e)
            return 1
        print("[CONNECTED] {} @ {}".format(path, config['baudrate']), file=sys.stderr)

        previous = install_signal_handlers(cancel)
        try:
            try:
                controller.handshake()
                monitor = Monitor(stream, out, cancel, config['poll_interval'])
                monitor.run()
            except StreamError as e:
                logger.error("%s", e)
                return 1

            # Handlers stay installed so a repeated signal cannot cut the stop short
            print("[INFO] Stop requested. Sending stop command...", file=sys.stderr)
            try:
                controller.shutdown()
            except StreamError as e:
                logger.error("%s", e)
                return 1
        finally:
            restore_signal_handlers(previous)

    print("[INFO] Done. Samples: {}".format(monitor.records), file=sys.stderr)
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(description='CO2 Monitor')
    parser.add_argument(
        '--debug', '-d',
        metavar='MODULES',
        help='Enable debug logging for modules '
             '(comma-separated: locator,session,stream,reader,parser,render,monitor,all)'
    )
    args = parser.parse_args(argv)

    setup_logging(args.debug)

    return run(load_settings())


if __name__ == '__main__':
    sys.exit(main())
