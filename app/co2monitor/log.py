"""
Logging configuration for the CO2 monitor.
Log records go to stderr; stdout carries the rendered samples.
"""

import logging
import sys

# Module shortnames mapping
MODULE_MAP = {
    'locator': 'co2monitor.locator',
    'session': 'co2monitor.session',
    'stream': 'co2monitor.stream',
    'reader': 'co2monitor.reader',
    'parser': 'co2monitor.parser',
    'render': 'co2monitor.render',
    'monitor': 'co2monitor.monitor',
    'main': 'co2monitor.main',
    'all': 'co2monitor',
}


def setup_logging(debug_modules=None, stream=None):
    """
    Configure logging based on debug module list.

    Args:
        debug_modules: comma-separated string of module shortnames,
                       or None for default (warnings only)
        stream: handler target (default sys.stderr)

    Returns:
        the package root logger
    """
    fmt = '[%(name)s] %(message)s'
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter(fmt))

    # Set root co2monitor logger to WARNING by default
    root_logger = logging.getLogger('co2monitor')
    root_logger.setLevel(logging.WARNING)
    root_logger.addHandler(handler)

    if not debug_modules:
        return root_logger

    # Parse and enable debug for specified modules
    for name in debug_modules.split(','):
        name = name.strip()
        if not name:
            continue

        module_name = MODULE_MAP.get(name, name)
        logger = logging.getLogger(module_name)
        logger.setLevel(logging.DEBUG)

    return root_logger
