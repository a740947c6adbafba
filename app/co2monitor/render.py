"""
Output formatting for the CO2 monitor.
"""

import json
import logging
import sys

logger = logging.getLogger(__name__)


def render(record):
    """
    Render a record as indented JSON.

    Raises:
        ValueError: if a field is not finite (NaN or infinity)
    """
    return json.dumps(record.as_dict(), indent=2, allow_nan=False)


def present(record, out=None):
    """
    Write a rendered record to out (default sys.stdout).

    Returns:
        True if written, False if the record could not be rendered
    """
    try:
        text = render(record)
    except (TypeError, ValueError) as e:
        logger.warning("Failed to marshal JSON data: %s", e)
        return False

    out = out if out is not None else sys.stdout
    out.write(text + '\n')
    out.flush()
    return True
