"""
Record parser for the CO2 monitor.

Turns a device line such as ``CO2=415,HUM=55.2,TMP=24.0`` into a
SensorRecord. Numbers are read the way a scanf-style scan reads them:
leading whitespace is skipped, an optional sign is accepted and anything
after the number is ignored.
"""

import logging
import re

from .models import SensorRecord

logger = logging.getLogger(__name__)

_INT_RE = re.compile(r'\s*([+-]?\d+)')
_FLOAT_RE = re.compile(
    r'\s*([+-]?(?:(?:\d+\.?\d*|\.\d+)([eE][+-]?\d*)?|inf(?:inity)?|nan))',
    re.IGNORECASE
)

# Range of a 64-bit signed integer
INT_MIN = -(1 << 63)
INT_MAX = (1 << 63) - 1

STAGE_PAIR_SPLIT = 'pair-split'
STAGE_CO2 = 'co2'
STAGE_HUM = 'hum'
STAGE_TMP = 'tmp'


class ParseError(ValueError):
    """
    Raised when a line cannot be turned into a SensorRecord.

    Attributes:
        stage: 'pair-split', 'co2', 'hum' or 'tmp'
        cause: description of what went wrong
    """

    _MESSAGES = {
        STAGE_PAIR_SPLIT: "invalid data format",
        STAGE_CO2: "failed to parse CO2 value",
        STAGE_HUM: "failed to parse HUM value",
        STAGE_TMP: "failed to parse TMP value",
    }

    def __init__(self, stage, cause):
        self.stage = stage
        self.cause = cause
        message = "{}: {}".format(self._MESSAGES.get(stage, stage), cause)
        super(ParseError, self).__init__(message)


def _scan(pattern, text, kind):
    match = pattern.match(text)
    if match is None:
        if not text.strip():
            raise ValueError("missing value")
        raise ValueError("expected {}, got {!r}".format(kind, text))
    return match


def scan_int(text):
    """
    Read a base-10 integer from the start of text.

    Raises:
        ValueError: if text does not start with an integer, or the integer
                    does not fit in 64 bits
    """
    value = int(_scan(_INT_RE, text, 'integer').group(1))
    if not INT_MIN <= value <= INT_MAX:
        raise ValueError("value out of range: {}".format(value))
    return value


def scan_float(text):
    """
    Read a floating-point number from the start of text.

    Raises:
        ValueError: if text does not start with a number, or an exponent
                    marker is not followed by digits
    """
    match = _scan(_FLOAT_RE, text, 'number')
    exponent = match.group(2)
    if exponent is not None and not exponent[-1].isdigit():
        raise ValueError("exponent without digits: {!r}".format(text))
    return float(match.group(1))


def split_pairs(line):
    """
    Split a line into a key -> raw value mapping.

    Later occurrences of a key replace earlier ones.

    Raises:
        ParseError: if a pair does not split into exactly two tokens on '='
    """
    fields = {}
    for pair in line.split(','):
        tokens = pair.split('=')
        if len(tokens) != 2:
            raise ParseError(STAGE_PAIR_SPLIT, "bad pair {!r}".format(pair))
        key, value = tokens
        fields[key] = value
    return fields


def parse(line):
    """
    Parse one device line (terminator already removed).

    Args:
        line: text of comma-separated KEY=VALUE pairs

    Returns:
        SensorRecord

    Raises:
        ParseError: identifying the stage that failed
    """
    fields = split_pairs(line)

    try:
        co2 = scan_int(fields.get('CO2', ''))
    except ValueError as e:
        raise ParseError(STAGE_CO2, e)

    try:
        humidity = scan_float(fields.get('HUM', ''))
    except ValueError as e:
        raise ParseError(STAGE_HUM, e)

    try:
        temperature = scan_float(fields.get('TMP', ''))
    except ValueError as e:
        raise ParseError(STAGE_TMP, e)

    logger.debug("parsed co2=%d hum=%s tmp=%s", co2, humidity, temperature)
    return SensorRecord(co2, humidity, temperature)
