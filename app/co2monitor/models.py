"""
Data models for the CO2 monitor.

SensorRecord: one sample (CO2 ppm, relative humidity, temperature).
"""

from collections import namedtuple


class SensorRecord(namedtuple('SensorRecord', ['co2', 'humidity', 'temperature'])):
    """
    Immutable sample read from the sensor.

    Only built once all three fields have been parsed.
    """

    __slots__ = ()

    def as_dict(self):
        """Field mapping used for output."""
        return {
            'co2': self.co2,
            'hum': self.humidity,
            'temp': self.temperature,
        }
