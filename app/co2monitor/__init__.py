"""Serial CO2/humidity/temperature monitor."""
