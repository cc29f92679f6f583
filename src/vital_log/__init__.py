"""vital-log: blood pressure, health metric and workout tracking."""

__version__ = "0.1.0"
