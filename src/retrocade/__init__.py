"""RETROCADE - a fixed shooter and two platformers on one simulation core."""

__version__ = "0.1.0"
