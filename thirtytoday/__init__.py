"""News, events and weather from 30 years ago today."""

__version__ = "0.1.0"
