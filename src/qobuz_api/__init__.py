"""Qobuz API client with metadata embedding for downloaded tracks."""

__version__ = "0.3.0"
