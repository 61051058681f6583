"""Submarine return tracker and notifier."""

__version__ = "0.1.0"
