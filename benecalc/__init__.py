"""Bene Calc - Employee benefits cost calculator."""

__version__ = "0.1.0"
