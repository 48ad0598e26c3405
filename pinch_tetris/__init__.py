"""Falling-block puzzle driven by two-handed pinch gestures."""

__version__ = "0.1.0"
