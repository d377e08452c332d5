"""Sphere-traced ASCII cube for the terminal."""

__version__ = "0.1.0"
