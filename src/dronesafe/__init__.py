"""Drone trajectory replay and safety analysis."""

__version__ = "0.1.0"
