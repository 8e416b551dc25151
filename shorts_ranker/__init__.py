"""Shorts Ranker: compile five ranked clips into one narrated countdown video."""

__version__ = "0.1.0"
