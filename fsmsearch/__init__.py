"""Finite-state-machine regex engines, trigram-indexed file search and an interactive search view."""

__version__ = "0.1.0"