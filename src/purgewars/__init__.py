"""Purge Wars: battle simulation, deck lifecycle and world control."""

__version__ = "0.1.0"
