"""Matchmaking lobby server, binary wire messages and pygame menu widgets for an arena game."""

__version__ = "0.1.0"