"""Rendering facade for the board games."""

from .board import HELP_TEXT, BoardRenderer, BoardTheme

__all__ = ["BoardRenderer", "BoardTheme", "HELP_TEXT"]
