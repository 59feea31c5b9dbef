"""Helpers shared by the bot entry point and the game package."""
