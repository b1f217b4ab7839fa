"""Confession Wall: anonymous confessions with a moderated public feed."""

__version__ = "0.1.0"
