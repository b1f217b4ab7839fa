"""Repositories wrapping database access."""

from .confession_repo import ConfessionRepository

__all__ = ["ConfessionRepository"]
