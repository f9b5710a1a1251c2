"""Opponent package: move-selection strategies and their Qt worker bridge.

The Qt modules are imported lazily by callers so that the pure-Python parts
stay usable without PyQt6 installed.
"""

from pocketchess.opponent.base import IOpponent, RandomOpponent

__all__ = [
    "IOpponent",
    "RandomOpponent",
]
