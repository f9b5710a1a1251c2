"""pocketchess: chess rules engine with an undoable game session."""

__version__ = "0.1.0"
