"""Rules, move notation and search for the Quorum board game."""

__version__ = "0.1.0"
__all__ = ["pieces", "hashes", "board", "ai", "notation"]