"""Memory retrieval for character-chat worlds."""

__version__ = "0.1.0"
