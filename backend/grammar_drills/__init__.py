"""Grammar Drills: language-learning exercise server."""

__version__ = "0.1.0"
