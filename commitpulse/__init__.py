"""commitpulse — backdated commit activity generator."""

__version__ = "1.0.0"
