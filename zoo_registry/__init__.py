"""Zoo attraction registration system."""

__version__ = "1.0.0"
