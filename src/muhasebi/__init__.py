"""AI Muhasebi risk trend and subscription usage core."""

__version__ = "0.1.0"
