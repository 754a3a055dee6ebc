"""Daily news image fetching, caching and delivery."""

__version__ = "0.1.0"
