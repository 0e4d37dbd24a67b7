"""Async client, data models and HTML/JSON parsers for the Continente online supermarket."""

__version__ = "0.1.0"
__all__ = ["client", "errors", "models", "scraper"]