"""Exceptions raised by the shop client and its parsers."""


class ContinenteError(Exception):
    """Base class for every error raised by this package."""


class NoResultsError(ContinenteError):
    """A listing page held no products or entries."""

    def __init__(self, message: str = "No results found") -> None:
        super().__init__(message)


class ParseError(ContinenteError):
    """A response from an endpoint could not be understood."""

    def __init__(self, url: str, message: str) -> None:
        self.url = url
        self.message = message
        super().__init__(f"Failed to parse response from {url}: {message}")