from __future__ import annotations


class SeoInstructError(Exception):
    """Base class for errors raised at the package boundary."""


class ConfigError(SeoInstructError, ValueError):
    """Raised when analysis options cannot be used."""


class FetchError(SeoInstructError):
    """Raised when a page or resource could not be retrieved."""

    def __init__(self, url: str, message: str) -> None:
        super().__init__(f"{url}: {message}")
        self.url = url
