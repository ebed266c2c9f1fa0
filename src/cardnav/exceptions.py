"""Custom exceptions for cardnav.

Parsing, resolution and projection never raise; these cover loading documents
from the outside world.
"""


class CardnavError(Exception):
    """Base exception for cardnav operations."""


class LoadError(CardnavError):
    """Error while loading document text."""


class DocumentNotFoundError(LoadError):
    """The requested document does not exist."""


class DocumentTooLargeError(LoadError):
    """The document exceeds the configured size limit."""


class FetchError(LoadError):
    """Error during network fetching."""
