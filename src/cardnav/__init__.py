"""cardnav: browse a markup document one section card at a time."""

from cardnav.exceptions import (
    CardnavError,
    DocumentNotFoundError,
    DocumentTooLargeError,
    FetchError,
    LoadError,
)
from cardnav.navigation import NavigationController, reduce
from cardnav.parser import ParserConfig, parse
from cardnav.projector import project
from cardnav.resolver import resolve
from cardnav.schemas import Document, FormatConfig, LoadDocument, Navigate, NavigationState, Section

__all__ = [
    "CardnavError",
    "Document",
    "DocumentNotFoundError",
    "DocumentTooLargeError",
    "FetchError",
    "FormatConfig",
    "LoadDocument",
    "LoadError",
    "Navigate",
    "NavigationController",
    "NavigationState",
    "ParserConfig",
    "Section",
    "parse",
    "project",
    "reduce",
    "resolve",
]
