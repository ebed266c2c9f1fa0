"""Shared schemas for cardnav."""

from cardnav.schemas.document import (
    Annotation,
    Anonymous,
    Command,
    CommandBlock,
    ConfigValue,
    ContentNode,
    Divert,
    Document,
    Immediate,
    InlineError,
    InlineNode,
    IntLiteral,
    Label,
    ListItem,
    Location,
    Markup,
    Named,
    Nested,
    Paragraph,
    ParseError,
    Preformatted,
    Reference,
    Section,
    StringLiteral,
    Text,
    Variable,
    Verbatim,
)
from cardnav.schemas.events import Event, LoadDocument, Navigate, NavigationState
from cardnav.schemas.render import FormatConfig, RenderModel, StyleFlags

__all__ = [
    "Annotation",
    "Anonymous",
    "Command",
    "CommandBlock",
    "ConfigValue",
    "ContentNode",
    "Divert",
    "Document",
    "Event",
    "FormatConfig",
    "Immediate",
    "InlineError",
    "InlineNode",
    "IntLiteral",
    "Label",
    "ListItem",
    "LoadDocument",
    "Location",
    "Markup",
    "Named",
    "Navigate",
    "NavigationState",
    "Nested",
    "Paragraph",
    "ParseError",
    "Preformatted",
    "Reference",
    "RenderModel",
    "Section",
    "StringLiteral",
    "StyleFlags",
    "Text",
    "Variable",
    "Verbatim",
]
