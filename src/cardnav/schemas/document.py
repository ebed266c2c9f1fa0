"""Document AST models produced by the parser adapter."""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class _Node(BaseModel):
    model_config = ConfigDict(frozen=True)


class Location(_Node):
    """1-based source position of a node."""

    line: int = Field(..., ge=1)
    column: int = Field(..., ge=1)


class Named(_Node):
    """Explicit section label taken from a heading."""

    kind: Literal["named"] = "named"
    name: str


class Anonymous(_Node):
    """Label of a section whose heading carries no text."""

    kind: Literal["anonymous"] = "anonymous"
    line_number: int


Label = Annotated[Union[Named, Anonymous], Field(discriminator="kind")]


# Command configuration values


class Variable(_Node):
    kind: Literal["variable"] = "variable"
    value: str


class StringLiteral(_Node):
    kind: Literal["string"] = "string"
    value: str


class IntLiteral(_Node):
    kind: Literal["int"] = "int"
    value: int


class Markup(_Node):
    """Inline markup passed as a command argument, e.g. ``[some *text*]``."""

    kind: Literal["markup"] = "markup"
    runs: list["InlineNode"] = Field(default_factory=list)


ConfigValue = Annotated[
    Union[Variable, StringLiteral, IntLiteral, Markup], Field(discriminator="kind")
]


class Command(_Node):
    """A named directive with positional configuration values."""

    name: str | None = None
    config: list[ConfigValue] = Field(default_factory=list)


# Inline nodes


class Text(_Node):
    kind: Literal["text"] = "text"
    raw: str


class Verbatim(_Node):
    """Text delimited by a mark character such as ``*`` or ``_``."""

    kind: Literal["verbatim"] = "verbatim"
    mark: str = Field(..., min_length=1, max_length=1)
    text: str


class Annotation(_Node):
    """Visible label runs with an optional target and attached command."""

    kind: Literal["annotation"] = "annotation"
    label_runs: list["InlineNode"] = Field(default_factory=list)
    target_text: str | None = None
    command: Command | None = None


class InlineError(_Node):
    kind: Literal["inline_error"] = "inline_error"
    location: Location
    message: str


InlineNode = Annotated[
    Union[Text, Verbatim, Annotation, InlineError], Field(discriminator="kind")
]


# Diverts


class Nested(_Node):
    """Indented block attached to a command."""

    kind: Literal["nested"] = "nested"
    children: list["ContentNode"] = Field(default_factory=list)


class Immediate(_Node):
    """Content attached on the same line as its command."""

    kind: Literal["immediate"] = "immediate"
    children: list["ContentNode"] = Field(default_factory=list)


class Reference(_Node):
    kind: Literal["reference"] = "reference"
    target_text: str


Divert = Annotated[Union[Nested, Immediate, Reference], Field(discriminator="kind")]


# Block nodes


class Paragraph(_Node):
    kind: Literal["paragraph"] = "paragraph"
    inline_runs: list[InlineNode] = Field(default_factory=list)


class Preformatted(_Node):
    kind: Literal["preformatted"] = "preformatted"
    text: str


class ListItem(_Node):
    kind: Literal["list_item"] = "list_item"
    children: list["ContentNode"] = Field(default_factory=list)


class CommandBlock(_Node):
    """Block-level command such as ``! image "cat.png"``."""

    kind: Literal["command"] = "command"
    name: str | None = None
    args: list[ConfigValue] = Field(default_factory=list)
    child: Divert | None = None


class ParseError(_Node):
    kind: Literal["parse_error"] = "parse_error"
    location: Location
    message: str


ContentNode = Annotated[
    Union[Paragraph, Preformatted, ListItem, CommandBlock, ParseError],
    Field(discriminator="kind"),
]


class Section(_Node):
    """One addressable card of a document."""

    level: int = Field(..., ge=1)
    label: Label
    content: list[ContentNode] = Field(default_factory=list)


class Document(_Node):
    """A parsed document: prelude content followed by ordered sections."""

    prelude: list[ContentNode] = Field(default_factory=list)
    sections: list[Section] = Field(default_factory=list)


for _model in (
    Markup,
    Command,
    Annotation,
    Nested,
    Immediate,
    Paragraph,
    ListItem,
    CommandBlock,
    Section,
    Document,
):
    _model.model_rebuild()
