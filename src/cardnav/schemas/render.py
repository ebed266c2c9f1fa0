"""Render model primitives produced by the content-tree projector."""

from __future__ import annotations

from typing import Annotated, Iterator, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from cardnav.schemas.events import Navigate


class _Primitive(BaseModel):
    model_config = ConfigDict(frozen=True)


class StyleFlags(_Primitive):
    """Inline style accumulated while walking inline runs."""

    bold: bool = False
    italic: bool = False
    strike: bool = False
    underline: bool = False
    code: bool = False


class HeadingStyle(_Primitive):
    font_size: int
    bold: bool
    italic: bool
    color: str
    padding: int


class FormatConfig(_Primitive):
    """Layout knobs, in pixels. They size leaves and never change structure."""

    image_height: int = 300
    line_width: int = 600
    left_padding: int = 20
    top_padding: int = 10
    bottom_padding: int = 10


class Word(_Primitive):
    kind: Literal["word"] = "word"
    text: str
    style: StyleFlags = Field(default_factory=StyleFlags)


class Link(_Primitive):
    """Clickable span; activating it navigates to ``target``."""

    kind: Literal["link"] = "link"
    text: str
    target: str

    def activate(self) -> Navigate:
        return Navigate(label=self.target)


class Diagnostic(_Primitive):
    kind: Literal["diagnostic"] = "diagnostic"
    message: str


class Empty(_Primitive):
    kind: Literal["empty"] = "empty"


class ReferenceText(_Primitive):
    kind: Literal["reference"] = "reference"
    text: str


class Flow(_Primitive):
    """Wrapped run of inline primitives, e.g. one paragraph."""

    kind: Literal["flow"] = "flow"
    width: int
    items: list["RenderNode"] = Field(default_factory=list)


class Image(_Primitive):
    kind: Literal["image"] = "image"
    src: str
    height: int
    width: int


class PreformattedBlock(_Primitive):
    kind: Literal["preformatted"] = "preformatted"
    text: str
    padding_bottom: int = 0


class CodeLines(_Primitive):
    kind: Literal["code_lines"] = "code_lines"
    lines: list[str] = Field(default_factory=list)


class ListEntry(_Primitive):
    kind: Literal["list_entry"] = "list_entry"
    marker: str | None = None
    children: list["RenderNode"] = Field(default_factory=list)


class Column(_Primitive):
    kind: Literal["column"] = "column"
    padding_left: int = 0
    background: bool = False
    children: list["RenderNode"] = Field(default_factory=list)


class Row(_Primitive):
    kind: Literal["row"] = "row"
    children: list["RenderNode"] = Field(default_factory=list)


class Heading(_Primitive):
    kind: Literal["heading"] = "heading"
    text: str
    level: int
    style: HeadingStyle


class Card(_Primitive):
    """A projected section."""

    kind: Literal["card"] = "card"
    heading: Heading
    body: Column
    padding_top: int = 0
    padding_bottom: int = 0


class Placeholder(_Primitive):
    kind: Literal["placeholder"] = "placeholder"
    message: str


RenderNode = Annotated[
    Union[
        Word,
        Link,
        Diagnostic,
        Empty,
        ReferenceText,
        Flow,
        Image,
        PreformattedBlock,
        CodeLines,
        ListEntry,
        Column,
        Row,
        Heading,
    ],
    Field(discriminator="kind"),
]

RenderModel = Annotated[Union[Card, Placeholder], Field(discriminator="kind")]

for _model in (Flow, ListEntry, Column, Row, Card):
    _model.model_rebuild()


def iter_nodes(node: BaseModel) -> Iterator[BaseModel]:
    """Yield ``node`` and every primitive below it, depth first."""
    yield node
    if isinstance(node, Card):
        yield from iter_nodes(node.heading)
        yield from iter_nodes(node.body)
        return
    children: list[BaseModel] = []
    if isinstance(node, Flow):
        children = node.items
    elif isinstance(node, (ListEntry, Column, Row)):
        children = node.children
    for child in children:
        yield from iter_nodes(child)


def iter_links(node: BaseModel) -> Iterator[Link]:
    """Yield every clickable link in a render tree."""
    for item in iter_nodes(node):
        if isinstance(item, Link):
            yield item
