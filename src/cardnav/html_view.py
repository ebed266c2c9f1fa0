"""Serialize render models to HTML."""

from __future__ import annotations

from urllib.parse import quote

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PageElement, Tag
from pydantic import BaseModel

from cardnav.schemas.render import (
    Card,
    CodeLines,
    Column,
    Diagnostic,
    Empty,
    Flow,
    Heading,
    Image,
    Link,
    ListEntry,
    Placeholder,
    PreformattedBlock,
    ReferenceText,
    Row,
    Word,
)

# Style flag -> wrapping tag, outermost first.
_STYLE_TAGS = (
    ("bold", "strong"),
    ("italic", "em"),
    ("strike", "s"),
    ("underline", "u"),
    ("code", "code"),
)


def render_html(model: Card | Placeholder) -> str:
    """Return an HTML fragment for a projected card."""
    soup = BeautifulSoup("", "html.parser")
    root = _render(soup, model)
    if root is not None:
        soup.append(root)
    return str(soup)


def link_href(target: str) -> str:
    return "?section=" + quote(target, safe="")


def _render(soup: BeautifulSoup, node: BaseModel) -> PageElement | None:
    if isinstance(node, Placeholder):
        div = soup.new_tag("div", attrs={"class": "card card-empty"})
        message = soup.new_tag("p", attrs={"class": "placeholder"})
        message.string = node.message
        div.append(message)
        return div

    if isinstance(node, Card):
        div = soup.new_tag(
            "div",
            attrs={
                "class": "card",
                "style": f"padding-top: {node.padding_top}px; padding-bottom: {node.padding_bottom}px",
            },
        )
        _append(div, _render(soup, node.heading))
        _append(div, _render(soup, node.body))
        return div

    if isinstance(node, Heading):
        style = node.style
        tag = soup.new_tag(
            f"h{min(node.level, 6)}",
            attrs={
                "style": (
                    f"font-size: {style.font_size}px; "
                    f"font-weight: {'bold' if style.bold else 'normal'}; "
                    f"font-style: {'italic' if style.italic else 'normal'}; "
                    f"color: {style.color}; padding-bottom: {style.padding}px"
                )
            },
        )
        tag.string = node.text
        return tag

    if isinstance(node, Column):
        styles = []
        if node.padding_left:
            styles.append(f"padding-left: {node.padding_left}px")
        classes = "column highlighted" if node.background else "column"
        div = soup.new_tag("div", attrs={"class": classes})
        if styles:
            div["style"] = "; ".join(styles)
        _render_children(soup, div, node.children)
        return div

    if isinstance(node, Row):
        div = soup.new_tag("div", attrs={"class": "row", "style": "display: flex; flex-direction: row"})
        _render_children(soup, div, node.children)
        return div

    if isinstance(node, Flow):
        paragraph = soup.new_tag("p", attrs={"style": f"max-width: {node.width}px"})
        first = True
        for item in node.items:
            element = _render(soup, item)
            if element is None:
                continue
            if not first:
                paragraph.append(NavigableString(" "))
            paragraph.append(element)
            first = False
        return paragraph

    if isinstance(node, Word):
        element: PageElement = NavigableString(node.text)
        for flag, tag_name in reversed(_STYLE_TAGS):
            if getattr(node.style, flag):
                wrapper = soup.new_tag(tag_name)
                wrapper.append(element)
                element = wrapper
        return element

    if isinstance(node, Link):
        anchor = soup.new_tag("a", attrs={"href": link_href(node.target), "data-target": node.target})
        anchor.string = node.text
        return anchor

    if isinstance(node, Diagnostic):
        span = soup.new_tag("span", attrs={"class": "diagnostic"})
        span.string = node.message
        return span

    if isinstance(node, ReferenceText):
        span = soup.new_tag("span", attrs={"class": "reference"})
        span.string = node.text
        return span

    if isinstance(node, Image):
        return soup.new_tag(
            "img",
            attrs={
                "src": node.src,
                "height": str(node.height),
                "style": f"max-width: {node.width}px",
            },
        )

    if isinstance(node, PreformattedBlock):
        pre = soup.new_tag("pre")
        if node.padding_bottom:
            pre["style"] = f"padding-bottom: {node.padding_bottom}px"
        pre.string = node.text
        return pre

    if isinstance(node, CodeLines):
        pre = soup.new_tag("pre", attrs={"class": "code"})
        code = soup.new_tag("code")
        code.string = "\n".join(node.lines)
        pre.append(code)
        return pre

    if isinstance(node, ListEntry):
        div = soup.new_tag("div", attrs={"class": "list-entry", "style": "display: flex"})
        if node.marker:
            marker = soup.new_tag("span", attrs={"class": "marker"})
            marker.string = node.marker
            div.append(marker)
        body = soup.new_tag("div")
        _render_children(soup, body, node.children)
        div.append(body)
        return div

    if isinstance(node, Empty):
        return None

    raise TypeError(f"Unknown render primitive: {node!r}")


def _render_children(soup: BeautifulSoup, parent: Tag, children: list) -> None:
    for child in children:
        _append(parent, _render(soup, child))


def _append(parent: Tag, element: PageElement | None) -> None:
    if element is not None:
        parent.append(element)
