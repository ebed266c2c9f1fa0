"""Project a section's content tree into a render model."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterable

from cardnav.query import (
    command_arg_at,
    extract_config_args,
    extract_label_text,
    flatten_text_content,
    format_error,
    get_raw_text,
    link_target,
)
from cardnav.schemas import (
    Annotation,
    CommandBlock,
    ContentNode,
    Immediate,
    InlineError,
    InlineNode,
    ListItem,
    Nested,
    Paragraph,
    ParseError,
    Preformatted,
    Reference,
    Section,
    Text,
    Verbatim,
)
from cardnav.schemas.render import (
    Card,
    CodeLines,
    Column,
    Diagnostic,
    Empty,
    Flow,
    FormatConfig,
    Heading,
    HeadingStyle,
    Image,
    Link,
    ListEntry,
    Placeholder,
    PreformattedBlock,
    ReferenceText,
    RenderModel,
    RenderNode,
    Row,
    StyleFlags,
    Word,
)

NO_SECTION_MESSAGE = "No section to show"
NO_LABEL = "((no label))"
BULLET = "•"

IMAGE_COMMAND = "image"

_MARK_STYLES = {
    "*": "bold",
    "_": "italic",
    "~": "strike",
    "`": "code",
}

# Level 1 through 4; deeper headings share the last tier.
_HEADING_STYLES: tuple[HeadingStyle, ...] = (
    HeadingStyle(font_size=32, bold=True, italic=False, color="#1a1a1a", padding=16),
    HeadingStyle(font_size=24, bold=True, italic=False, color="#333333", padding=12),
    HeadingStyle(font_size=20, bold=True, italic=True, color="#4d4d4d", padding=8),
    HeadingStyle(font_size=16, bold=False, italic=True, color="#666666", padding=6),
)


class ContainerKind(str, Enum):
    """Layout behavior selected by the nearest enclosing command name."""

    COLUMN = "column"
    ROW = "row"
    LIST = "list"
    NUMBERED = "numbered"
    CODE = "code"

    @classmethod
    def from_command(cls, name: str | None) -> "ContainerKind":
        for kind in cls:
            if kind.value == name and kind is not cls.COLUMN:
                return kind
        return cls.COLUMN


@dataclass(frozen=True)
class ProjectionContext:
    """Formatting context threaded down the tree walk."""

    container: ContainerKind = ContainerKind.COLUMN
    sibling_index: int = 0
    style: StyleFlags = field(default_factory=StyleFlags)

    def list_marker(self) -> str | None:
        if self.container is ContainerKind.LIST:
            return BULLET
        if self.container is ContainerKind.NUMBERED:
            return f"{self.sibling_index + 1}."
        return None


def heading_style(level: int) -> HeadingStyle:
    """Visual tier for a heading level; every level >= 1 maps to a tier."""
    tier = min(max(level, 1), len(_HEADING_STYLES))
    return _HEADING_STYLES[tier - 1]


def project(config: FormatConfig | None, section: Section | None) -> RenderModel:
    """Build the render model for ``section``, or a placeholder when there is none."""
    cfg = config or FormatConfig()
    if section is None:
        return Placeholder(message=NO_SECTION_MESSAGE)

    heading = Heading(
        text=extract_label_text(section.label),
        level=section.level,
        style=heading_style(section.level),
    )
    body = Column(children=project_blocks(section.content, ProjectionContext(), cfg))
    return Card(
        heading=heading,
        body=body,
        padding_top=cfg.top_padding,
        padding_bottom=cfg.bottom_padding,
    )


def project_blocks(
    nodes: Iterable[ContentNode], context: ProjectionContext, config: FormatConfig
) -> list[RenderNode]:
    return [
        project_block(node, replace(context, sibling_index=index), config)
        for index, node in enumerate(nodes)
    ]


def project_block(node: ContentNode, context: ProjectionContext, config: FormatConfig) -> RenderNode:
    """Translate one content node into a render primitive."""
    if isinstance(node, Paragraph):
        return Flow(width=config.line_width, items=project_inlines(node.inline_runs, context.style))

    if isinstance(node, Preformatted):
        padding = config.bottom_padding if node.text.endswith("\n") else 0
        return PreformattedBlock(text=node.text, padding_bottom=padding)

    if isinstance(node, ListItem):
        return ListEntry(
            marker=context.list_marker(),
            children=project_blocks(node.children, context, config),
        )

    if isinstance(node, CommandBlock):
        return _project_command(node, context, config)

    if isinstance(node, ParseError):
        return Diagnostic(message=format_error(node.location.line, node.location.column, node.message))

    raise TypeError(f"Unknown content node: {node!r}")


def _project_command(node: CommandBlock, context: ProjectionContext, config: FormatConfig) -> RenderNode:
    if node.name == IMAGE_COMMAND:
        src = command_arg_at(extract_config_args(node.args), 0)
        return Image(src=src, height=config.image_height, width=config.line_width)

    child = node.child
    kind = ContainerKind.from_command(node.name)
    inner = ProjectionContext(container=kind, style=context.style)

    if isinstance(child, Nested):
        if kind is ContainerKind.ROW:
            return Row(children=project_blocks(child.children, inner, config))
        if kind is ContainerKind.CODE:
            return CodeLines(lines=code_lines(child.children))
        return Column(
            padding_left=config.left_padding,
            children=project_blocks(child.children, inner, config),
        )

    if isinstance(child, Immediate):
        return Column(background=True, children=project_blocks(child.children, inner, config))

    if isinstance(child, Reference):
        return ReferenceText(text=child.target_text)

    return Empty()


def code_lines(nodes: Iterable[ContentNode]) -> list[str]:
    """Literal text of the ``Text`` runs in the given paragraphs, one line per run.

    Anything that is not plain text is omitted.
    """
    lines: list[str] = []
    for node in nodes:
        if not isinstance(node, Paragraph):
            continue
        for run in node.inline_runs:
            raw = get_raw_text(run)
            if raw is not None:
                lines.append(raw)
    return lines


def project_inlines(runs: Iterable[InlineNode], style: StyleFlags) -> list[RenderNode]:
    items: list[RenderNode] = []
    for run in runs:
        items.extend(project_inline(run, style))
    return items


def project_inline(run: InlineNode, style: StyleFlags) -> list[RenderNode]:
    """Translate one inline run; text splits into one ``Word`` per token."""
    if isinstance(run, Text):
        return _words(run.raw, style)

    if isinstance(run, Verbatim):
        return _words(run.text, apply_mark(style, run.mark))

    if isinstance(run, Annotation):
        return [_project_annotation(run)]

    if isinstance(run, InlineError):
        return [Diagnostic(message=format_error(run.location.line, run.location.column, run.message))]

    raise TypeError(f"Unknown inline node: {run!r}")


def apply_mark(style: StyleFlags, mark: str) -> StyleFlags:
    """Toggle the style flag for a verbatim mark; unknown marks change nothing."""
    flag = _MARK_STYLES.get(mark)
    if flag is None:
        return style
    return style.model_copy(update={flag: not getattr(style, flag)})


def _project_annotation(annotation: Annotation) -> RenderNode:
    labels = flatten_text_content(annotation.label_runs)
    text = labels[0] if labels else NO_LABEL
    target = link_target(annotation)
    if target is None:
        return Empty()
    return Link(text=text, target=target)


def _words(text: str, style: StyleFlags) -> list[RenderNode]:
    return [Word(text=word, style=style) for word in text.split()]
