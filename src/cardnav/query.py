"""Read-only queries over a parsed document."""

from __future__ import annotations

from typing import Iterable

from cardnav.schemas import (
    Annotation,
    Anonymous,
    CommandBlock,
    ConfigValue,
    ContentNode,
    Document,
    Immediate,
    InlineNode,
    IntLiteral,
    Label,
    ListItem,
    Markup,
    Named,
    Nested,
    Paragraph,
    Section,
    Text,
    Verbatim,
)

NO_ARG = "noArg"
LINK_COMMAND = "link"


def find_section_by_label(label: str, sections: Iterable[Section]) -> Section | None:
    """Return the first section, in document order, named exactly ``label``.

    Anonymous sections never match a string lookup.
    """
    for section in sections:
        if isinstance(section.label, Named) and section.label.name == label:
            return section
    return None


def extract_label_text(label: Label) -> str:
    """Return the label name, or the line number for anonymous labels."""
    if isinstance(label, Anonymous):
        return str(label.line_number)
    return label.name


def display_label(label: Label) -> str:
    """Human-facing form of a label, e.g. ``line 42`` for anonymous sections."""
    if isinstance(label, Anonymous):
        return f"line {label.line_number}"
    return label.name


def get_raw_text(inline: InlineNode) -> str | None:
    """Return the text of a plain ``Text`` run and ``None`` for anything else."""
    if isinstance(inline, Text):
        return inline.raw
    return None


def format_error(line: int, column: int, message: str) -> str:
    return f"Error (line {line}, column {column}): {message}"


def stringify_inline(inline: InlineNode) -> str:
    """Best-effort plain text for one inline run."""
    if isinstance(inline, Text):
        return inline.raw
    if isinstance(inline, Verbatim):
        return inline.text
    if isinstance(inline, Annotation):
        return " ".join(stringify_inline(run) for run in inline.label_runs)
    return format_error(inline.location.line, inline.location.column, inline.message)


def flatten_text_content(runs: Iterable[InlineNode]) -> list[str]:
    """Stringify each run, one output string per input run."""
    return [stringify_inline(run) for run in runs]


def extract_config_args(config: Iterable[ConfigValue]) -> list[str]:
    """Turn command configuration values into positional string arguments.

    A ``Markup`` value expands in place to the flattened text of its runs, so
    it may contribute zero or many arguments.
    """
    args: list[str] = []
    for value in config:
        if isinstance(value, Markup):
            args.extend(flatten_text_content(value.runs))
        elif isinstance(value, IntLiteral):
            args.append(str(value.value))
        else:
            args.append(value.value)
    return args


def command_arg_at(args: list[str], index: int) -> str:
    """Return ``args[index]`` or ``NO_ARG`` when the index is out of range."""
    if 0 <= index < len(args):
        return args[index]
    return NO_ARG


def link_target(annotation: Annotation) -> str | None:
    """Destination label of a ``link`` annotation, ``None`` for other annotations."""
    command = annotation.command
    if command is None or command.name != LINK_COMMAND:
        return None
    return command_arg_at(extract_config_args(command.config), 0)


def _inline_link_targets(runs: Iterable[InlineNode]) -> list[str]:
    targets: list[str] = []
    for run in runs:
        if not isinstance(run, Annotation):
            continue
        target = link_target(run)
        if target is not None:
            targets.append(target)
        targets.extend(_inline_link_targets(run.label_runs))
    return targets


def collect_link_targets(content: Iterable[ContentNode]) -> list[str]:
    """Every ``link`` annotation target in a content tree, in document order."""
    targets: list[str] = []
    for node in content:
        if isinstance(node, Paragraph):
            targets.extend(_inline_link_targets(node.inline_runs))
        elif isinstance(node, ListItem):
            targets.extend(collect_link_targets(node.children))
        elif isinstance(node, CommandBlock):
            for value in node.args:
                if isinstance(value, Markup):
                    targets.extend(_inline_link_targets(value.runs))
            if isinstance(node.child, (Nested, Immediate)):
                targets.extend(collect_link_targets(node.child.children))
    return targets


def broken_links(document: Document) -> list[tuple[str, str]]:
    """Return ``(section label, target)`` pairs whose target resolves to nothing."""
    broken: list[tuple[str, str]] = []
    for section in document.sections:
        for target in collect_link_targets(section.content):
            if find_section_by_label(target, document.sections) is None:
                broken.append((extract_label_text(section.label), target))
    return broken
