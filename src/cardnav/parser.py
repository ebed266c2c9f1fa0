"""Parse card markup into a Document AST.

The parser never raises on malformed input. Fragments it cannot interpret
become ``ParseError`` (block level) or ``InlineError`` (inline level) nodes
carrying their source line and column, so the rest of the document still
renders.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict

from cardnav.schemas import (
    Annotation,
    Anonymous,
    Command,
    CommandBlock,
    ConfigValue,
    ContentNode,
    Document,
    Immediate,
    InlineError,
    InlineNode,
    IntLiteral,
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

_HEADING_RE = re.compile(r"^(#+)(?:[ \t]+(.*))?$")
_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_\-]*$")
_INT_RE = re.compile(r"^-?\d+$")
_WORD_RE = re.compile(r"[^\s\"\[\]():{}]+")
_TAB_SIZE = 4


class ParserConfig(BaseModel):
    """Markup syntax knobs."""

    model_config = ConfigDict(frozen=True)

    verbatim_marks: frozenset[str] = frozenset("*_~`")
    preformatted_fence: str = "```"
    command_prefix: str = "!"
    list_marker: str = "-"
    # Commands whose nested body is kept as literal lines.
    literal_commands: frozenset[str] = frozenset({"code"})


@dataclass(frozen=True)
class _Line:
    """A source line; ``offset`` counts characters removed by dedenting."""

    number: int
    text: str
    offset: int = 0

    @property
    def indent(self) -> int:
        return len(self.text) - len(self.text.lstrip(" "))

    @property
    def is_blank(self) -> bool:
        return not self.text.strip()


class _SyntaxError(Exception):
    def __init__(self, column: int, message: str) -> None:
        super().__init__(message)
        self.column = column
        self.message = message


@dataclass
class _CommandHeader:
    name: str | None = None
    args: list[ConfigValue] = field(default_factory=list)
    divert: str | None = None  # "nested", "immediate" or "reference"
    divert_text: str = ""
    divert_column: int = 0


def parse(config: ParserConfig | None, text: str) -> Document:
    """Parse markup text into a prelude and ordered sections."""
    cfg = config or ParserConfig()
    lines = [
        _Line(number=index, text=raw.expandtabs(_TAB_SIZE).rstrip())
        for index, raw in enumerate(text.splitlines(), start=1)
    ]

    prelude_lines: list[_Line] = []
    headings: list[tuple[int, Named | Anonymous, list[_Line]]] = []
    in_fence = False
    for line in lines:
        if line.text.strip() == cfg.preformatted_fence:
            in_fence = not in_fence
        match = None if in_fence else _HEADING_RE.match(line.text)
        if match:
            title = (match.group(2) or "").strip()
            label = Named(name=title) if title else Anonymous(line_number=line.number)
            headings.append((len(match.group(1)), label, []))
            continue
        if headings:
            headings[-1][2].append(line)
        else:
            prelude_lines.append(line)

    sections = [
        Section(level=level, label=label, content=_parse_blocks(body, cfg))
        for level, label, body in headings
    ]
    return Document(prelude=_parse_blocks(prelude_lines, cfg), sections=sections)


def _parse_blocks(lines: list[_Line], cfg: ParserConfig) -> list[ContentNode]:
    nodes: list[ContentNode] = []
    index = 0
    while index < len(lines):
        line = lines[index]
        if line.is_blank:
            index += 1
            continue
        stripped = line.text.strip()
        if stripped == cfg.preformatted_fence:
            index = _parse_preformatted(lines, index, cfg, nodes)
        elif _is_list_item(stripped, cfg):
            index = _parse_list_item(lines, index, cfg, nodes)
        elif stripped.startswith(cfg.command_prefix):
            index = _parse_command_block(lines, index, cfg, nodes)
        else:
            index = _parse_paragraph(lines, index, cfg, nodes)
    return nodes


def _is_list_item(stripped: str, cfg: ParserConfig) -> bool:
    return stripped == cfg.list_marker or stripped.startswith(cfg.list_marker + " ")


def _starts_block(line: _Line, cfg: ParserConfig) -> bool:
    stripped = line.text.strip()
    return (
        stripped == cfg.preformatted_fence
        or _is_list_item(stripped, cfg)
        or stripped.startswith(cfg.command_prefix)
    )


def _column(line: _Line, index: int) -> int:
    return line.offset + index + 1


def _parse_preformatted(
    lines: list[_Line], start: int, cfg: ParserConfig, nodes: list[ContentNode]
) -> int:
    opening = lines[start]
    fence_indent = opening.indent
    body: list[str] = []
    index = start + 1
    while index < len(lines):
        if lines[index].text.strip() == cfg.preformatted_fence:
            nodes.append(Preformatted(text="".join(body)))
            return index + 1
        body.append(_dedent_text(lines[index].text, fence_indent) + "\n")
        index += 1

    nodes.append(Preformatted(text="".join(body)))
    nodes.append(
        ParseError(
            location=Location(line=opening.number, column=_column(opening, fence_indent)),
            message="unterminated preformatted block",
        )
    )
    return index


def _parse_list_item(
    lines: list[_Line], start: int, cfg: ParserConfig, nodes: list[ContentNode]
) -> int:
    line = lines[start]
    marker_column = line.indent
    text_start = marker_column + len(cfg.list_marker)
    rest = line.text[text_start:]
    lead = len(rest) - len(rest.lstrip())

    children: list[ContentNode] = []
    if rest.strip():
        children.append(
            Paragraph(
                inline_runs=_parse_inline(
                    rest.strip(), line.number, line.offset + text_start + lead, cfg
                )
            )
        )

    block, end = _collect_indented(lines, start + 1, marker_column)
    children.extend(_parse_blocks(block, cfg))
    nodes.append(ListItem(children=children))
    return end


def _parse_command_block(
    lines: list[_Line], start: int, cfg: ParserConfig, nodes: list[ContentNode]
) -> int:
    line = lines[start]
    header_start = line.indent + len(cfg.command_prefix)
    try:
        header = _parse_command_header(
            line.text[header_start:],
            line.number,
            line.offset + header_start,
            cfg,
            allow_divert=True,
        )
    except _SyntaxError as exc:
        nodes.append(
            ParseError(location=Location(line=line.number, column=exc.column), message=exc.message)
        )
        # Skip the indented body so it does not render as loose paragraphs.
        _, end = _collect_indented(lines, start + 1, line.indent)
        return end

    if header.divert == "nested":
        block, end = _collect_indented(lines, start + 1, line.indent)
        if header.name in cfg.literal_commands:
            child = Nested(children=_literal_body(block))
        else:
            child = Nested(children=_parse_blocks(block, cfg))
    elif header.divert == "immediate":
        end = start + 1
        runs = _parse_inline(header.divert_text, line.number, header.divert_column - 1, cfg)
        child = Immediate(children=[Paragraph(inline_runs=runs)])
    elif header.divert == "reference":
        end = start + 1
        child = Reference(target_text=header.divert_text)
    else:
        end = start + 1
        child = None

    nodes.append(CommandBlock(name=header.name, args=header.args, child=child))
    return end


def _parse_paragraph(
    lines: list[_Line], start: int, cfg: ParserConfig, nodes: list[ContentNode]
) -> int:
    runs: list[InlineNode] = []
    index = start
    while index < len(lines):
        line = lines[index]
        if line.is_blank or (index > start and _starts_block(line, cfg)):
            break
        runs.extend(_parse_inline(line.text.strip(), line.number, line.offset + line.indent, cfg))
        index += 1
    nodes.append(Paragraph(inline_runs=runs))
    return index


def _literal_body(block: list[_Line]) -> list[ContentNode]:
    """One unparsed ``Text`` run per line, indentation and blank lines kept."""
    if not block:
        return []
    return [Paragraph(inline_runs=[Text(raw=line.text) for line in block])]


def _collect_indented(lines: list[_Line], start: int, parent_indent: int) -> tuple[list[_Line], int]:
    """Collect the block indented deeper than ``parent_indent``, dedented."""
    end = start
    last_content = start
    while end < len(lines):
        line = lines[end]
        if not line.is_blank and line.indent <= parent_indent:
            break
        end += 1
        if not line.is_blank:
            last_content = end
    block = lines[start:last_content]
    indents = [line.indent for line in block if not line.is_blank]
    if not indents:
        return [], last_content
    width = min(indents)
    dedented = [
        _Line(number=line.number, text=line.text[width:], offset=line.offset + width)
        if not line.is_blank
        else _Line(number=line.number, text="", offset=line.offset)
        for line in block
    ]
    return dedented, last_content


def _dedent_text(text: str, width: int) -> str:
    lead = len(text) - len(text.lstrip(" "))
    return text[min(lead, width):]


def _parse_command_header(
    text: str,
    line_number: int,
    col_offset: int,
    cfg: ParserConfig,
    *,
    allow_divert: bool,
) -> _CommandHeader:
    """Tokenize ``name arg arg ... [: text | -> text]``.

    ``col_offset`` is the number of source characters preceding ``text``.

    Raises:
        _SyntaxError: On an unterminated string or bracket or a stray character.
    """
    header = _CommandHeader()
    tokens: list[ConfigValue] = []
    pos = 0
    length = len(text)
    while pos < length:
        char = text[pos]
        if char.isspace():
            pos += 1
            continue
        column = col_offset + pos + 1
        if allow_divert and text.startswith("->", pos):
            header.divert = "reference"
            header.divert_text = text[pos + 2 :].strip()
            break
        if allow_divert and char == ":":
            rest = text[pos + 1 :]
            if rest.strip():
                header.divert = "immediate"
                header.divert_text = rest.strip()
                header.divert_column = col_offset + pos + 2 + (len(rest) - len(rest.lstrip()))
            else:
                header.divert = "nested"
            break
        if char == '"':
            end = _find_string_end(text, pos)
            if end == -1:
                raise _SyntaxError(column, "unterminated string literal")
            tokens.append(StringLiteral(value=_unescape(text[pos + 1 : end])))
            pos = end + 1
            continue
        if char == "[":
            end = _find_closing(text, pos, "[", "]")
            if end == -1:
                raise _SyntaxError(column, "unterminated '[' in command arguments")
            runs = _parse_inline(text[pos + 1 : end], line_number, col_offset + pos + 1, cfg)
            tokens.append(Markup(runs=runs))
            pos = end + 1
            continue
        match = _WORD_RE.match(text, pos)
        if not match:
            raise _SyntaxError(column, f"unexpected character {char!r}")
        word = match.group(0)
        if _INT_RE.match(word):
            tokens.append(IntLiteral(value=int(word)))
        elif _IDENTIFIER_RE.match(word):
            if not tokens and header.name is None:
                header.name = word
            else:
                tokens.append(Variable(value=word))
        else:
            raise _SyntaxError(column, f"invalid argument {word!r}")
        pos = match.end()

    header.args = tokens
    return header


def _parse_inline(text: str, line_number: int, col_offset: int, cfg: ParserConfig) -> list[InlineNode]:
    """Parse one line of inline markup.

    ``col_offset`` is the number of source characters preceding ``text``.
    """
    return _InlineParser(text, line_number, col_offset, cfg).parse()


class _InlineParser:
    def __init__(self, text: str, line_number: int, col_offset: int, cfg: ParserConfig) -> None:
        self.text = text
        self.line_number = line_number
        self.col_offset = col_offset
        self.cfg = cfg
        self.runs: list[InlineNode] = []
        self._buffer: list[str] = []

    def parse(self) -> list[InlineNode]:
        text = self.text
        pos = 0
        while pos < len(text):
            char = text[pos]
            if char == "\\" and pos + 1 < len(text):
                self._buffer.append(text[pos + 1])
                pos += 2
            elif char in self.cfg.verbatim_marks and (pos == 0 or not text[pos - 1].isalnum()):
                pos = self._verbatim(pos)
            elif char == "[":
                pos = self._annotation(pos)
            else:
                self._buffer.append(char)
                pos += 1
        self._flush()
        return self.runs

    def _flush(self) -> None:
        if self._buffer:
            self.runs.append(Text(raw="".join(self._buffer)))
            self._buffer.clear()

    def _location(self, pos: int) -> Location:
        return Location(line=self.line_number, column=self.col_offset + pos + 1)

    def _error(self, location: Location, message: str) -> None:
        self._flush()
        self.runs.append(InlineError(location=location, message=message))

    def _verbatim(self, pos: int) -> int:
        mark = self.text[pos]
        end = self.text.find(mark, pos + 1)
        if end == -1:
            self._error(self._location(pos), f"unterminated {mark!r}")
            return pos + 1
        self._flush()
        self.runs.append(Verbatim(mark=mark, text=self.text[pos + 1 : end]))
        return end + 1

    def _annotation(self, pos: int) -> int:
        text = self.text
        end = _find_closing(text, pos, "[", "]")
        if end == -1:
            self._error(self._location(pos), "unterminated '['")
            return pos + 1
        label_runs = _parse_inline(text[pos + 1 : end], self.line_number, self.col_offset + pos + 1, self.cfg)
        pos = end + 1

        if pos < len(text) and text[pos] == "(":
            close = _find_closing(text, pos, "(", ")")
            if close == -1:
                return self._broken_annotation(label_runs, self._location(pos), "unterminated '('", len(text))
            try:
                header = _parse_command_header(
                    text[pos + 1 : close],
                    self.line_number,
                    self.col_offset + pos + 1,
                    self.cfg,
                    allow_divert=False,
                )
            except _SyntaxError as exc:
                location = Location(line=self.line_number, column=exc.column)
                return self._broken_annotation(label_runs, location, exc.message, close + 1)
            self._flush()
            self.runs.append(
                Annotation(label_runs=label_runs, command=Command(name=header.name, config=header.args))
            )
            return close + 1

        if pos < len(text) and text[pos] == "{":
            close = text.find("}", pos)
            if close == -1:
                return self._broken_annotation(label_runs, self._location(pos), "unterminated '{'", len(text))
            self._flush()
            self.runs.append(Annotation(label_runs=label_runs, target_text=text[pos + 1 : close]))
            return close + 1

        self._flush()
        self.runs.append(Annotation(label_runs=label_runs))
        return pos

    def _broken_annotation(
        self, label_runs: list[InlineNode], location: Location, message: str, resume: int
    ) -> int:
        """Keep the label visible and report what went wrong after it."""
        self._flush()
        self.runs.append(Annotation(label_runs=label_runs))
        self._error(location, message)
        return resume


def _find_string_end(text: str, start: int) -> int:
    pos = start + 1
    while pos < len(text):
        if text[pos] == "\\":
            pos += 2
            continue
        if text[pos] == '"':
            return pos
        pos += 1
    return -1


def _find_closing(text: str, start: int, opener: str, closer: str) -> int:
    """Return the index of the bracket matching ``text[start]``, or -1."""
    depth = 0
    pos = start
    while pos < len(text):
        char = text[pos]
        if char == "\\":
            pos += 2
            continue
        if char == '"' and opener == "(":
            end = _find_string_end(text, pos)
            if end == -1:
                return -1
            pos = end + 1
            continue
        if char == opener:
            depth += 1
        elif char == closer:
            depth -= 1
            if depth == 0:
                return pos
        pos += 1
    return -1


def _unescape(value: str) -> str:
    return re.sub(r"\\(.)", r"\1", value)
