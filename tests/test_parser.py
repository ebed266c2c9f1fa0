"""Tests for the markup parser."""

from __future__ import annotations

from cardnav.parser import ParserConfig, parse
from cardnav.schemas import (
    Annotation,
    Anonymous,
    Command,
    CommandBlock,
    Document,
    Immediate,
    InlineError,
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
    StringLiteral,
    Text,
    Variable,
    Verbatim,
)


def _content(text: str) -> list:
    """Parse ``text`` below a single heading and return the section content."""
    document = parse(None, "# A\n" + text)
    assert len(document.sections) == 1
    return document.sections[0].content


class TestSections:
    """Tests for splitting a document into prelude and sections."""

    def test_sample_document_structure(self, travel_text: str) -> None:
        """Headings start sections; text before the first heading is prelude."""
        document = parse(None, travel_text)

        assert document.prelude == [
            Paragraph(inline_runs=[Text(raw="Notes before the first heading are the prelude.")])
        ]
        assert [section.label for section in document.sections] == [
            Named(name="The beginning"),
            Named(name="france-entry"),
            Named(name="Phrasebook"),
            Named(name="spain-entry"),
        ]
        assert [section.level for section in document.sections] == [1, 1, 2, 1]

    def test_link_list_items(self, travel_text: str) -> None:
        """Link annotations inside list items carry the link command."""
        beginning = parse(None, travel_text).sections[0]

        assert beginning.content[1] == ListItem(
            children=[
                Paragraph(
                    inline_runs=[
                        Annotation(
                            label_runs=[Text(raw="Visit France")],
                            command=Command(name="link", config=[StringLiteral(value="france-entry")]),
                        )
                    ]
                )
            ]
        )
        assert beginning.content[3] == CommandBlock(
            name="image", args=[StringLiteral(value="https://example.com/globe.png")]
        )

    def test_heading_label_is_trimmed(self) -> None:
        """The label is the remainder of the heading line, trimmed."""
        document = parse(None, "#    Spaced out   \n")
        assert document.sections[0].label == Named(name="Spaced out")

    def test_empty_heading_is_anonymous(self) -> None:
        """A heading without text gets an anonymous label with its line number."""
        document = parse(None, "intro\n#\nbody\n")
        assert document.sections[0].label == Anonymous(line_number=2)
        assert document.sections[0].content == [Paragraph(inline_runs=[Text(raw="body")])]

    def test_hash_without_space_is_not_a_heading(self) -> None:
        """``#hashtag`` is ordinary prelude text."""
        document = parse(None, "#hashtag\n")
        assert document.sections == []
        assert document.prelude == [Paragraph(inline_runs=[Text(raw="#hashtag")])]

    def test_heading_inside_fence_is_text(self) -> None:
        """A ``#`` line inside a preformatted block does not start a section."""
        document = parse(None, "# A\n```\n# not a heading\n```\n")
        assert len(document.sections) == 1
        assert document.sections[0].content == [Preformatted(text="# not a heading\n")]

    def test_empty_text(self) -> None:
        """Empty input parses to an empty document."""
        assert parse(None, "") == Document()


class TestBlocks:
    """Tests for block-level constructs."""

    def test_paragraph_keeps_one_text_run_per_line(self) -> None:
        content = _content("first line\nsecond line\n")
        assert content == [Paragraph(inline_runs=[Text(raw="first line"), Text(raw="second line")])]

    def test_blank_line_separates_paragraphs(self) -> None:
        content = _content("one\n\ntwo\n")
        assert content == [
            Paragraph(inline_runs=[Text(raw="one")]),
            Paragraph(inline_runs=[Text(raw="two")]),
        ]

    def test_nested_list_items(self) -> None:
        """Lines indented under a list item become its children."""
        content = _content("- outer\n  - inner\n")
        assert content == [
            ListItem(
                children=[
                    Paragraph(inline_runs=[Text(raw="outer")]),
                    ListItem(children=[Paragraph(inline_runs=[Text(raw="inner")])]),
                ]
            )
        ]

    def test_nested_divert(self, travel_text: str) -> None:
        """A trailing colon attaches the indented block to the command."""
        france = parse(None, travel_text).sections[1]
        assert france.content[1] == CommandBlock(
            name="numbered",
            child=Nested(
                children=[
                    ListItem(children=[Paragraph(inline_runs=[Text(raw="Paris")])]),
                    ListItem(children=[Paragraph(inline_runs=[Text(raw="Lyon")])]),
                ]
            ),
        )

    def test_immediate_divert(self) -> None:
        content = _content("! note: hello *world*\n")
        assert content == [
            CommandBlock(
                name="note",
                child=Immediate(
                    children=[Paragraph(inline_runs=[Text(raw="hello "), Verbatim(mark="*", text="world")])]
                ),
            )
        ]

    def test_code_body_is_literal(self) -> None:
        """A code body keeps each dedented line verbatim, blank lines included."""
        content = _content("! code:\n  a [b](link c)\n\n    *d*\n")
        assert content == [
            CommandBlock(
                name="code",
                child=Nested(
                    children=[Paragraph(inline_runs=[Text(raw="a [b](link c)"), Text(raw=""), Text(raw="  *d*")])]
                ),
            )
        ]

    def test_reference_divert(self) -> None:
        content = _content("! see -> Other place\n")
        assert content == [CommandBlock(name="see", child=Reference(target_text="Other place"))]

    def test_command_argument_kinds(self) -> None:
        """Markup, integer and variable arguments keep their order."""
        content = _content("! caption [a *b*] 3 x\n")
        assert content == [
            CommandBlock(
                name="caption",
                args=[
                    Markup(runs=[Text(raw="a "), Verbatim(mark="*", text="b")]),
                    IntLiteral(value=3),
                    Variable(value="x"),
                ],
            )
        ]

    def test_command_without_name(self) -> None:
        content = _content('! "x"\n')
        assert content == [CommandBlock(name=None, args=[StringLiteral(value="x")])]

    def test_string_escapes(self) -> None:
        content = _content('! say "a \\"b\\""\n')
        assert content == [CommandBlock(name="say", args=[StringLiteral(value='a "b"')])]

    def test_unterminated_fence(self) -> None:
        """An unclosed fence keeps its text and reports the opening line."""
        content = _content("```\ncode\n")
        assert content == [
            Preformatted(text="code\n"),
            ParseError(location=Location(line=2, column=1), message="unterminated preformatted block"),
        ]

    def test_bad_command_becomes_parse_error(self) -> None:
        """A malformed command is reported and its indented body skipped."""
        content = _content('! bad "x\n  body line\nafter\n')
        assert content == [
            ParseError(location=Location(line=2, column=7), message="unterminated string literal"),
            Paragraph(inline_runs=[Text(raw="after")]),
        ]

    def test_stray_character_in_command(self) -> None:
        content = _content("! image )\n")
        assert content == [
            ParseError(location=Location(line=2, column=9), message="unexpected character ')'")
        ]


class TestInline:
    """Tests for inline markup."""

    def test_verbatim_marks(self, travel_text: str) -> None:
        france = parse(None, travel_text).sections[1]
        assert france.content[0] == Paragraph(
            inline_runs=[
                Verbatim(mark="*", text="Bonjour!"),
                Text(raw=" France is known for "),
                Verbatim(mark="_", text="cheese"),
                Text(raw=" and "),
                Verbatim(mark="~", text="rain"),
                Text(raw=" "),
                Verbatim(mark="`", text="wine"),
                Text(raw="."),
            ]
        )

    def test_mark_inside_word_is_text(self) -> None:
        content = _content("snake_case word\n")
        assert content == [Paragraph(inline_runs=[Text(raw="snake_case word")])]

    def test_escaped_mark(self) -> None:
        content = _content("\\*not bold\\*\n")
        assert content == [Paragraph(inline_runs=[Text(raw="*not bold*")])]

    def test_unterminated_mark_reports_location(self) -> None:
        content = _content("some *bold text\n")
        assert content == [
            Paragraph(
                inline_runs=[
                    Text(raw="some "),
                    InlineError(location=Location(line=2, column=6), message="unterminated '*'"),
                    Text(raw="bold text"),
                ]
            )
        ]

    def test_annotation_with_target_text(self) -> None:
        content = _content("[label]{somewhere}\n")
        assert content == [
            Paragraph(inline_runs=[Annotation(label_runs=[Text(raw="label")], target_text="somewhere")])
        ]

    def test_bare_annotation(self) -> None:
        content = _content("[label] rest\n")
        assert content == [
            Paragraph(inline_runs=[Annotation(label_runs=[Text(raw="label")]), Text(raw=" rest")])
        ]

    def test_unterminated_command_keeps_label(self) -> None:
        content = _content('[x](link "oops)\n')
        assert content == [
            Paragraph(
                inline_runs=[
                    Annotation(label_runs=[Text(raw="x")]),
                    InlineError(location=Location(line=2, column=4), message="unterminated '('"),
                ]
            )
        ]

    def test_custom_verbatim_marks(self) -> None:
        config = ParserConfig(verbatim_marks=frozenset("*"))
        document = parse(config, "# A\n_x_ *y*\n")
        assert document.sections[0].content == [
            Paragraph(inline_runs=[Text(raw="_x_ "), Verbatim(mark="*", text="y")])
        ]

    def test_garbage_never_raises(self) -> None:
        """Malformed input always yields a document."""
        document = parse(None, '# A\n[[[((("\n! [\n- \n```\n')
        assert isinstance(document, Document)
        assert len(document.sections) == 1
