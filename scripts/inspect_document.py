"""Inspect a card document's sections and links."""

from __future__ import annotations

import argparse
import asyncio
from collections import Counter
from pathlib import Path

from cardnav.loader import fetch_document, read_document
from cardnav.parser import parse
from cardnav.query import broken_links, collect_link_targets, display_label
from cardnav.schemas import CommandBlock, ContentNode, Document, Immediate, ListItem, Nested, ParseError


def main() -> None:
    parser = argparse.ArgumentParser(description="Inspect a card document's sections, links and parse errors.")
    parser.add_argument("--url", help="URL to fetch the document from")
    parser.add_argument("--file", help="Local document path")
    parser.add_argument("--broken-only", action="store_true", help="Show only links whose target is missing")
    args = parser.parse_args()

    if not args.url and not args.file:
        parser.error("Provide --url or --file")

    text = load_text(url=args.url, file_path=args.file)
    document = parse(None, text)

    if not args.broken_only:
        print("Sections:")
        for section in document.sections:
            indent = "    " * (section.level - 1)
            targets = collect_link_targets(section.content)
            print(f"{indent}{display_label(section.label)} -> {', '.join(targets) or '(no links)'}")

        print("\nCommands:")
        for name, count in collect_commands(document).most_common():
            print(f"{name}: {count}")

        errors = count_parse_errors(document.prelude) + sum(
            count_parse_errors(section.content) for section in document.sections
        )
        print(f"\nParse errors: {errors}")

    print("\nBroken links:")
    for label, target in broken_links(document):
        print(f"{label}: {target}")


def load_text(*, url: str | None, file_path: str | None) -> str:
    if url:
        return asyncio.run(fetch_document(url))
    return read_document(Path(file_path or ""))


def collect_commands(document: Document) -> Counter:
    commands = Counter()

    def visit(nodes: list[ContentNode]) -> None:
        for node in nodes:
            if isinstance(node, CommandBlock):
                commands[node.name or "(unnamed)"] += 1
                if isinstance(node.child, (Nested, Immediate)):
                    visit(node.child.children)
            elif isinstance(node, ListItem):
                visit(node.children)

    visit(document.prelude)
    for section in document.sections:
        visit(section.content)
    return commands


def count_parse_errors(nodes: list[ContentNode]) -> int:
    total = 0
    for node in nodes:
        if isinstance(node, ParseError):
            total += 1
        elif isinstance(node, ListItem):
            total += count_parse_errors(node.children)
        elif isinstance(node, CommandBlock) and isinstance(node.child, (Nested, Immediate)):
            total += count_parse_errors(node.child.children)
    return total


if __name__ == "__main__":
    main()
