"""Resolve navigation labels to sections."""

from __future__ import annotations

from cardnav.query import find_section_by_label
from cardnav.schemas import Document, Section


def resolve(document: Document, label: str) -> Section | None:
    """Return the section of ``document`` named exactly ``label``.

    Matching is case-sensitive and untrimmed. Duplicate labels resolve to the
    first occurrence.
    """
    return find_section_by_label(label, document.sections)
