"""Navigation state machine: load documents and move between sections."""

from __future__ import annotations

import logging

from cardnav.config import CARDNAV_DEFAULT_LABEL
from cardnav.parser import ParserConfig, parse
from cardnav.projector import project
from cardnav.query import extract_label_text
from cardnav.resolver import resolve
from cardnav.schemas import Document, Event, LoadDocument, Navigate, NavigationState, Section
from cardnav.schemas.render import FormatConfig, RenderModel

logger = logging.getLogger(__name__)


def reduce(
    state: NavigationState,
    event: Event,
    *,
    parser_config: ParserConfig | None = None,
    default_label: str = CARDNAV_DEFAULT_LABEL,
) -> NavigationState:
    """Apply one event and return the next state.

    ``LoadDocument`` replaces the document and resolves ``default_label``;
    ``Navigate`` resolves within the current document without reparsing.
    """
    if isinstance(event, LoadDocument):
        document = parse(parser_config, event.raw_text)
        section = _resolve(document, default_label)
        return NavigationState(document=document, current_section=section)

    if isinstance(event, Navigate):
        section = _resolve(state.document, event.label)
        return NavigationState(document=state.document, current_section=section)

    raise TypeError(f"Unknown navigation event: {event!r}")


def _resolve(document: Document, label: str) -> Section | None:
    section = resolve(document, label)
    if section is None:
        logger.info("No section labelled %r", label)
    return section


class NavigationController:
    """Owns the navigation state and applies events to it one at a time."""

    def __init__(
        self,
        *,
        parser_config: ParserConfig | None = None,
        format_config: FormatConfig | None = None,
        default_label: str = CARDNAV_DEFAULT_LABEL,
    ) -> None:
        self.parser_config = parser_config
        self.format_config = format_config or FormatConfig()
        self.default_label = default_label
        self._state = NavigationState()

    @property
    def state(self) -> NavigationState:
        return self._state

    @property
    def current_section(self) -> Section | None:
        return self._state.current_section

    @property
    def current_label(self) -> str | None:
        section = self._state.current_section
        return extract_label_text(section.label) if section else None

    def dispatch(self, event: Event) -> NavigationState:
        self._state = reduce(
            self._state,
            event,
            parser_config=self.parser_config,
            default_label=self.default_label,
        )
        return self._state

    def load_document(self, raw_text: str) -> NavigationState:
        state = self.dispatch(LoadDocument(raw_text=raw_text))
        logger.debug(
            "Loaded document with %d sections", len(state.document.sections)
        )
        return state

    def navigate(self, label: str) -> NavigationState:
        return self.dispatch(Navigate(label=label))

    def render(self, format_config: FormatConfig | None = None) -> RenderModel:
        """Project the current section, or the placeholder when there is none."""
        return project(format_config or self.format_config, self._state.current_section)
