"""Navigation events and controller state."""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from cardnav.schemas.document import Document, Section


class Navigate(BaseModel):
    """Switch to the section with the given label in the loaded document."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["navigate"] = "navigate"
    label: str


class LoadDocument(BaseModel):
    """Replace the loaded document with a freshly parsed one."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["load_document"] = "load_document"
    raw_text: str


Event = Annotated[Union[Navigate, LoadDocument], Field(discriminator="kind")]


class NavigationState(BaseModel):
    """The loaded document and the section currently shown.

    A ``current_section`` of ``None`` means nothing could be resolved; the
    view shows a placeholder in that case.
    """

    model_config = ConfigDict(frozen=True)

    document: Document = Field(default_factory=Document)
    current_section: Section | None = None
