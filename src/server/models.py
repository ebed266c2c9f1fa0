"""Pydantic models for the card API."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator, model_validator

from cardnav.schemas import RenderModel


class LoadRequest(BaseModel):
    """Request model for the /api/load endpoint.

    Attributes
    ----------
    text : str | None
        Raw markup to load.
    url : str | None
        URL to fetch the markup from.

    Exactly one of ``text`` and ``url`` must be given.

    """

    text: str | None = Field(default=None, description="Raw document markup")
    url: str | None = Field(default=None, description="URL of the document")

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str | None) -> str | None:
        """Validate that ``url`` uses http or https."""
        if v is None:
            return v
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            err = "url must start with http:// or https://"
            raise ValueError(err)
        return v

    @model_validator(mode="after")
    def exactly_one_source(self) -> LoadRequest:
        """Require exactly one document source."""
        if (self.text is None) == (self.url is None):
            err = "provide exactly one of text or url"
            raise ValueError(err)
        return self


class NavigateRequest(BaseModel):
    """Request model for the /api/navigate endpoint.

    The label is forwarded untouched; matching is exact.
    """

    label: str = Field(..., description="Label of the target section")


class CardResponse(BaseModel):
    """The section being shown and its render model.

    Attributes
    ----------
    label : str | None
        Label of the current section, ``None`` when nothing resolved.
    card : RenderModel
        Projected card or placeholder.

    """

    label: str | None = Field(default=None, description="Current section label")
    card: RenderModel = Field(..., description="Render model of the current section")


class SectionsResponse(BaseModel):
    """Overview of the loaded document.

    Attributes
    ----------
    labels : list[str]
        Section labels in document order.
    broken_links : list[tuple[str, str]]
        ``(section, target)`` pairs whose target does not resolve.

    """

    labels: list[str] = Field(default_factory=list, description="Section labels")
    broken_links: list[tuple[str, str]] = Field(default_factory=list, description="Unresolved link targets")


class ErrorResponse(BaseModel):
    """Error response model."""

    error: str = Field(..., description="Error message")
