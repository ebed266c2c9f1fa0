"""Card navigation endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import HTMLResponse

from cardnav.config import CARDNAV_MAX_DOCUMENT_BYTES
from cardnav.exceptions import DocumentNotFoundError, DocumentTooLargeError, FetchError, LoadError
from cardnav.html_view import render_html
from cardnav.loader import fetch_document
from cardnav.navigation import NavigationController
from cardnav.query import broken_links, extract_label_text
from cardnav.utils.logging_config import get_logger
from server.models import CardResponse, ErrorResponse, LoadRequest, NavigateRequest, SectionsResponse

logger = get_logger(__name__)

# status.HTTP_413_REQUEST_ENTITY_TOO_LARGE is deprecated in current Starlette.
HTTP_CONTENT_TOO_LARGE = 413

router = APIRouter()

COMMON_RESPONSES = {
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    HTTP_CONTENT_TOO_LARGE: {"model": ErrorResponse},
    status.HTTP_502_BAD_GATEWAY: {"model": ErrorResponse},
}


def _controller(request: Request) -> NavigationController:
    return request.app.state.controller


def _card_response(controller: NavigationController) -> CardResponse:
    return CardResponse(label=controller.current_label, card=controller.render())


@router.get("/api/card")
async def get_card(request: Request) -> CardResponse:
    """Return the render model of the section currently shown."""
    return _card_response(_controller(request))


@router.post("/api/load", responses=COMMON_RESPONSES)
async def load(request: Request, load_request: LoadRequest) -> CardResponse:
    """Load a new document and show its entry section.

    **Parameters**

    - **load_request** (`LoadRequest`): raw ``text`` or a ``url`` to fetch

    **Raises**

    - **HTTPException**: **404** - the URL returned 404
    - **HTTPException**: **413** - the document exceeds the size limit
    - **HTTPException**: **502** - the URL could not be fetched

    """
    controller = _controller(request)
    try:
        if load_request.url is not None:
            text = await fetch_document(load_request.url)
        else:
            text = load_request.text or ""
            if len(text.encode("utf-8")) > CARDNAV_MAX_DOCUMENT_BYTES:
                raise DocumentTooLargeError(f"Document exceeds {CARDNAV_MAX_DOCUMENT_BYTES} bytes")
    except LoadError as exc:
        logger.warning("Failed to load document", extra={"url": load_request.url, "error": str(exc)})
        raise HTTPException(status_code=_status_for(exc), detail=str(exc)) from exc

    state = controller.load_document(text)
    logger.info(
        "Document loaded",
        extra={
            "url": load_request.url,
            "sections": len(state.document.sections),
            "current": controller.current_label,
        },
    )
    return _card_response(controller)


@router.post("/api/navigate")
async def navigate(request: Request, navigate_request: NavigateRequest) -> CardResponse:
    """Switch to another section of the loaded document.

    A label that matches no section yields the placeholder card, not an error.
    """
    controller = _controller(request)
    controller.navigate(navigate_request.label)
    return _card_response(controller)


@router.get("/api/sections")
async def list_sections(request: Request) -> SectionsResponse:
    """List section labels and link targets that resolve to nothing."""
    document = _controller(request).state.document
    return SectionsResponse(
        labels=[extract_label_text(section.label) for section in document.sections],
        broken_links=broken_links(document),
    )


@router.get("/", response_class=HTMLResponse)
async def show_card(request: Request, section: str | None = None) -> HTMLResponse:
    """Render the current card as HTML, navigating first when ``section`` is given."""
    controller = _controller(request)
    if section is not None:
        controller.navigate(section)
    return HTMLResponse(content=render_html(controller.render()))


def _status_for(exc: LoadError) -> int:
    if isinstance(exc, DocumentNotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, DocumentTooLargeError):
        return HTTP_CONTENT_TOO_LARGE
    if isinstance(exc, FetchError):
        return status.HTTP_502_BAD_GATEWAY
    return status.HTTP_400_BAD_REQUEST
