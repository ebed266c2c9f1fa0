"""FastAPI application serving one navigable document."""

from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from fastapi import FastAPI

from cardnav.loader import read_document_async
from cardnav.navigation import NavigationController
from cardnav.utils.logging_config import get_logger
from server.routers import cards
from server.server_config import DOCUMENT_PATH

logger = get_logger(__name__)


def create_app(controller: NavigationController | None = None, document_path: str = DOCUMENT_PATH) -> FastAPI:
    """Build the application around a navigation controller.

    Parameters
    ----------
    controller : NavigationController | None
        Controller to serve. A fresh one is created when omitted.
    document_path : str
        Document loaded on startup; empty to start without one.

    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if document_path:
            text = await read_document_async(Path(document_path))
            app.state.controller.load_document(text)
            logger.info("Loaded startup document", extra={"path": document_path})
        yield

    app = FastAPI(title="cardnav", lifespan=lifespan)
    app.state.controller = controller or NavigationController()
    app.include_router(cards.router)
    return app


app = create_app()
