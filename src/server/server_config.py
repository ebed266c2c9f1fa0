"""Server configuration."""

from __future__ import annotations

import os

# Optional document loaded when the server starts.
DOCUMENT_PATH = os.getenv("CARDNAV_DOCUMENT_PATH", "")
