"""Local configuration for cardnav."""

from __future__ import annotations

import os

DEFAULT_LABEL = "The beginning"
DEFAULT_FETCH_TIMEOUT_S = 10.0
DEFAULT_FETCH_MAX_RETRIES = 2
DEFAULT_FETCH_BACKOFF_S = 0.5
DEFAULT_MAX_DOCUMENT_BYTES = 2 * 1024 * 1024
DEFAULT_USER_AGENT = "cardnav/0.1"

# Label of the section shown right after a document is loaded.
CARDNAV_DEFAULT_LABEL = os.getenv("CARDNAV_DEFAULT_LABEL", DEFAULT_LABEL)
CARDNAV_FETCH_TIMEOUT_S = float(os.getenv("CARDNAV_FETCH_TIMEOUT_S", str(DEFAULT_FETCH_TIMEOUT_S)))
CARDNAV_FETCH_MAX_RETRIES = int(os.getenv("CARDNAV_FETCH_MAX_RETRIES", str(DEFAULT_FETCH_MAX_RETRIES)))
CARDNAV_FETCH_BACKOFF_S = float(os.getenv("CARDNAV_FETCH_BACKOFF_S", str(DEFAULT_FETCH_BACKOFF_S)))
CARDNAV_MAX_DOCUMENT_BYTES = int(os.getenv("CARDNAV_MAX_DOCUMENT_BYTES", str(DEFAULT_MAX_DOCUMENT_BYTES)))
CARDNAV_USER_AGENT = os.getenv("CARDNAV_USER_AGENT", DEFAULT_USER_AGENT)
CARDNAV_LOG_LEVEL = os.getenv("CARDNAV_LOG_LEVEL", "INFO")
