"""Application-wide constants for the Agora platform."""

from __future__ import annotations

BRAND_NAME = "Agora"

API_TITLE = f"{BRAND_NAME} API"
API_DESCRIPTION = "Real-time chat (global room and private messages) with a Q&A forum."
API_VERSION = "0.1.0"

# Real-time messaging
GLOBAL_ROOM_ID = "global"
REALTIME_PATH = "/ws"

# Text constraints
MIN_USERNAME_LENGTH = 3
MAX_USERNAME_LENGTH = 50
MIN_PASSWORD_LENGTH = 6
MAX_BIO_LENGTH = 250
MAX_TITLE_LENGTH = 300

# Q&A listing
DEFAULT_QUESTIONS_PAGE_SIZE = 10
MAX_QUESTIONS_PAGE_SIZE = 50
