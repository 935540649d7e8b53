"""Process configuration read from the environment (and an optional ``.env``)."""
from __future__ import annotations

import os
from typing import List

from dotenv import load_dotenv

load_dotenv()

PORT = int(os.environ.get("PORT", "4000"))
HOST = os.environ.get("HOST", "0.0.0.0")
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# Client assets are served from here when the directory exists.
STATIC_DIR = os.environ.get("STATIC_DIR", "public")

CORS_ORIGINS: List[str] = [
    origin.strip()
    for origin in os.environ.get("CORS_ORIGINS", "*").split(",")
    if origin.strip()
]

__all__ = ["PORT", "HOST", "LOG_LEVEL", "STATIC_DIR", "CORS_ORIGINS"]
