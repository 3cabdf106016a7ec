"""Configuration for the Conduit auth and statistics service."""
from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Database
DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"sqlite+aiosqlite:///{Path(__file__).parent / 'conduit.db'}",
)

# Session tokens (JWT secret is injected into AuthService by the web layer)
JWT_SECRET = os.getenv("JWT_SECRET", "change-me-in-production-use-long-random-string")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRE_DAYS = int(os.getenv("JWT_EXPIRE_DAYS", "60"))

# Roster
PROFILE_LINK_PREFIX = os.getenv("PROFILE_LINK_PREFIX", "/profiles")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
