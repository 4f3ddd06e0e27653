"""
GrantCraft Configuration

Central settings loaded from environment variables.
"""

import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    """Immutable application settings."""

    # --- Scoring ---
    DEFAULT_SCHEME: str = os.getenv("GRANTCRAFT_DEFAULT_SCHEME", "horizon_europe_ria_ia")
    # Callers reject drafts shorter than this before scoring
    MIN_DRAFT_CHARS: int = int(os.getenv("GRANTCRAFT_MIN_DRAFT_CHARS", "50"))
    MAX_DRAFT_CHARS: int = int(os.getenv("GRANTCRAFT_MAX_DRAFT_CHARS", "500000"))

    # --- Server ---
    HOST: str = os.getenv("GRANTCRAFT_HOST", "0.0.0.0")
    PORT: int = int(os.getenv("GRANTCRAFT_PORT", "8000"))
    MAX_BODY_BYTES: int = int(os.getenv("GRANTCRAFT_MAX_BODY_BYTES", "2097152"))

    # --- CORS ---
    CORS_ORIGINS: str = os.getenv("GRANTCRAFT_CORS_ORIGINS", "*")


settings = Settings()
