"""
Auth — Optional API Key Check for the Reviewer API

Keys come from GRANTCRAFT_API_KEYS (comma-separated). Only their
SHA-256 hashes are kept. With no keys configured, auth is off and
every route is public, which is the normal local-development setup.
"""

from __future__ import annotations

import hashlib
import os
import secrets
from typing import Optional

from fastapi import HTTPException, Security
from fastapi.security import APIKeyHeader

API_KEY_HEADER = APIKeyHeader(name="X-API-Key", auto_error=False)


def _hash(key: str) -> str:
    return hashlib.sha256(key.encode()).hexdigest()


def load_key_hashes(raw: str) -> frozenset[str]:
    """Parse a comma-separated key list into a set of hashes."""
    return frozenset(_hash(k.strip()) for k in raw.split(",") if k.strip())


_KEY_HASHES: frozenset[str] = load_key_hashes(os.getenv("GRANTCRAFT_API_KEYS", ""))
AUTH_ENABLED = bool(_KEY_HASHES)


def verify_key(api_key: Optional[str], key_hashes: frozenset[str] = _KEY_HASHES) -> bool:
    if not api_key:
        return False
    return _hash(api_key) in key_hashes


async def require_api_key(
    api_key: Optional[str] = Security(API_KEY_HEADER),
) -> Optional[str]:
    """
    FastAPI dependency. Returns a short key id for logging, or None
    when auth is disabled.
    """
    if not AUTH_ENABLED:
        return None
    if not api_key:
        raise HTTPException(status_code=401, detail="Missing API key. Include X-API-Key header.")
    if not verify_key(api_key):
        raise HTTPException(status_code=403, detail="Invalid API key.")
    return _hash(api_key)[:12]


def generate_api_key() -> str:
    """New random key for provisioning."""
    return f"gc_{secrets.token_urlsafe(32)}"
