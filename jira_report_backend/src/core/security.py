from __future__ import annotations

import hmac
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from pydantic import BaseModel

from .config import Settings, get_settings


class AuthenticatedClient(BaseModel):
    """Caller of the report API, identified by its API key."""
    subject: str
    api_key_last4: Optional[str] = None


def _known_key(provided: str, keys: list[str]) -> bool:
    return any(hmac.compare_digest(provided.encode(), key.encode()) for key in keys)


# PUBLIC_INTERFACE
async def get_current_client(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> AuthenticatedClient:
    """
    Require header {API_KEY_HEADER_NAME}: <key> with a key listed in settings.API_KEYS.

    Raises 401 before any JIRA traffic happens.
    """
    provided = request.headers.get(settings.API_KEY_HEADER_NAME)
    if not provided or not _known_key(provided, settings.API_KEYS):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API key",
        )
    return AuthenticatedClient(subject="report_client", api_key_last4=provided[-4:])
