"""
Admin API authentication

API key check on the X-API-Key header, guarding catalog writes.
Keys are compared in constant time.
"""

import os
import secrets
import logging
from fastapi import Header, HTTPException, Request
from dotenv import load_dotenv
from .ip_utils import client_ref

load_dotenv()

logger = logging.getLogger(__name__)


class AdminAuth:
    """Admin API key verifier"""

    def __init__(self, admin_api_key: str = None):
        """
        Args:
            admin_api_key: Expected key (env ADMIN_API_KEY)

        Raises:
            ValueError: Key unset or left at the placeholder value
        """
        self.admin_api_key = admin_api_key or os.getenv("ADMIN_API_KEY")

        if not self.admin_api_key or self.admin_api_key == "your_secure_admin_api_key_here":
            raise ValueError(
                "ADMIN_API_KEY is not set. Generate one with "
                "python -c 'import secrets; print(secrets.token_urlsafe(32))' and add it to .env"
            )

    def verify_api_key(self, provided_key: str) -> bool:
        return secrets.compare_digest(provided_key.encode(), self.admin_api_key.encode())


async def require_admin_auth(
    request: Request,
    x_api_key: str = Header(None, alias="X-API-Key")
):
    """
    FastAPI dependency for admin-only endpoints

    Raises:
        HTTPException: 401 (no key), 403 (wrong key), 500 (server key not configured)

    Usage:
        @app.post("/cards", dependencies=[Depends(require_admin_auth)])
    """
    if not x_api_key:
        raise HTTPException(
            status_code=401,
            detail="API key required. Send it in the X-API-Key header.",
            headers={"WWW-Authenticate": "ApiKey"}
        )

    try:
        admin_auth = AdminAuth()
    except ValueError as e:
        logger.error("Admin auth is not configured: %s", e)
        raise HTTPException(status_code=500, detail="Server authentication is not configured")

    if not admin_auth.verify_api_key(x_api_key):
        logger.warning("[SECURITY] Admin authentication failed from %s", client_ref(request))

        raise HTTPException(status_code=403, detail="Invalid API key.")

    return True
