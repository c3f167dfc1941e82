"""
Client reference for security logs

Failed admin logins are logged with a salted hash of the caller's address,
never the raw address, once IP_HASH_SALT is configured.
"""

import os
import hashlib
from fastapi import Request


def client_ref(request: Request) -> str:
    """
    Log-safe reference to the caller

    The address is the first X-Forwarded-For entry, else the socket peer.
    Returns its SHA-256 with IP_HASH_SALT, or the address itself when no salt is set.
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        address = forwarded_for.split(",")[0].strip()
    elif request.client and request.client.host:
        address = request.client.host
    else:
        address = "unknown"

    salt = os.getenv("IP_HASH_SALT")
    if not salt:
        return address
    return hashlib.sha256(f"{address}:{salt}".encode()).hexdigest()
