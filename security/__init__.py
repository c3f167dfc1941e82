"""
Security module

Admin API key authentication, log-safe client references and prompt-injection detection.
"""

from .ip_utils import client_ref
from .admin_auth import require_admin_auth
from .prompt_validator import PromptValidator

__all__ = [
    "client_ref",
    "require_admin_auth",
    "PromptValidator",
]
