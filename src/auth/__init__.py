from __future__ import annotations

from auth.base import AuthHealthResult, AuthHealthStatus, AuthProvider
from auth.errors import AuthError, AuthFailed, AuthInvalid
from auth.health import check
from auth.registry import get_provider

__all__ = [
    "AuthError",
    "AuthFailed",
    "AuthHealthResult",
    "AuthHealthStatus",
    "AuthInvalid",
    "AuthProvider",
    "check",
    "get_provider",
]
