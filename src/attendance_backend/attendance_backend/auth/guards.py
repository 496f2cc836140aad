from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import current_app, g, request

from ..core.exceptions import UnauthorizedError
from .gate import authorize
from .model import Claims


def extract_bearer_token(header_value: Optional[str]) -> str:
    scheme, _, token = (header_value or "").strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise UnauthorizedError("Unauthorized: Missing token")
    return token.strip()


def current_claims() -> Optional[Claims]:
    return g.get("claims")


def token_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        token = extract_bearer_token(request.headers.get("Authorization"))
        g.claims = current_app.extensions["token_service"].validate(token)
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles: str):
    """Validate the bearer token, then gate on role membership."""

    def decorator(view):
        @wraps(view)
        def gated(*args, **kwargs):
            authorize(current_claims(), roles)
            return view(*args, **kwargs)

        return token_required(gated)

    return decorator
