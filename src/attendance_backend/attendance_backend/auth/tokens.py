from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from jose import ExpiredSignatureError, JWTError, jwt

from ..core.constants import DEFAULT_TOKEN_TTL_HOURS, TOKEN_ALGORITHM, TOKEN_ISSUER
from ..core.exceptions import ExpiredTokenError, InvalidTokenError
from .model import Claims

logger = logging.getLogger(__name__)


class TokenService:
    """Issue and validate signed, time-bound identity tokens (JWT, HS256).

    The signing secret is given once at construction; there is no module-level
    secret.
    """

    def __init__(self, secret: str, *, ttl_hours: int = DEFAULT_TOKEN_TTL_HOURS, issuer: str = TOKEN_ISSUER):
        if not secret:
            raise ValueError("JWT secret must not be empty")
        self._secret = secret
        self._ttl = timedelta(hours=int(ttl_hours))
        self._issuer = issuer

    def issue(self, user_id: int, username: str, role: str, *, now: datetime | None = None) -> str:
        now = now or datetime.now(timezone.utc)
        payload = {
            "user_id": int(user_id),
            "username": username,
            "role": role,
            "iss": self._issuer,
            "iat": now,
            "nbf": now,
            "exp": now + self._ttl,
        }
        token = jwt.encode(payload, self._secret, algorithm=TOKEN_ALGORITHM)
        logger.debug("Issued token for user_id=%s role=%s", user_id, role)
        return token

    def validate(self, token: str) -> Claims:
        if not token:
            raise InvalidTokenError("Unauthorized: Missing token")

        try:
            header = jwt.get_unverified_header(token)
        except JWTError:
            raise InvalidTokenError("Unauthorized: Invalid token")

        alg = header.get("alg")
        if alg != TOKEN_ALGORITHM:
            logger.warning("Rejected token with unexpected signing algorithm %r", alg)
            raise InvalidTokenError("Unauthorized: Invalid token")

        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[TOKEN_ALGORITHM],
                issuer=self._issuer,
                options={"require_exp": True, "require_iat": True, "require_nbf": True},
            )
        except ExpiredSignatureError:
            raise ExpiredTokenError("Unauthorized: Token expired")
        except JWTError as e:
            logger.info("Token validation failed: %s", e)
            raise InvalidTokenError("Unauthorized: Invalid token")

        try:
            return Claims(
                user_id=int(payload["user_id"]),
                username=str(payload["username"]),
                role=str(payload["role"]),
                issued_at=datetime.fromtimestamp(int(payload["iat"]), tz=timezone.utc),
                expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc),
            )
        except (KeyError, TypeError, ValueError):
            raise InvalidTokenError("Unauthorized: Invalid token")
