from __future__ import annotations

import logging
from typing import Iterable, Optional

from ..core.exceptions import ForbiddenError
from .model import Claims

logger = logging.getLogger(__name__)


def authorize(claims: Optional[Claims], allowed_roles: Iterable[str]) -> Claims:
    """Allow iff the claim's role case-insensitively matches an allowed role.

    Missing claims fail closed.
    """

    if claims is None:
        logger.error("Authorization requested without verified claims")
        raise ForbiddenError("Forbidden: Cannot determine user role")

    role = (claims.role or "").casefold()
    allowed = [r for r in allowed_roles]
    if any(role == r.casefold() for r in allowed):
        return claims

    logger.warning(
        "Forbidden access for %s (role=%s), requires one of %s",
        claims.username,
        claims.role,
        allowed,
    )
    raise ForbiddenError("Forbidden: Insufficient privileges")
