from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Claims:
    """Verified payload of a bearer token."""

    user_id: int
    username: str
    role: str
    issued_at: datetime
    expires_at: datetime
