from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Optional

from ..core.constants import DEFAULT_LIMIT, DEFAULT_PAGE, MAX_LIMIT

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Pagination:
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class PageMeta:
    current_page: int
    per_page: int
    total_items: int
    total_pages: int

    def as_dict(self) -> dict[str, int]:
        return {
            "current_page": self.current_page,
            "per_page": self.per_page,
            "total_items": self.total_items,
            "total_pages": self.total_pages,
        }


def _to_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def parse_pagination(page: Any = None, limit: Any = None) -> Pagination:
    """Validate raw page/limit values.

    Invalid or missing values fall back to defaults; limit is clamped to
    MAX_LIMIT. Never raises.
    """

    p = _to_int(page)
    if p is None or p < 1:
        if page not in (None, ""):
            logger.warning("Invalid page value %r, using default", page)
        p = DEFAULT_PAGE

    lim = _to_int(limit)
    if lim is None or lim < 1:
        if limit not in (None, ""):
            logger.warning("Invalid limit value %r, using default", limit)
        lim = DEFAULT_LIMIT
    if lim > MAX_LIMIT:
        logger.warning("Requested limit %d exceeds maximum %d, capping", lim, MAX_LIMIT)
        lim = MAX_LIMIT

    return Pagination(page=p, limit=lim)


def build_page_meta(total_items: int, pagination: Pagination) -> PageMeta:
    total_pages = 0
    if total_items > 0 and pagination.limit > 0:
        total_pages = math.ceil(total_items / pagination.limit)
    return PageMeta(
        current_page=pagination.page,
        per_page=pagination.limit,
        total_items=int(total_items),
        total_pages=total_pages,
    )
