from __future__ import annotations

import logging
from datetime import date
from typing import Any, Optional

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.exceptions import DomainError, ValidationError
from .datetime_utils import DateRange, date_range_from_params
from .pagination import PageMeta, Pagination, parse_pagination

logger = logging.getLogger(__name__)


def envelope(success: bool, message: str, *, data: Any = None, meta: Optional[PageMeta] = None) -> dict:
    body: dict[str, Any] = {"success": success, "message": message}
    if data is not None:
        body["data"] = data
    if meta is not None:
        body["meta"] = meta.as_dict()
    return body


def ok(message: str, data: Any = None, *, status: int = 200):
    return jsonify(envelope(True, message, data=data)), status


def created(message: str, data: Any = None):
    return ok(message, data, status=201)


def paginated(message: str, items: list, meta: PageMeta):
    return jsonify(envelope(True, message, data=items, meta=meta)), 200


def fail(message: str, status: int, data: Any = None):
    return jsonify(envelope(False, message, data=data)), status


def json_body(*, required: bool = True) -> dict:
    """Return the request JSON object.

    An empty body is allowed when ``required`` is False (e.g. check-in without notes).
    """

    payload = request.get_json(silent=True)
    if payload is None:
        if required:
            raise ValidationError("Invalid request body")
        return {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid request body")
    return payload


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        if e.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.path, e.message)
        else:
            logger.info("%s %s -> %d: %s", request.method, request.path, e.status_code, e.message)
        return fail(e.message, e.status_code, e.detail)

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return fail(e.name, e.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        detail = str(e) if bool(app.config.get("DEBUG", False)) else None
        return fail("Internal server error", 500, detail)


def query_pagination() -> Pagination:
    return parse_pagination(request.args.get("page"), request.args.get("limit"))


def query_date_range(*, default_start: date, default_end: date) -> DateRange:
    return date_range_from_params(
        request.args.get("start_date"),
        request.args.get("end_date"),
        default_start=default_start,
        default_end=default_end,
    )
