from __future__ import annotations

import logging
from typing import Any

from flask import jsonify

from ..core.exceptions import (
    BlockedByInactiveCutoffError,
    ConcurrencyConflictError,
    DomainError,
    NotFoundError,
)

logger = logging.getLogger(__name__)


def ok(data: Any, status: int = 200):
    return jsonify({"success": True, "data": data}), status


def domain_error_status(e: DomainError) -> int:
    if isinstance(e, NotFoundError):
        return 404
    if isinstance(e, ConcurrencyConflictError):
        return 409
    return 400


def domain_error(e: DomainError):
    body = {"success": False, "message": str(e), "error": type(e).__name__}
    field = getattr(e, "field", None)
    if field:
        body["field"] = field
    status = domain_error_status(e)
    if status == 409 or isinstance(e, BlockedByInactiveCutoffError):
        logger.warning("%s: %s", type(e).__name__, e)
    return jsonify(body), status


def server_error(message: str):
    logger.exception(message)
    return jsonify({"success": False, "message": message}), 500
