from __future__ import annotations

import logging
from typing import Any, Dict

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.exceptions import DomainError, ValidationError

logger = logging.getLogger(__name__)

UNKNOWN_ERROR = DomainError()


def json_body() -> Dict[str, Any]:
    """The request's JSON object body; anything else is a ValidationError."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def ok(status: int = 200, **payload: Any):
    return jsonify({"success": True, **payload}), status


def error_payload(error: DomainError) -> Dict[str, Any]:
    return {"success": False, "code": error.code, "message": error.message}


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(error: DomainError):
        logger.info("%s %s -> %s", request.method, request.path, error.code)
        return jsonify(error_payload(error)), error.status_code

    @app.errorhandler(Exception)
    def handle_unexpected(error: Exception):
        if isinstance(error, HTTPException):
            return jsonify({"success": False, "code": error.name, "message": error.description}), error.code

        # Internal detail (e.g. mysql.connector errors) never reaches the caller.
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return jsonify(error_payload(UNKNOWN_ERROR)), UNKNOWN_ERROR.status_code
