from __future__ import annotations

import logging

from flask import current_app, jsonify, request

from ..core.exceptions import ConflictError, DomainError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def domain_error_response(e: DomainError):
    if isinstance(e, NotFoundError):
        code = 404
    elif isinstance(e, ConflictError):
        code = 409
    elif isinstance(e, ValidationError):
        code = 400
    else:
        code = 422
    return jsonify({"error": str(e)}), code


def failure_response(action: str):
    """Generic banner for unexpected errors; the traceback goes to the log."""
    logger.exception("Failed to %s", action)
    return jsonify({"error": f"Failed to {action}, please try again"}), 500


def invalid_action_response():
    return jsonify({"error": "Invalid action"}), 400


def production_guard():
    """Seeding endpoints are for setting up development and test databases."""
    if current_app.config.get("APP_ENV") == "production":
        return jsonify({"error": "Not available in production"}), 403
    return None
