"""Health check blueprint."""

from flask import Blueprint, Response, current_app, jsonify

health_bp = Blueprint("health", __name__)


@health_bp.route("/healthz")
def health_check() -> Response:
    """Health check endpoint.

    Returns:
        JSON response with status and the configured store backend
    """
    factory = current_app.extensions["store_factory"]
    return jsonify({"status": "ok", "database": factory.config.type.value})
