import logging

from flask import Blueprint, current_app, request
from pydantic import ValidationError
from werkzeug.exceptions import BadRequest, Unauthorized

from focusboard.auth.schemas import LoginRequest, RegisterRequest, validation_details
from focusboard.auth.session import (
    clear_session_response,
    issue_session_response,
    load_auth_context,
)


logger = logging.getLogger(__name__)

bp = Blueprint("auth", __name__, url_prefix="/api")


def register_auth_routes(app):
    """Register authentication routes with the Flask app."""
    app.register_blueprint(bp)


def _users():
    return current_app.extensions["focusboard"].users


def _parse(schema, data):
    try:
        return schema.model_validate(data)
    except ValidationError as exc:
        details = validation_details(exc)
        summary = "; ".join(f"{item['path'] or 'body'}: {item['message']}" for item in details)
        raise BadRequest(f"Validation error: {summary}") from exc


@bp.route("/login", methods=["POST"])
def api_login():
    """Verify credentials and issue a session."""
    credentials = _parse(LoginRequest, request.get_json(silent=True) or {})
    user = _users().verify_user(credentials.email, credentials.password)
    if user is None:
        logger.warning("api login rejected", extra={"email": credentials.email})
        raise Unauthorized("Invalid email or password")

    logger.info("api login success", extra={"user_id": user["id"]})
    return issue_session_response(user, {"success": True, "user": user})


@bp.route("/register", methods=["POST"])
def api_register():
    """Create the account and log the new user in."""
    data = _parse(RegisterRequest, request.get_json(silent=True) or {})
    user = _users().create_user(data.name, data.email, data.password)

    logger.info("api register success", extra={"user_id": user["id"]})
    return issue_session_response(user, {"success": True, "user": user})


@bp.route("/logout", methods=["POST"])
def api_logout():
    logger.info("api logout")
    return clear_session_response()


@bp.route("/me", methods=["GET"])
def api_me():
    """Get current authenticated user info."""
    auth = load_auth_context()
    if auth is None:
        return {"authenticated": False, "user": None}
    return {
        "authenticated": True,
        "user": {"id": auth.user_id, "email": auth.email},
    }
