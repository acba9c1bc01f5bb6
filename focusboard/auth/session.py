import logging
from functools import wraps

from flask import current_app, jsonify, make_response, request
from werkzeug.exceptions import Unauthorized

from focusboard.auth.jwt import create_session_token, decode_session_token


logger = logging.getLogger(__name__)


class AuthContext:
    """The authenticated caller, passed explicitly into every protected view."""

    def __init__(self, user_id, email=""):
        self.user_id = user_id
        self.email = email

    def __repr__(self):
        return f"<AuthContext user_id={self.user_id}>"


def _session_settings():
    config = current_app.config
    return (
        config.get("AUTH_SESSION_COOKIE_NAME", "focusboard_session"),
        config.get("AUTH_JWT_SECRET", "dev-jwt-secret"),
        config.get("AUTH_SESSION_TTL_MINUTES", 60 * 24 * 7),
        config.get("AUTH_COOKIE_SAMESITE", "Lax"),
        config.get("AUTH_COOKIE_DOMAIN"),
        config.get("AUTH_COOKIE_SECURE", False),
    )


def _request_token(cookie_name):
    token = request.cookies.get(cookie_name)
    if token:
        return token
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header.split(" ", 1)[1].strip()
    return None


def load_auth_context():
    """Resolve the caller from the session cookie or bearer header, or None."""
    cookie_name, secret, *_ = _session_settings()
    token = _request_token(cookie_name)
    if not token:
        return None
    payload, err = decode_session_token(token, secret)
    if err or not payload:
        logger.info("session token rejected", extra={"reason": err})
        return None
    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        logger.info("session token has non-numeric subject", extra={"sub": payload.get("sub")})
        return None
    return AuthContext(user_id=user_id, email=payload.get("email", ""))


def auth_required(func):
    """Reject anonymous callers; hand the resolved AuthContext to the view."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        auth = load_auth_context()
        if auth is None:
            raise Unauthorized("You must be logged in to access this resource")
        return func(auth, *args, **kwargs)

    return wrapper


def issue_session_response(user, body=None):
    """JSON response carrying a fresh session cookie for ``user``."""
    cookie_name, secret, ttl_minutes, samesite, cookie_domain, cookie_secure = _session_settings()
    token = create_session_token(
        user_id=user["id"],
        email=user["email"],
        secret=secret,
        ttl_minutes=ttl_minutes,
    )
    response = make_response(jsonify(body if body is not None else {"success": True}))
    response.set_cookie(
        cookie_name,
        token,
        max_age=ttl_minutes * 60,
        httponly=True,
        samesite=None if samesite == "None" else samesite,
        secure=cookie_secure,
        path="/",
        domain=cookie_domain,
    )
    return response


def clear_session_response():
    cookie_name, _, _, samesite, cookie_domain, _ = _session_settings()
    response = make_response(jsonify({"success": True}))
    response.delete_cookie(
        cookie_name,
        path="/",
        domain=cookie_domain,
        samesite=None if samesite == "None" else samesite,
    )
    return response
