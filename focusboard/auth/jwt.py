from datetime import datetime, timedelta, timezone

import jwt


def create_session_token(user_id, email, secret, ttl_minutes=60 * 24 * 7):
    """Create a signed session token identifying a numeric user id."""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "email": email,
        "type": "session",
        "iat": now,
        "exp": now + timedelta(minutes=ttl_minutes),
    }
    return jwt.encode(payload, secret, algorithm="HS256")


def decode_session_token(token, secret):
    """Validate a session token and extract its payload."""
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=["HS256"],
            options={"require": ["exp", "sub"]},
        )
        if payload.get("type", "session") != "session":
            return None, f"Invalid token type: expected session, got {payload.get('type')}"
        return payload, None
    except jwt.PyJWTError as exc:
        return None, str(exc)
