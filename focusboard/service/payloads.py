from werkzeug.exceptions import BadRequest

from focusboard.domain import parse_iso_date


def require_body(payload):
    if not payload or not isinstance(payload, dict):
        raise BadRequest("Missing request body")
    return payload


def require_title(payload):
    title = payload.get("title")
    if not isinstance(title, str) or not title.strip():
        raise BadRequest("Missing title field")
    return title


def require_client_id(value):
    if isinstance(value, bool):
        raise BadRequest(f"Invalid client id: {value}")
    try:
        client_id = int(value)
    except (TypeError, ValueError):
        raise BadRequest(f"Invalid client id: {value}") from None
    if client_id < 0:
        raise BadRequest(f"Invalid client id: {value}")
    return client_id


def optional_text(payload, key):
    value = payload.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise BadRequest(f"Invalid {key} field")
    return value


def optional_date(payload, key):
    """YYYY-MM-DD string or None; rejects anything that is not a date."""
    value = payload.get(key)
    if value in (None, ""):
        return None
    parsed = parse_iso_date(value)
    if parsed is None:
        raise BadRequest(f"Invalid {key}: {value}")
    return parsed.isoformat()


def optional_int(payload, key, default=0):
    value = payload.get(key, default)
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise BadRequest(f"Invalid {key}: {value}, expected a number")
    return int(value)
