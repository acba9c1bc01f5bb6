import logging
from datetime import timedelta

from werkzeug.exceptions import BadRequest

from focusboard.domain import (
    SESSION_HISTORY_LIMIT,
    SESSION_TYPES,
    iso_utc,
    iso_week,
    parse_iso_datetime,
    utc_now,
)
from focusboard.service.payloads import require_body


logger = logging.getLogger(__name__)


class PomodoroService:
    """Session inserts plus the per-user aggregate derived from them."""

    def __init__(self, repository, clock=utc_now):
        self.repository = repository
        self.clock = clock

    def record_session(self, user_id, payload):
        body = require_body(payload)
        if not body.get("date"):
            raise BadRequest("Missing date field")
        session_date = parse_iso_datetime(body["date"])
        if session_date is None:
            raise BadRequest(f"Invalid date: {body['date']}")
        duration = body.get("duration")
        if isinstance(duration, bool) or not isinstance(duration, (int, float)):
            raise BadRequest(f"Invalid duration: {duration}, expected a number")
        session_type = body.get("type")
        if not session_type:
            raise BadRequest("Missing type field")
        if session_type not in SESSION_TYPES:
            raise BadRequest(f"Invalid session type: {session_type}")

        now = self.clock()
        with self.repository.transaction():
            self.repository.create_pomodoro_session(
                user_id, iso_utc(session_date), int(duration), session_type
            )
            if session_type == "work":
                self._apply_work_session(user_id, int(duration), now)
        logger.info(
            "pomodoro session saved",
            extra={"user_id": user_id, "type": session_type, "duration": int(duration)},
        )

    def _apply_work_session(self, user_id, duration, now):
        today = now.date()
        _, week = iso_week(today)
        # ISO weeks start on Monday; YYYY-MM-DD strings compare in date order
        week_start = today - timedelta(days=today.weekday())
        self.repository.record_work_session_statistics(
            user_id,
            duration,
            session_day=today.isoformat(),
            week_start=week_start.isoformat(),
            week_number=week,
            updated_at=now.isoformat(),
        )

    def get_statistics(self, user_id):
        stats = self.repository.fetch_pomodoro_statistics(user_id)
        sessions = self.repository.fetch_recent_work_sessions(
            user_id, limit=SESSION_HISTORY_LIMIT
        )
        return stats, sessions, self.clock().date()
