import json
import logging

from werkzeug.exceptions import BadRequest

from focusboard.domain import utc_now
from focusboard.service.payloads import optional_int, require_body


logger = logging.getLogger(__name__)


class StatisticsService:
    def __init__(self, repository, clock=utc_now):
        self.repository = repository
        self.clock = clock

    def get_statistics(self, user_id):
        """Stored statistics with the JSON columns decoded, or None."""
        row = self.repository.fetch_user_statistics(user_id)
        if row is None:
            return None
        return {
            "current_streak": row["current_streak"],
            "longest_streak": row["longest_streak"],
            "last_active_date": row["last_active_date"] or "",
            "activity_logs": json.loads(row["activity_logs"] or "[]"),
            "time_of_day_stats": json.loads(row["time_of_day_stats"] or "[]"),
        }

    def save_statistics(self, user_id, payload):
        body = require_body(payload)
        activity_logs = body.get("activityLogs") or []
        time_of_day_stats = body.get("timeOfDayStats") or []
        if not isinstance(activity_logs, list):
            raise BadRequest("Invalid activityLogs field, expected a list")
        if not isinstance(time_of_day_stats, list):
            raise BadRequest("Invalid timeOfDayStats field, expected a list")

        values = {
            "current_streak": optional_int(body, "currentStreak"),
            "longest_streak": optional_int(body, "longestStreak"),
            "last_active_date": body.get("lastActiveDate") or None,
            "activity_logs": json.dumps(activity_logs),
            "time_of_day_stats": json.dumps(time_of_day_stats),
            "updated_at": self.clock().isoformat(),
        }
        with self.repository.transaction():
            if self.repository.fetch_user_statistics(user_id) is None:
                self.repository.create_user_statistics(user_id, **values)
            else:
                self.repository.update_user_statistics(user_id, **values)
        logger.info("user statistics saved", extra={"user_id": user_id})
