"""Row to client JSON shapes (snake_case storage, camelCase wire)."""
from focusboard.domain import default_time_of_day_stats, iso_utc, parse_iso_date, parse_iso_datetime


def _iso_date(value):
    parsed = parse_iso_date(value)
    return parsed.isoformat() if parsed else None


def _iso_timestamp(value):
    parsed = parse_iso_datetime(value)
    return iso_utc(parsed) if parsed else value


def task_to_client(row):
    return {
        "id": row["client_id"],
        "title": row["title"],
        "description": row["description"] or "",
        "completed": bool(row["completed"]),
        "favorited": bool(row["favorited"]),
        "date": _iso_date(row["task_date"]),
        "time": row["task_time"] or None,
        "synced": True,
        "serverId": row["id"],
    }


def goal_to_client(row):
    return {
        "id": row["client_id"],
        "title": row["title"],
        "description": row["description"] or "",
        "category": row["category"],
        "targetDate": _iso_date(row["target_date"]),
        "completed": bool(row["completed"]),
        "createdAt": _iso_timestamp(row["created_at"]),
        "synced": True,
        "serverId": row["id"],
    }


def session_to_client(row):
    return {
        "date": _iso_timestamp(row["session_date"]),
        "duration": row["duration"],
        "type": row["session_type"],
        "synced": True,
    }


def pomodoro_statistics_to_client(stats, sessions, today):
    history = [session_to_client(row) for row in sessions]
    if stats is None:
        return {
            "completedSessions": 0,
            "completedToday": 0,
            "completedThisWeek": 0,
            "totalFocusTime": 0,
            "lastSessionDate": today.isoformat(),
            "lastWeekNumber": 0,
            "sessionsHistory": history,
        }
    return {
        "completedSessions": stats["total_sessions"] or 0,
        "completedToday": stats["sessions_today"] or 0,
        "completedThisWeek": stats["sessions_this_week"] or 0,
        "totalFocusTime": stats["total_focus_time"] or 0,
        "lastSessionDate": _iso_date(stats["last_session_date"]) or today.isoformat(),
        "lastWeekNumber": stats["last_week_number"] or 0,
        "sessionsHistory": history,
    }


def user_statistics_to_client(stats):
    if stats is None:
        return {
            "currentStreak": 0,
            "longestStreak": 0,
            "lastActiveDate": "",
            "activityLogs": [],
            "timeOfDayStats": default_time_of_day_stats(),
        }
    return {
        "currentStreak": stats["current_streak"],
        "longestStreak": stats["longest_streak"],
        "lastActiveDate": stats["last_active_date"],
        "activityLogs": stats["activity_logs"],
        "timeOfDayStats": stats["time_of_day_stats"] or default_time_of_day_stats(),
    }
