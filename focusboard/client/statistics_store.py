"""Streaks, activity logs and time-of-day counters derived from task completion."""
import logging
from datetime import datetime, timedelta

from focusboard.client.collection_store import SYNC_ERRORS
from focusboard.client.records import SyncState
from focusboard.client.sync_queue import SyncQueue
from focusboard.domain import (
    ACTIVITY_LOG_LIMIT,
    default_time_of_day_stats,
    time_of_day_bucket,
    utc_now,
)


logger = logging.getLogger(__name__)

STATS_KEY = "stats"
DAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


def local_now():
    return datetime.now()


class StatisticsStore:
    cache_key = "statistics"

    def __init__(self, api, cache, session, clock=local_now):
        self.api = api
        self.cache = cache
        self.session = session
        # local wall clock for days and hour buckets; retry times stay in UTC
        self.clock = clock

        self.current_streak = 0
        self.longest_streak = 0
        self.last_active_date = ""
        self.activity_logs = []
        self.time_of_day_stats = default_time_of_day_stats()
        # nothing local to push until something changes
        self.sync_state = SyncState.SYNCED
        self.sync_queue = SyncQueue()
        self.initialized = False

    def initialize(self, tasks=()):
        if self.initialized:
            return
        self.load_from_cache()
        if self.session.logged_in:
            self.fetch_from_server()
        self.refresh_activity_log(tasks)
        self.initialized = True

    def to_payload(self):
        return {
            "currentStreak": self.current_streak,
            "longestStreak": self.longest_streak,
            "lastActiveDate": self.last_active_date,
            "activityLogs": self.activity_logs,
            "timeOfDayStats": self.time_of_day_stats,
        }

    def load_from_cache(self):
        data = self.cache.load(self.cache_key)
        if not data:
            return
        self.current_streak = int(data.get("currentStreak") or 0)
        self.longest_streak = int(data.get("longestStreak") or 0)
        self.last_active_date = data.get("lastActiveDate") or ""
        self.activity_logs = data.get("activityLogs") or []
        self.time_of_day_stats = data.get("timeOfDayStats") or default_time_of_day_stats()
        self.sync_state = SyncState(data.get("syncState", SyncState.PENDING.value))
        self.sync_queue.load(data.get("syncQueue"))

    def persist_to_cache(self):
        data = self.to_payload()
        data["syncState"] = self.sync_state.value
        data["syncQueue"] = self.sync_queue.to_cache()
        self.cache.save(self.cache_key, data)

    def clear_cache(self):
        self.cache.remove(self.cache_key)

    def fetch_from_server(self):
        """Pull server statistics unless local changes are still waiting to be pushed."""
        if not self.session.logged_in:
            return False
        if self.sync_state is not SyncState.SYNCED:
            return self.save_to_server()
        try:
            data = self.api.get_statistics()
        except SYNC_ERRORS as exc:
            logger.warning("statistics fetch failed", extra={"error": str(exc)})
            return False
        self.current_streak = data.get("currentStreak") or 0
        self.longest_streak = data.get("longestStreak") or 0
        self.last_active_date = data.get("lastActiveDate") or ""
        self.activity_logs = data.get("activityLogs") or []
        self.time_of_day_stats = data.get("timeOfDayStats") or default_time_of_day_stats()
        self.clear_cache()
        return True

    def save_to_server(self, entry=None, now=None):
        if not self.session.logged_in:
            self.sync_queue.push(STATS_KEY)
            self.persist_to_cache()
            return False
        try:
            self.api.save_statistics(self.to_payload())
        except SYNC_ERRORS as exc:
            now = now or utc_now()
            self.sync_state = SyncState.FAILED
            if entry is not None:
                self.sync_queue.retry(entry, now)
            else:
                self.sync_queue.push(STATS_KEY, now)
            logger.warning("statistics save failed", extra={"error": str(exc)})
            self.persist_to_cache()
            return False
        self.sync_state = SyncState.SYNCED
        self.sync_queue.discard(STATS_KEY)
        self.persist_to_cache()
        return True

    def process_sync_queue(self, now=None):
        if not self.session.logged_in:
            return 0
        synced = 0
        for entry in self.sync_queue.drain(now):
            if self.save_to_server(entry=entry, now=now):
                synced += 1
        return synced

    def update_streak_info(self, tasks, now=None):
        """Recompute streak, today's log and the hour bucket after a task completion."""
        tasks = list(tasks)
        if not any(task.completed for task in tasks):
            return False
        now = now or self.clock()
        today = now.date()
        today_string = today.isoformat()

        if self.last_active_date != today_string:
            yesterday_string = (today - timedelta(days=1)).isoformat()
            if self.last_active_date == yesterday_string:
                self.current_streak += 1
            else:
                self.current_streak = 1
            self.last_active_date = today_string
        self.longest_streak = max(self.longest_streak, self.current_streak)

        self.update_activity_log(today_string, tasks)
        self.update_time_of_day_stats(now)

        self.sync_state = SyncState.PENDING
        self.persist_to_cache()
        self.save_to_server()
        return True

    def refresh_activity_log(self, tasks, now=None):
        """Bring today's log entry in line with ``tasks`` without counting a new completion."""
        tasks = list(tasks)
        if not any(task.completed for task in tasks):
            return False
        today_string = (now or self.clock()).date().isoformat()
        if not self.update_activity_log(today_string, tasks):
            return False
        self.sync_state = SyncState.PENDING
        self.persist_to_cache()
        self.save_to_server()
        return True

    def update_activity_log(self, date_string, tasks):
        entry = {
            "date": date_string,
            "completedTasks": sum(1 for task in tasks if task.completed),
            "totalTasks": len(tasks),
        }
        for index, log in enumerate(self.activity_logs):
            if log["date"] == date_string:
                if log == entry:
                    return False
                self.activity_logs[index] = entry
                break
        else:
            self.activity_logs.append(entry)

        if len(self.activity_logs) > ACTIVITY_LOG_LIMIT:
            self.activity_logs.sort(key=lambda log: log["date"])
            self.activity_logs = self.activity_logs[-ACTIVITY_LOG_LIMIT:]
        return True

    def update_time_of_day_stats(self, now=None):
        bucket = time_of_day_bucket((now or self.clock()).hour)
        for stat in self.time_of_day_stats:
            if stat["time"] == bucket:
                stat["completed"] += 1
                break

    def _completed_on(self, day):
        day_string = day.isoformat()
        for log in self.activity_logs:
            if log["date"] == day_string:
                return log["completedTasks"]
        return 0

    def weekly_progress(self, today=None):
        """Completed-task counts for the last seven days, oldest first."""
        today = today or self.clock().date()
        progress = []
        for offset in range(6, -1, -1):
            day = today - timedelta(days=offset)
            progress.append({"day": DAY_NAMES[day.weekday()], "completed": self._completed_on(day)})
        return progress

    def previous_week_total(self, today=None):
        today = today or self.clock().date()
        return sum(self._completed_on(today - timedelta(days=offset)) for offset in range(7, 14))

    def week_over_week_change(self, today=None):
        """Percent change against the previous seven days; 0 when that week is empty."""
        today = today or self.clock().date()
        previous = self.previous_week_total(today)
        if previous == 0:
            return 0
        this_week = sum(day["completed"] for day in self.weekly_progress(today))
        return round((this_week - previous) / previous * 100)

    def most_productive_day(self, today=None):
        progress = self.weekly_progress(today)
        best = progress[0]
        for day in progress[1:]:
            if day["completed"] >= best["completed"]:
                best = day
        return best["day"]
