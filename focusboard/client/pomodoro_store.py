"""Pomodoro timer, local session statistics and their server sync."""
import logging
from dataclasses import asdict, dataclass, field, fields

from focusboard.client.collection_store import SYNC_ERRORS
from focusboard.client.reconcile import cap_history, merge_session_history
from focusboard.client.records import PomodoroSession, SyncState
from focusboard.domain import (
    SESSION_HISTORY_LIMIT,
    iso_utc,
    iso_week,
    parse_iso_date,
    utc_now,
)


logger = logging.getLogger(__name__)

IDLE = "idle"
RUNNING = "running"
PAUSED = "paused"
BREAK = "break"


@dataclass
class PomodoroSettings:
    work_duration: int = 25
    short_break_duration: int = 5
    long_break_duration: int = 15
    sessions_before_long_break: int = 4
    notifications_enabled: bool = True
    notification_sound: str = "bell"
    focus_mode_enabled: bool = False


@dataclass
class PomodoroStatistics:
    completed_sessions: int = 0
    completed_today: int = 0
    completed_this_week: int = 0
    total_focus_time: int = 0
    sessions_history: list = field(default_factory=list)
    last_session_date: str = ""
    last_week_number: int = 0

    def to_cache(self):
        data = asdict(self)
        data["sessions_history"] = [session.to_cache() for session in self.sessions_history]
        return data

    @classmethod
    def from_cache(cls, data):
        data = dict(data)
        data["sessions_history"] = [
            PomodoroSession.from_cache(item) for item in data.get("sessions_history", [])
        ]
        known = {item.name for item in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})


class PomodoroStore:
    """
    Timer state machine driven by explicit ``tick`` calls.

    idle -> running -> (complete) -> break -> idle, with pause/resume from
    running or break. Completed work sessions are kept locally as pending
    until ``sync_with_server`` confirms them.
    """

    cache_key = "pomodoro"

    def __init__(self, api, cache, session, clock=utc_now, notifier=None):
        self.api = api
        self.cache = cache
        self.session = session
        self.clock = clock
        self.notifier = notifier

        self.settings = PomodoroSettings()
        self.statistics = PomodoroStatistics()

        self.timer_state = IDLE
        self.previous_state = None
        self.initial_time = self.settings.work_duration * 60
        self.break_time = self.settings.short_break_duration * 60
        self.long_break_time = self.settings.long_break_duration * 60
        self.time_remaining = self.initial_time

        self.is_syncing = False
        self.is_synced_with_server = False
        self.last_sync_time = None

    @property
    def formatted_time(self):
        minutes, seconds = divmod(self.time_remaining, 60)
        return f"{minutes:02d}:{seconds:02d}"

    @property
    def current_break_length(self):
        if self.statistics.completed_sessions % self.settings.sessions_before_long_break == 0:
            return self.long_break_time
        return self.break_time

    @property
    def progress(self):
        total = self.current_break_length if self.timer_state == BREAK else self.initial_time
        if not total:
            return 0.0
        return 100 - (self.time_remaining / total) * 100

    @property
    def unsynced_sessions(self):
        return [
            session
            for session in self.statistics.sessions_history
            if not session.synced and session.type == "work"
        ]

    def initialize(self):
        self.load_from_cache()
        self.roll_over()
        self.apply_settings()

    def roll_over(self, now=None):
        """Zero the daily and weekly counters when the stored date is stale."""
        today = (now or self.clock()).date()
        stats = self.statistics
        last_day = parse_iso_date(stats.last_session_date)
        if last_day != today:
            stats.completed_today = 0
        if last_day is None or iso_week(last_day) != iso_week(today):
            stats.completed_this_week = 0
        stats.last_session_date = today.isoformat()
        stats.last_week_number = iso_week(today)[1]

    def apply_settings(self):
        self.initial_time = self.settings.work_duration * 60
        self.break_time = self.settings.short_break_duration * 60
        self.long_break_time = self.settings.long_break_duration * 60
        if self.timer_state == IDLE:
            self.time_remaining = self.initial_time

    def update_settings(self, **changes):
        for name, value in changes.items():
            if not hasattr(self.settings, name):
                raise ValueError(f"Unknown pomodoro setting: {name}")
            setattr(self.settings, name, value)
        self.apply_settings()
        self.persist_to_cache()

    def set_notification_sound(self, sound):
        self.update_settings(notification_sound=sound)

    def start_timer(self):
        if self.timer_state == PAUSED and self.previous_state:
            self.timer_state = self.previous_state
        elif self.timer_state in (IDLE, PAUSED):
            self.timer_state = RUNNING

    def pause_timer(self):
        if self.timer_state in (RUNNING, BREAK):
            self.previous_state = self.timer_state
            self.timer_state = PAUSED

    def reset_timer(self):
        self.timer_state = IDLE
        self.previous_state = None
        self.time_remaining = self.initial_time

    def skip_to_break(self):
        return self.complete_session()

    def skip_break(self):
        self.reset_timer()

    def tick(self, seconds=1):
        if self.timer_state not in (RUNNING, BREAK):
            return
        self.time_remaining = max(self.time_remaining - seconds, 0)
        if self.time_remaining > 0:
            return
        if self.timer_state == RUNNING:
            self.complete_session()
        else:
            self.reset_timer()
            self._notify("Break Complete", "Ready to start another session?")

    def complete_session(self, now=None):
        """Record the running work session and start the matching break."""
        if self.timer_state != RUNNING:
            return None
        now = now or self.clock()
        self.roll_over(now)

        stats = self.statistics
        stats.completed_sessions += 1
        stats.completed_today += 1
        stats.completed_this_week += 1
        stats.total_focus_time += self.initial_time

        session = PomodoroSession(date=iso_utc(now), duration=self.initial_time, type="work")
        stats.sessions_history.insert(0, session)
        stats.sessions_history = cap_history(stats.sessions_history, SESSION_HISTORY_LIMIT)

        self.timer_state = BREAK
        self.previous_state = None
        self.time_remaining = self.current_break_length
        self._notify("Session Complete", "Great job! Time for a break.")
        self.persist_to_cache()
        return session

    def _notify(self, title, body):
        if not self.settings.notifications_enabled or self.notifier is None:
            return
        self.notifier(title, body, self.settings.notification_sound)

    def load_from_cache(self):
        data = self.cache.load(self.cache_key)
        if not data:
            return
        settings = data.get("settings") or {}
        known = {item.name for item in fields(PomodoroSettings)}
        self.settings = PomodoroSettings(
            **{key: value for key, value in settings.items() if key in known}
        )
        if data.get("statistics"):
            self.statistics = PomodoroStatistics.from_cache(data["statistics"])
        self.last_sync_time = data.get("last_sync_time")

    def persist_to_cache(self):
        self.cache.save(
            self.cache_key,
            {
                "settings": asdict(self.settings),
                "statistics": self.statistics.to_cache(),
                "last_sync_time": self.last_sync_time,
            },
        )

    def sync_with_server(self):
        """Push pending work sessions one by one, then pull fresh statistics."""
        if not self.session.logged_in:
            return False
        self.is_syncing = True
        try:
            for session in self.unsynced_sessions:
                try:
                    self.api.create_pomodoro_session(session.to_payload())
                except SYNC_ERRORS as exc:
                    session.sync_state = SyncState.FAILED
                    logger.warning(
                        "pomodoro session sync failed",
                        extra={"date": session.date, "error": str(exc)},
                    )
                    continue
                session.sync_state = SyncState.SYNCED
            self.persist_to_cache()
            return self.fetch_from_server()
        finally:
            self.is_syncing = False

    def fetch_from_server(self):
        if not self.session.logged_in:
            return False
        try:
            server_stats = self.api.get_pomodoro_statistics()
        except SYNC_ERRORS as exc:
            logger.warning("pomodoro statistics fetch failed", extra={"error": str(exc)})
            return False

        stats = self.statistics
        stats.completed_sessions = server_stats.get("completedSessions") or 0
        stats.completed_today = server_stats.get("completedToday") or 0
        stats.completed_this_week = server_stats.get("completedThisWeek") or 0
        stats.total_focus_time = server_stats.get("totalFocusTime") or 0

        history = server_stats.get("sessionsHistory")
        if isinstance(history, list):
            server_sessions = [PomodoroSession.from_server(item) for item in history]
            stats.sessions_history = merge_session_history(
                server_sessions, stats.sessions_history
            )
        else:
            logger.warning("pomodoro statistics missing session history")

        if server_stats.get("lastSessionDate"):
            stats.last_session_date = server_stats["lastSessionDate"]
        if server_stats.get("lastWeekNumber"):
            stats.last_week_number = server_stats["lastWeekNumber"]

        self.is_synced_with_server = True
        self.last_sync_time = iso_utc(self.clock())
        self.persist_to_cache()
        return True
