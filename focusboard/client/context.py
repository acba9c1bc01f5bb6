import logging
import os
from pathlib import Path

from focusboard.client.api_client import FocusboardAPIClient
from focusboard.client.cache import LocalCache
from focusboard.client.collection_store import SYNC_ERRORS
from focusboard.client.goal_store import GoalStore
from focusboard.client.pomodoro_store import PomodoroStore
from focusboard.client.statistics_store import StatisticsStore
from focusboard.client.task_store import TaskStore
from focusboard.domain import utc_now


logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:5000"


class SessionState:
    """Login state shared by every store of one context."""

    def __init__(self):
        self.logged_in = False
        self.user = None


class ClientContext:
    """
    Owns the API client, the on-disk cache and the four stores.

    Logging in (or any other false -> true login transition) triggers
    ``sync``: each store pulls server state, merges its unsynced local
    records and drains its retry queue.
    """

    def __init__(
        self,
        base_url=None,
        cache_dir=None,
        timeout=10,
        http_session=None,
        clock=utc_now,
        local_clock=None,
        notifier=None,
    ):
        base_url = base_url or os.getenv("FOCUSBOARD_API_URL", DEFAULT_API_URL)
        cache_dir = cache_dir or os.getenv(
            "FOCUSBOARD_CACHE_DIR", str(Path.home() / ".focusboard")
        )
        self.api = FocusboardAPIClient(base_url, session=http_session, timeout=timeout)
        self.cache = LocalCache(cache_dir)
        self.session = SessionState()

        self.tasks = TaskStore(self.api, self.cache, self.session, clock=clock)
        self.goals = GoalStore(self.api, self.cache, self.session, clock=clock)
        self.pomodoro = PomodoroStore(
            self.api, self.cache, self.session, clock=clock, notifier=notifier
        )
        stats_kwargs = {"clock": local_clock} if local_clock else {}
        self.statistics = StatisticsStore(self.api, self.cache, self.session, **stats_kwargs)

        self.tasks.on_task_completed.append(self._task_completed)

    def _task_completed(self, task_store):
        self.statistics.update_streak_info(task_store.tasks)

    def initialize(self):
        self.tasks.initialize()
        self.goals.initialize()
        self.pomodoro.initialize()
        self.statistics.initialize(self.tasks.tasks)

    def set_logged_in(self, logged_in, user=None):
        was_logged_in = self.session.logged_in
        self.session.logged_in = logged_in
        self.session.user = user if logged_in else None
        if logged_in and not was_logged_in:
            self.sync()

    def login(self, email, password):
        user = self.api.login(email, password)
        self.set_logged_in(True, user)
        logger.info("logged in", extra={"email": email})
        return user

    def register(self, name, email, password, password_confirm):
        user = self.api.register(name, email, password, password_confirm)
        self.set_logged_in(True, user)
        return user

    def logout(self):
        try:
            self.api.logout()
        except SYNC_ERRORS as exc:
            logger.warning("server logout failed", extra={"error": str(exc)})
        self.set_logged_in(False)

    def sync(self, now=None):
        """Pull, merge and drain every store. Does nothing while logged out."""
        if not self.session.logged_in:
            return False
        for store in (self.tasks, self.goals):
            store.fetch_from_server()
            store.process_sync_queue(now)
        self.pomodoro.sync_with_server()
        self.statistics.fetch_from_server()
        self.statistics.process_sync_queue(now)
        return True
