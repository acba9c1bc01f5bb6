from datetime import date, datetime, timedelta

import pytest

from conftest import register
from focusboard.client.records import SyncState, Task
from focusboard.domain import time_of_day_bucket, utc_now


def _tasks(completed=1, total=2):
    return [
        Task(local_id=index + 1, title=f"task {index}", completed=index < completed)
        for index in range(total)
    ]


@pytest.fixture
def stats(context):
    return context.statistics


def test_first_completion_starts_a_streak(stats):
    assert stats.update_streak_info(_tasks(), now=datetime(2025, 9, 8, 9, 0)) is True

    assert stats.current_streak == 1
    assert stats.longest_streak == 1
    assert stats.last_active_date == "2025-09-08"
    assert stats.activity_logs == [{"date": "2025-09-08", "completedTasks": 1, "totalTasks": 2}]


def test_no_completed_tasks_changes_nothing(stats):
    assert stats.update_streak_info(_tasks(completed=0), now=datetime(2025, 9, 8, 9, 0)) is False
    assert stats.current_streak == 0
    assert stats.activity_logs == []


def test_consecutive_days_extend_the_streak(stats):
    for day in range(8, 11):
        stats.update_streak_info(_tasks(), now=datetime(2025, 9, day, 9, 0))

    assert stats.current_streak == 3
    assert stats.longest_streak == 3


def test_same_day_completions_count_once(stats):
    stats.update_streak_info(_tasks(), now=datetime(2025, 9, 8, 9, 0))
    stats.update_streak_info(_tasks(completed=2), now=datetime(2025, 9, 8, 18, 0))

    assert stats.current_streak == 1
    assert stats.activity_logs == [{"date": "2025-09-08", "completedTasks": 2, "totalTasks": 2}]


def test_gap_resets_streak_but_keeps_longest(stats):
    for day in (8, 9, 10):
        stats.update_streak_info(_tasks(), now=datetime(2025, 9, day, 9, 0))

    stats.update_streak_info(_tasks(), now=datetime(2025, 9, 13, 9, 0))

    assert stats.current_streak == 1
    assert stats.longest_streak == 3


def test_activity_log_keeps_the_last_30_days(stats):
    start = datetime(2025, 8, 1, 9, 0)
    for offset in range(35):
        stats.update_streak_info(_tasks(), now=start + timedelta(days=offset))

    assert len(stats.activity_logs) == 30
    assert stats.activity_logs[0]["date"] == "2025-08-06"
    assert stats.activity_logs[-1]["date"] == "2025-09-04"
    assert stats.current_streak == 35


@pytest.mark.parametrize(
    "hour, bucket",
    [
        (5, "Morning"),
        (11, "Morning"),
        (12, "Afternoon"),
        (16, "Afternoon"),
        (17, "Evening"),
        (21, "Evening"),
        (22, "Night"),
        (4, "Night"),
    ],
)
def test_time_of_day_buckets(stats, hour, bucket):
    assert time_of_day_bucket(hour) == bucket

    stats.update_streak_info(_tasks(), now=datetime(2025, 9, 8, hour, 30))

    counts = {stat["time"]: stat["completed"] for stat in stats.time_of_day_stats}
    assert counts[bucket] == 1
    assert sum(counts.values()) == 1


def _log(day, completed):
    return {"date": day.isoformat(), "completedTasks": completed, "totalTasks": 5}


def test_weekly_getters(stats):
    today = date(2025, 9, 14)
    stats.activity_logs = [
        _log(date(2025, 9, 8), 2),
        _log(date(2025, 9, 10), 5),
        _log(date(2025, 9, 14), 1),
        _log(date(2025, 9, 1), 4),
        _log(date(2025, 9, 3), 2),
    ]

    progress = stats.weekly_progress(today)
    assert [day["day"] for day in progress] == ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    assert [day["completed"] for day in progress] == [2, 0, 5, 0, 0, 0, 1]
    assert stats.previous_week_total(today) == 6
    assert stats.week_over_week_change(today) == 33
    assert stats.most_productive_day(today) == "Wed"


def test_week_over_week_without_history_is_zero(stats):
    assert stats.week_over_week_change(date(2025, 9, 14)) == 0


def test_progress_is_pushed_to_server(logged_in_context, client):
    stats = logged_in_context.statistics

    stats.update_streak_info(_tasks(), now=datetime(2025, 9, 8, 9, 0))

    assert stats.sync_state is SyncState.SYNCED
    server = client.get("/api/statistics").get_json()
    assert server["currentStreak"] == 1
    assert server["lastActiveDate"] == "2025-09-08"


def test_failed_push_is_queued_and_retried(logged_in_context, transport, client):
    stats = logged_in_context.statistics
    transport.offline = True

    stats.update_streak_info(_tasks(), now=datetime(2025, 9, 8, 9, 0))
    assert stats.sync_state is SyncState.FAILED
    assert stats.sync_queue.keys() == ["stats"]

    transport.offline = False
    assert stats.process_sync_queue() == 1
    assert stats.sync_state is SyncState.SYNCED
    assert client.get("/api/statistics").get_json()["currentStreak"] == 1


def test_fetch_does_not_overwrite_unpushed_progress(context, client):
    stats = context.statistics
    stats.update_streak_info(_tasks(), now=datetime(2025, 9, 8, 9, 0))
    assert stats.sync_state is SyncState.PENDING

    register(client)
    client.post("/api/statistics", json={"currentStreak": 9, "longestStreak": 9})
    context.set_logged_in(True)

    assert stats.current_streak == 1
    assert client.get("/api/statistics").get_json()["currentStreak"] == 1


def test_fetch_replaces_synced_statistics(logged_in_context, client):
    client.post(
        "/api/statistics",
        json={"currentStreak": 4, "longestStreak": 7, "lastActiveDate": "2025-09-07"},
    )
    stats = logged_in_context.statistics

    assert stats.fetch_from_server() is True

    assert (stats.current_streak, stats.longest_streak) == (4, 7)
    assert stats.last_active_date == "2025-09-07"
    assert not logged_in_context.cache.exists("statistics")


def test_cached_statistics_survive_restart(context, make_context):
    context.statistics.update_streak_info(_tasks(), now=datetime(2025, 9, 8, 9, 0))

    restarted = make_context()
    restarted.statistics.load_from_cache()

    assert restarted.statistics.current_streak == 1
    assert restarted.statistics.sync_state is SyncState.PENDING
    assert restarted.statistics.sync_queue.keys() == ["stats"]


def test_failed_push_survives_a_sync_while_the_server_still_fails(logged_in_context, transport):
    stats = logged_in_context.statistics
    transport.fail("POST", "/api/statistics", 500)

    stats.update_streak_info(_tasks())
    assert stats.sync_state is SyncState.FAILED

    assert logged_in_context.sync(now=utc_now()) is True
    assert stats.sync_state is SyncState.FAILED
    assert stats.sync_queue.keys() == ["stats"]


def test_reloaded_retry_queue_accepts_the_local_clock(logged_in_context, transport, make_context, client):
    transport.fail("POST", "/api/statistics", 500)
    logged_in_context.statistics.update_streak_info(_tasks())
    entry = logged_in_context.statistics.sync_queue.get("stats")

    restarted = make_context()
    restarted.statistics.load_from_cache()
    restarted.session.logged_in = True
    stats = restarted.statistics
    assert stats.sync_queue.get("stats").retry_after == entry.retry_after

    transport.failures.clear()
    assert stats.process_sync_queue(now=stats.clock()) == 0
    assert stats.process_sync_queue(now=entry.retry_after) == 1
    assert stats.sync_state is SyncState.SYNCED
    assert client.get("/api/statistics").get_json()["currentStreak"] == 1


def test_startup_refreshes_the_log_without_counting_a_completion(make_context):
    monday = datetime(2025, 9, 8, 9, 0)
    first = make_context(local_clock=lambda: monday)
    first.statistics.initialize(_tasks(completed=1, total=3))

    assert first.statistics.current_streak == 0
    assert sum(stat["completed"] for stat in first.statistics.time_of_day_stats) == 0
    assert first.statistics.activity_logs == [
        {"date": "2025-09-08", "completedTasks": 1, "totalTasks": 3}
    ]

    restarted = make_context(local_clock=lambda: monday)
    restarted.statistics.initialize(_tasks(completed=1, total=3))
    assert restarted.statistics.activity_logs == first.statistics.activity_logs
    assert sum(stat["completed"] for stat in restarted.statistics.time_of_day_stats) == 0
