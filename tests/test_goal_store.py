import pytest

from conftest import register
from focusboard.client.records import SyncState


def _server_goals(client):
    return client.get("/api/goals").get_json()["goals"]


def test_add_goal_syncs_when_logged_in(logged_in_context, client):
    goal = logged_in_context.goals.add_goal(
        "Run a marathon", category="long", target_date="2026-04-12"
    )

    assert goal.synced
    (server,) = _server_goals(client)
    assert server["title"] == "Run a marathon"
    assert server["category"] == "long"
    assert server["targetDate"] == "2026-04-12"
    assert server["createdAt"] == goal.created_at


def test_goals_are_grouped_by_category(context):
    context.goals.add_goal("Ship beta", category="short")
    context.goals.add_goal("Learn piano", category="life")
    context.goals.add_goal("Half marathon", category="long")
    context.goals.add_goal("Tidy desk")

    assert [goal.title for goal in context.goals.short_term_goals] == ["Ship beta", "Tidy desk"]
    assert [goal.title for goal in context.goals.long_term_goals] == ["Half marathon"]
    assert [goal.title for goal in context.goals.life_goals] == ["Learn piano"]


def test_unknown_category_raises(context):
    with pytest.raises(ValueError):
        context.goals.add_goal("Nap", category="someday")
    assert context.goals.goals == []


def test_update_and_toggle_goal(logged_in_context, client):
    goal = logged_in_context.goals.add_goal("Ship beta")

    logged_in_context.goals.update_goal(goal.local_id, title="Ship v1", category="long")
    logged_in_context.goals.toggle_complete(goal.local_id)

    (server,) = _server_goals(client)
    assert server["title"] == "Ship v1"
    assert server["category"] == "long"
    assert server["completed"] is True
    assert logged_in_context.goals.completed_goals == [goal]


def test_update_with_blank_title_is_ignored(context):
    goal = context.goals.add_goal("Ship beta")

    assert context.goals.update_goal(goal.local_id, title="  ") is None
    assert goal.title == "Ship beta"


def test_offline_goals_reach_server_after_login(context, client):
    goal = context.goals.add_goal("Learn piano", category="life")
    assert goal.sync_state is SyncState.PENDING

    register(client)
    context.set_logged_in(True)

    assert goal.synced
    assert [item["title"] for item in _server_goals(client)] == ["Learn piano"]


def test_delete_goal(logged_in_context, client):
    goal = logged_in_context.goals.add_goal("Ship beta")

    assert logged_in_context.goals.delete_goal(goal.local_id) is True
    assert logged_in_context.goals.delete_goal(goal.local_id) is False
    assert _server_goals(client) == []


def test_fetch_replaces_goals_from_server(logged_in_context, client):
    client.post(
        "/api/goals",
        json={"id": 5, "title": "From the web", "category": "life", "createdAt": "2025-09-01T08:00:00Z"},
    )

    logged_in_context.goals.fetch_from_server()

    (goal,) = logged_in_context.goals.goals
    assert goal.local_id == 5
    assert goal.created_at == "2025-09-01T08:00:00.000Z"
    assert logged_in_context.goals.next_id == 6
