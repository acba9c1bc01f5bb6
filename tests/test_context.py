from conftest import PASSWORD, register
from focusboard.client.context import DEFAULT_API_URL, ClientContext


def test_environment_fallbacks(monkeypatch, tmp_path):
    monkeypatch.setenv("FOCUSBOARD_API_URL", "https://focus.example.com/")
    monkeypatch.setenv("FOCUSBOARD_CACHE_DIR", str(tmp_path / "env-cache"))

    context = ClientContext()

    assert context.api.base_url == "https://focus.example.com"
    assert context.cache.directory == tmp_path / "env-cache"


def test_default_api_url(monkeypatch, tmp_path):
    monkeypatch.delenv("FOCUSBOARD_API_URL", raising=False)

    context = ClientContext(cache_dir=str(tmp_path))

    assert context.api.base_url == DEFAULT_API_URL


def test_register_through_context_syncs_offline_work(context, client):
    context.tasks.add_task("Buy milk")
    context.goals.add_goal("Run a marathon", category="long")

    user = context.register("Ada Lovelace", "ada@example.com", PASSWORD, PASSWORD)

    assert user["email"] == "ada@example.com"
    assert context.session.logged_in
    assert [task["title"] for task in client.get("/api/tasks").get_json()["tasks"]] == ["Buy milk"]
    assert [goal["title"] for goal in client.get("/api/goals").get_json()["goals"]] == [
        "Run a marathon"
    ]


def test_login_and_logout(context, client):
    register(client)
    client.post("/api/logout")

    context.login("ada@example.com", PASSWORD)
    assert context.session.logged_in
    assert context.session.user["email"] == "ada@example.com"

    context.logout()
    assert not context.session.logged_in
    assert client.get("/api/tasks").status_code == 401


def test_logout_while_offline_still_logs_out_locally(logged_in_context, transport):
    transport.offline = True

    logged_in_context.logout()

    assert not logged_in_context.session.logged_in


def test_sync_only_runs_on_login_transition(logged_in_context, transport):
    calls_before = len(transport.calls)

    logged_in_context.set_logged_in(True)

    assert len(transport.calls) == calls_before


def test_sync_does_nothing_when_logged_out(context, transport):
    assert context.sync() is False
    assert transport.calls == []


def test_initialize_pulls_everything_for_a_logged_in_user(make_context, client):
    register(client)
    client.post("/api/tasks", json={"id": 3, "title": "Buy milk"})
    client.post("/api/goals", json={"id": 1, "title": "Run a marathon"})

    context = make_context()
    context.session.logged_in = True
    context.initialize()

    assert [task.title for task in context.tasks.tasks] == ["Buy milk"]
    assert [goal.title for goal in context.goals.goals] == ["Run a marathon"]
    assert context.tasks.next_id == 4
    assert context.statistics.initialized


def test_repeated_sync_is_stable(logged_in_context):
    logged_in_context.tasks.add_task("Buy milk")
    logged_in_context.tasks.add_task("Eggs")
    before = [(task.local_id, task.title, task.server_id) for task in logged_in_context.tasks.tasks]

    logged_in_context.sync()
    logged_in_context.sync()

    after = [(task.local_id, task.title, task.server_id) for task in logged_in_context.tasks.tasks]
    assert sorted(after) == sorted(before)
