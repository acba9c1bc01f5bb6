from conftest import register


def _goal(client_id=1, **overrides):
    goal = {
        "id": client_id,
        "title": "Run a marathon",
        "description": "",
        "category": "long",
        "targetDate": "2026-04-12",
        "completed": False,
        "createdAt": "2025-09-07T18:30:00.000Z",
    }
    goal.update(overrides)
    return goal


def test_create_and_list_goals(auth_client):
    created = auth_client.post("/api/goals", json=_goal()).get_json()

    assert created["success"] is True
    assert created["clientId"] == 1

    goals = auth_client.get("/api/goals").get_json()["goals"]
    assert goals == [
        {
            "id": 1,
            "title": "Run a marathon",
            "description": "",
            "category": "long",
            "targetDate": "2026-04-12",
            "completed": False,
            "createdAt": "2025-09-07T18:30:00.000Z",
            "synced": True,
            "serverId": created["goalId"],
        }
    ]


def test_goals_are_listed_by_creation_time(auth_client):
    auth_client.post("/api/goals", json=_goal(1, title="old", createdAt="2025-01-01T00:00:00Z"))
    auth_client.post("/api/goals", json=_goal(2, title="new", createdAt="2025-06-01T00:00:00Z"))

    titles = [goal["title"] for goal in auth_client.get("/api/goals").get_json()["goals"]]
    assert titles == ["new", "old"]


def test_creation_time_offsets_are_normalized_before_ordering(auth_client):
    # 23:00 at UTC-5 is later than 02:00 the next day at UTC+2
    auth_client.post("/api/goals", json=_goal(1, title="west", createdAt="2025-06-01T23:00:00-05:00"))
    auth_client.post("/api/goals", json=_goal(2, title="east", createdAt="2025-06-02T02:00:00+02:00"))

    goals = auth_client.get("/api/goals").get_json()["goals"]
    assert [goal["title"] for goal in goals] == ["west", "east"]
    assert goals[0]["createdAt"] == "2025-06-02T04:00:00.000Z"


def test_category_defaults_to_short(auth_client):
    payload = _goal()
    del payload["category"]
    auth_client.post("/api/goals", json=payload)

    assert auth_client.get("/api/goals").get_json()["goals"][0]["category"] == "short"


def test_unknown_category_is_rejected(auth_client):
    response = auth_client.post("/api/goals", json=_goal(category="someday"))

    assert response.status_code == 400
    assert response.get_json()["message"] == "Invalid goal category: someday"


def test_missing_title_is_rejected(auth_client):
    payload = _goal()
    del payload["title"]

    response = auth_client.post("/api/goals", json=payload)
    assert response.status_code == 400
    assert response.get_json()["message"] == "Missing title field"


def test_update_and_delete_goal(auth_client):
    auth_client.post("/api/goals", json=_goal())

    response = auth_client.put("/api/goals/1", json=_goal(completed=True, category="life"))
    assert response.status_code == 200
    goal = auth_client.get("/api/goals").get_json()["goals"][0]
    assert goal["completed"] is True
    assert goal["category"] == "life"

    assert auth_client.delete("/api/goals/1").status_code == 200
    assert auth_client.get("/api/goals").get_json()["goals"] == []


def test_goals_are_scoped_to_their_owner(app, auth_client):
    auth_client.post("/api/goals", json=_goal())

    other = app.test_client()
    register(other, email="grace@example.com", name="Grace Hopper")

    response = other.delete("/api/goals/1")
    assert response.status_code == 404
    assert response.get_json()["message"] == (
        "Goal not found or you don't have permission to delete it"
    )
    assert len(auth_client.get("/api/goals").get_json()["goals"]) == 1
