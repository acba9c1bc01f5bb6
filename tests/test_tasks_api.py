from conftest import register


def _task(client_id=1, **overrides):
    task = {
        "id": client_id,
        "title": "Buy milk",
        "description": "2 liters",
        "completed": False,
        "favorited": False,
        "date": "2025-09-08",
        "time": "09:30",
    }
    task.update(overrides)
    return task


def test_create_and_list_tasks(auth_client):
    response = auth_client.post("/api/tasks", json=_task())

    assert response.status_code == 200
    body = response.get_json()
    assert body["success"] is True
    assert body["clientId"] == 1
    assert isinstance(body["taskId"], int)

    listed = auth_client.get("/api/tasks").get_json()
    assert listed["success"] is True
    assert listed["tasks"] == [
        {
            "id": 1,
            "title": "Buy milk",
            "description": "2 liters",
            "completed": False,
            "favorited": False,
            "date": "2025-09-08",
            "time": "09:30",
            "synced": True,
            "serverId": body["taskId"],
        }
    ]


def test_tasks_are_listed_newest_first(auth_client):
    auth_client.post("/api/tasks", json=_task(1, title="first"))
    auth_client.post("/api/tasks", json=_task(2, title="second"))

    titles = [task["title"] for task in auth_client.get("/api/tasks").get_json()["tasks"]]
    assert titles == ["second", "first"]


def test_create_requires_title(auth_client):
    response = auth_client.post("/api/tasks", json=_task(title="   "))

    assert response.status_code == 400
    assert response.get_json()["message"] == "Missing title field"


def test_create_rejects_bad_date(auth_client):
    response = auth_client.post("/api/tasks", json=_task(date="next tuesday"))

    assert response.status_code == 400


def test_duplicate_client_id_conflicts(auth_client):
    auth_client.post("/api/tasks", json=_task())
    response = auth_client.post("/api/tasks", json=_task(title="Other"))

    assert response.status_code == 409
    assert len(auth_client.get("/api/tasks").get_json()["tasks"]) == 1


def test_update_task(auth_client):
    created = auth_client.post("/api/tasks", json=_task()).get_json()

    response = auth_client.put("/api/tasks/1", json=_task(title="Buy oat milk", completed=True))

    assert response.status_code == 200
    assert response.get_json()["taskId"] == created["taskId"]
    task = auth_client.get("/api/tasks").get_json()["tasks"][0]
    assert task["title"] == "Buy oat milk"
    assert task["completed"] is True


def test_update_missing_task_is_not_found(auth_client):
    response = auth_client.put("/api/tasks/42", json=_task(42))

    assert response.status_code == 404
    assert response.get_json()["message"] == (
        "Task not found or you don't have permission to update it"
    )


def test_delete_task(auth_client):
    auth_client.post("/api/tasks", json=_task())

    assert auth_client.delete("/api/tasks/1").status_code == 200
    assert auth_client.get("/api/tasks").get_json()["tasks"] == []
    assert auth_client.delete("/api/tasks/1").status_code == 404


def test_tasks_are_scoped_to_their_owner(app, auth_client):
    auth_client.post("/api/tasks", json=_task())

    other = app.test_client()
    register(other, email="grace@example.com", name="Grace Hopper")

    assert other.get("/api/tasks").get_json()["tasks"] == []
    assert other.put("/api/tasks/1", json=_task(title="hijack")).status_code == 404
    assert other.delete("/api/tasks/1").status_code == 404
    # same client id is free for a different user
    assert other.post("/api/tasks", json=_task(title="Grace's milk")).status_code == 200

    titles = [task["title"] for task in auth_client.get("/api/tasks").get_json()["tasks"]]
    assert titles == ["Buy milk"]
