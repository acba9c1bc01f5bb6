"""HTTP client for the focusboard JSON API."""
import logging

import requests


logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Non-2xx response from the API, carrying the envelope's message."""

    def __init__(self, status_code, message):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class FocusboardAPIClient:
    """
    Thin wrapper over a ``requests.Session``.

    The session keeps the login cookie between calls. Any object with a
    compatible ``request(method, url, json=..., timeout=...)`` can stand in
    for it. Transport failures surface as ``requests.RequestException``.
    """

    def __init__(self, base_url, session=None, timeout=10):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        if session is None:
            session = requests.Session()
            session.headers.update({"Accept": "application/json"})
        self.session = session

    def _request(self, method, path, payload=None):
        url = f"{self.base_url}{path}"
        response = self.session.request(method, url, json=payload, timeout=self.timeout)
        try:
            data = response.json()
        except ValueError:
            data = None
        if response.status_code >= 400:
            message = data.get("message") if isinstance(data, dict) else None
            logger.debug(
                "api request failed",
                extra={"method": method, "path": path, "status": response.status_code},
            )
            raise ApiError(response.status_code, message or response.reason or "")
        return data if isinstance(data, dict) else {}

    # auth
    def login(self, email, password):
        data = self._request("POST", "/api/login", {"email": email, "password": password})
        return data.get("user")

    def register(self, name, email, password, password_confirm):
        data = self._request(
            "POST",
            "/api/register",
            {
                "name": name,
                "email": email,
                "password": password,
                "passwordConfirm": password_confirm,
            },
        )
        return data.get("user")

    def logout(self):
        self._request("POST", "/api/logout")

    def me(self):
        return self._request("GET", "/api/me").get("user")

    # tasks
    def list_tasks(self):
        return self._request("GET", "/api/tasks").get("tasks", [])

    def create_task(self, payload):
        return self._request("POST", "/api/tasks", payload).get("taskId")

    def update_task(self, client_id, payload):
        return self._request("PUT", f"/api/tasks/{client_id}", payload).get("taskId")

    def delete_task(self, client_id):
        self._request("DELETE", f"/api/tasks/{client_id}")

    # goals
    def list_goals(self):
        return self._request("GET", "/api/goals").get("goals", [])

    def create_goal(self, payload):
        return self._request("POST", "/api/goals", payload).get("goalId")

    def update_goal(self, client_id, payload):
        return self._request("PUT", f"/api/goals/{client_id}", payload).get("goalId")

    def delete_goal(self, client_id):
        self._request("DELETE", f"/api/goals/{client_id}")

    # pomodoro
    def create_pomodoro_session(self, payload):
        self._request("POST", "/api/pomodoro/sessions", payload)

    def get_pomodoro_statistics(self):
        return self._request("GET", "/api/pomodoro/statistics").get("statistics", {})

    # user statistics
    def get_statistics(self):
        return self._request("GET", "/api/statistics")

    def save_statistics(self, payload):
        self._request("POST", "/api/statistics", payload)
