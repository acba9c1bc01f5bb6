from urllib.parse import urlsplit

import pytest
import requests

from focusboard.client.context import ClientContext
from main import create_app


PASSWORD = "correct-horse"


class TransportResponse:
    """The slice of ``requests.Response`` the API client reads."""

    def __init__(self, status_code, reason, data):
        self.status_code = status_code
        self.reason = reason
        self._data = data

    def json(self):
        if self._data is None:
            raise ValueError("response has no JSON body")
        return self._data


class FlaskTransport:
    """Routes API client calls into the Flask test client; can go offline or fail on demand."""

    def __init__(self, flask_client):
        self.flask_client = flask_client
        self.offline = False
        self.failures = {}
        self.calls = []

    def fail(self, method, path, status_code=500):
        self.failures[(method, path)] = status_code

    def request(self, method, url, json=None, timeout=None):
        if self.offline:
            raise requests.ConnectionError("network unreachable")
        path = urlsplit(url).path
        self.calls.append((method, path))
        status_code = self.failures.get((method, path))
        if status_code is not None:
            return TransportResponse(
                status_code,
                "Injected",
                {"statusCode": status_code, "statusMessage": "Injected", "message": "injected failure"},
            )
        response = self.flask_client.open(path, method=method, json=json)
        reason = response.status.split(" ", 1)[1] if " " in response.status else ""
        return TransportResponse(response.status_code, reason, response.get_json(silent=True))


def register(client, email="ada@example.com", password=PASSWORD, name="Ada Lovelace"):
    return client.post(
        "/api/register",
        json={"name": name, "email": email, "password": password, "passwordConfirm": password},
    )


@pytest.fixture
def app(tmp_path):
    return create_app(
        {
            "TESTING": True,
            "DATABASE_URL": None,
            "SQLITE_PATH": str(tmp_path / "focusboard-test.db"),
            "AUTH_JWT_SECRET": "test-secret",
        }
    )


@pytest.fixture
def services(app):
    return app.extensions["focusboard"]


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_client(client):
    response = register(client)
    assert response.status_code == 200
    return client


@pytest.fixture
def transport(client):
    return FlaskTransport(client)


@pytest.fixture
def make_context(transport, tmp_path):
    def factory(cache_name="cache", **kwargs):
        return ClientContext(
            base_url="http://focusboard.test",
            cache_dir=str(tmp_path / cache_name),
            http_session=transport,
            **kwargs,
        )

    return factory


@pytest.fixture
def context(make_context):
    return make_context()


@pytest.fixture
def logged_in_context(client, context):
    register(client)
    context.set_logged_in(True, {"email": "ada@example.com"})
    return context
