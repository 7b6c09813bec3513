import io

import pandas as pd
import pytest

from margin_dashboard.app import app, init_app

BASE_URL = "https://hooks.test/webhook/"


class FakeResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeSession:
    """Stands in for requests.Session; answers by endpoint name."""

    def __init__(self):
        self.calls = []
        self.responses = {}

    def reply(self, endpoint, status_code=200, payload=None):
        self.responses[endpoint] = FakeResponse(status_code, payload)

    def fail(self, endpoint, exc):
        self.responses[endpoint] = exc

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        result = self.responses.get(url.rsplit("/", 1)[-1], FakeResponse(200, []))
        if isinstance(result, Exception):
            raise result
        return result

    def calls_to(self, endpoint):
        return [c for c in self.calls if c[1].endswith("/" + endpoint)]


def make_workbook(rows, columns=("Name", "CPF")):
    output = io.BytesIO()
    pd.DataFrame(rows, columns=list(columns)).to_excel(output, index=False, engine="openpyxl")
    return output.getvalue()


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def client(fake_session):
    init_app(app, {
        "TESTING": True,
        "SECRET_KEY": "test-secret",
        "WEBHOOK_BASE_URL": BASE_URL,
        "WEBHOOK_SESSION": fake_session,
        "MAX_CONTENT_LENGTH": 16 * 1024 * 1024,
    })
    with app.test_client() as client:
        yield client


@pytest.fixture
def logged_in(client):
    with client.session_transaction() as sess:
        sess["authenticated"] = True
    return client
