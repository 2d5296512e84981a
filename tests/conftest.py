# tests/conftest.py

import re

import pytest

from pharmashe.engine.classifier import TermClassifier


class FakeResponse:
    """Stands in for requests.Response in client tests."""

    def __init__(self, status_code=200, payload=None, json_error=False):
        self.status_code = status_code
        self._payload = payload
        self._json_error = json_error

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._json_error:
            raise ValueError("Expecting value")
        return self._payload


class RecordingGet:
    """Replacement for requests.get that records calls and replays a response."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def __call__(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def fake_get(monkeypatch):
    """Installs a RecordingGet in place of requests.get and returns it."""

    def install(response=None, error=None):
        getter = RecordingGet(response=response, error=error)
        monkeypatch.setattr("requests.get", getter)
        return getter

    return install


@pytest.fixture
def small_classifier():
    return TermClassifier(
        excluded={"arthritis", "medication"},
        included={"inducer", "teratogenic"},
        patterns=[("inflammation_suffix", re.compile("itis$"))],
    )
