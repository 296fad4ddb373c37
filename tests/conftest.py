"""Pytest fixtures replacing the HTTP session with canned API responses."""

import copy

import pytest
import requests

from transport import ChipApiClient


class FakeResponse:
    def __init__(self, payload=None, status_code=200, text=None):
        self.payload = payload
        self.status_code = status_code
        self.text = text if text is not None else str(payload)

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)

    def json(self):
        if isinstance(self.payload, Exception):
            raise self.payload
        return copy.deepcopy(self.payload)


class FakeSession:
    """Stands in for requests.Session, replaying responses in order."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.headers = {}
        self.auth = None
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": dict(params or {}), "timeout": timeout})
        if not self.responses:
            raise AssertionError(f"Unexpected request to {url}")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        if isinstance(response, FakeResponse):
            return response
        return FakeResponse(response)


@pytest.fixture
def fake_session():
    return FakeSession


@pytest.fixture
def fake_response():
    return FakeResponse


@pytest.fixture
def make_client():
    def _make(*responses):
        session = FakeSession(*responses)
        client = ChipApiClient("user", "secret", base_uri="https://api.test", session=session)
        return client, session
    return _make
