import json

import mongomock
import pytest
import requests

from aqua_bridge.errors import UpstreamFailure
from aqua_bridge.services.otp_store import InMemoryOtpStore
from aqua_bridge.services.sms_provider import SmsProvider
from app import create_app


class FakeClock:
    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeSmsProvider(SmsProvider):
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent = []

    def send(self, to, body):
        if self.fail:
            raise UpstreamFailure("provider down")
        self.sent.append((to, body))
        return f"SM{len(self.sent):04d}"


def make_response(status_code=200, body=None, text=None, reason="OK"):
    resp = requests.Response()
    resp.status_code = status_code
    resp.reason = reason
    if body is not None:
        resp._content = json.dumps(body).encode("utf-8")
        resp.headers["Content-Type"] = "application/json"
    else:
        resp._content = (text or "").encode("utf-8")
        resp.headers["Content-Type"] = "text/html"
    return resp


class StubSession:
    """Stands in for requests.Session: replays queued responses / exceptions."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        if not self.responses:
            raise AssertionError(f"unexpected request {method} {url}")
        nxt = self.responses.pop(0)
        if isinstance(nxt, Exception):
            raise nxt
        return nxt

    def post(self, url, **kwargs):
        return self.request("POST", url, **kwargs)


class FlaskSession:
    """Routes requests.Session calls into a Flask test client."""

    def __init__(self, client, base_url="http://api.test"):
        self.client = client
        self.base_url = base_url

    def request(self, method, url, json=None, params=None, timeout=None):
        path = url[len(self.base_url):] if url.startswith(self.base_url) else url
        res = self.client.open(path, method=method, json=json, query_string=params)
        resp = requests.Response()
        resp.status_code = res.status_code
        resp.reason = res.status
        resp._content = res.get_data()
        resp.headers["Content-Type"] = res.content_type
        return resp


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sms():
    return FakeSmsProvider()


@pytest.fixture
def db():
    return mongomock.MongoClient()["aqua_bridge_test"]


@pytest.fixture
def otp_store():
    return InMemoryOtpStore()


@pytest.fixture
def app(db, otp_store):
    return create_app(
        test_config={
            "TESTING": True,
            "TWILIO_ACCOUNT_SID": None,
            "TWILIO_AUTH_TOKEN": None,
            "TWILIO_PHONE_NUMBER": None,
        },
        db=db,
        otp_store=otp_store,
    )


@pytest.fixture
def client(app):
    return app.test_client()
