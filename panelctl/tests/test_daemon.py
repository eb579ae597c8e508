import json

import requests

from panelctl.modules.bulk import BulkRunner
from panelctl.modules.daemon import (
    DaemonClient,
    DaemonRejectedError,
    DaemonTimeoutError,
)
from panelctl.modules.inventory import Inventory
from panelctl.modules.models import ActionFailed, ActionSucceeded

from .conftest import FakeSession


def test_reinstall_posts_to_daemon(targets):
    session = FakeSession(status_code=204)
    client = DaemonClient(session=session, timeout=(1, 2))

    result = client.reinstall(targets["beta"])

    assert isinstance(result, ActionSucceeded)
    assert result.status_code == 204
    method, url, kwargs = session.requests[0]
    assert method == "POST"
    assert url == "https://a.example.com:8080/v1/server/reinstall"
    assert kwargs["headers"]["X-Access-Server"] == "uuid-beta"
    assert kwargs["headers"]["X-Access-Token"] == "secret-a"
    assert kwargs["json"] == {}
    assert kwargs["timeout"] == (1, 2)


def test_one_request_per_call(targets):
    session = FakeSession()
    client = DaemonClient(session=session)
    client.reinstall(targets["gamma"])
    assert len(session.requests) == 1
    assert session.requests[0][1] == "http://b.example.com:8443/v1/server/reinstall"


def test_timeout_is_classified(targets):
    session = FakeSession(exc=requests.exceptions.ReadTimeout("read timed out"))
    result = DaemonClient(session=session).reinstall(targets["alpha"])

    assert isinstance(result, ActionFailed)
    assert result.kind == "timeout"
    assert "timed out" in result.detail
    assert len(session.requests) == 1


def test_connect_timeout_is_a_timeout(targets):
    session = FakeSession(exc=requests.exceptions.ConnectTimeout("connect timed out"))
    result = DaemonClient(session=session).reinstall(targets["alpha"])
    assert result.kind == "timeout"


def test_connection_error_is_classified(targets):
    session = FakeSession(exc=requests.exceptions.ConnectionError("connection refused"))
    result = DaemonClient(session=session).reinstall(targets["alpha"])

    assert result.kind == "connectivity"
    assert "connection refused" in result.detail
    assert "a.example.com" in result.detail


def test_rejection_uses_daemon_error_field(targets):
    body = json.dumps({"error": "Server is currently being installed."}).encode()
    session = FakeSession(status_code=409, body=body)
    result = DaemonClient(session=session).reinstall(targets["alpha"])

    assert result.kind == "rejected"
    assert result.status_code == 409
    assert result.detail == "409 Server is currently being installed."


def test_rejection_with_plain_body_is_truncated(targets):
    session = FakeSession(status_code=500, body=b"x" * 500)
    result = DaemonClient(session=session).reinstall(targets["alpha"])

    assert result.kind == "rejected"
    assert result.detail.startswith("500 xxx")
    assert result.detail.endswith("...")
    assert len(result.detail) < 300


def test_send_raises_typed_errors(targets):
    client = DaemonClient(session=FakeSession(status_code=403, body=b""))
    try:
        client.send(targets["alpha"], "POST", "server/reinstall")
    except DaemonRejectedError as e:
        assert e.status_code == 403
        assert e.kind == "rejected"
    else:
        raise AssertionError("expected DaemonRejectedError")

    client = DaemonClient(session=FakeSession(exc=requests.exceptions.Timeout("slow")))
    try:
        client.send(targets["alpha"], "POST", "/server/reinstall")
    except DaemonTimeoutError as e:
        assert e.status_code is None
    else:
        raise AssertionError("expected DaemonTimeoutError")


class HeaderEncodingSession(FakeSession):
    """Encodes header values the way http.client does before sending."""

    def request(self, method, url, **kwargs):
        for value in kwargs["headers"].values():
            value.encode("latin-1")
        return super().request(method, url, **kwargs)


def test_unencodable_header_is_a_connectivity_failure(inventory_data):
    inventory_data["servers"][0]["uuid"] = "uuid-☃"
    inventory = Inventory.from_dict(inventory_data)
    session = HeaderEncodingSession()

    result = DaemonClient(session=session).reinstall(inventory.servers[0])

    assert isinstance(result, ActionFailed)
    assert result.kind == "connectivity"
    assert "latin-1" in result.detail


def test_unencodable_header_does_not_abort_batch(inventory_data):
    inventory_data["servers"][0]["uuid"] = "uuid-☃"
    inventory = Inventory.from_dict(inventory_data)
    session = HeaderEncodingSession()

    report = BulkRunner(DaemonClient(session=session)).run(inventory.get_data_for_reinstall(node_id=5))

    assert report.attempted == 2
    assert report.succeeded == 1
    assert [t.name for t, _ in report.failures] == ["alpha"]
    assert [headers["headers"]["X-Access-Server"] for _, _, headers in session.requests] == ["uuid-beta"]
