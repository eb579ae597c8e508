"""Shared fixtures for the panelctl test suite."""
import pytest
import requests
import yaml

from panelctl.modules.inventory import Inventory
from panelctl.modules.models import ActionFailed, ActionSucceeded

INVENTORY = {
    "nodes": [
        {"id": 5, "name": "node-a", "fqdn": "a.example.com", "scheme": "https",
         "daemon_listen": 8080, "daemon_secret": "secret-a"},
        {"id": 6, "name": "node-b", "fqdn": "b.example.com", "scheme": "http",
         "daemon_listen": 8443, "daemon_secret": "secret-b"},
    ],
    "servers": [
        {"id": 1, "uuid": "uuid-alpha", "name": "alpha", "node": 5},
        {"id": 2, "uuid": "uuid-beta", "name": "beta", "node": 5},
        {"id": 3, "uuid": "uuid-gamma", "name": "gamma", "node": 6},
    ],
}


class FakeClient:
    """Action client that records calls and fails for selected server ids."""

    def __init__(self, failures=None):
        self.failures = failures or {}
        self.calls = []

    def reinstall(self, target):
        self.calls.append(target.id)
        if target.id in self.failures:
            kind, detail = self.failures[target.id]
            return ActionFailed(kind=kind, detail=detail)
        return ActionSucceeded()


class RecordingReporter:
    def __init__(self):
        self.events = []

    def start(self, total):
        self.events.append(("start", total))

    def failure(self, target, message):
        self.events.append(("failure", target.id, message))

    def advance(self, current, total):
        self.events.append(("advance", current, total))

    def finish(self, report):
        self.events.append(("finish", report.attempted))


class FakeSession:
    """Stand-in for requests.Session returning a canned response or raising."""

    def __init__(self, status_code=204, body=b"", exc=None):
        self.status_code = status_code
        self.body = body
        self.exc = exc
        self.requests = []

    def request(self, method, url, **kwargs):
        self.requests.append((method, url, kwargs))
        if self.exc is not None:
            raise self.exc
        response = requests.Response()
        response.status_code = self.status_code
        response._content = self.body
        response.reason = "Error" if self.status_code >= 400 else "OK"
        response.url = url
        return response


@pytest.fixture
def inventory_data():
    return yaml.safe_load(yaml.safe_dump(INVENTORY))


@pytest.fixture
def inventory(inventory_data):
    return Inventory.from_dict(inventory_data)


@pytest.fixture
def inventory_file(tmp_path, inventory_data):
    path = tmp_path / "inventory.yaml"
    path.write_text(yaml.safe_dump(inventory_data))
    return path


@pytest.fixture
def targets(inventory):
    return {target.name: target for target in inventory.servers}
