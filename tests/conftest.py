import json
import os

import httpx
import pytest

from kvault import VaultSettings


def pytest_configure(config):
    # Register markers used across the suite
    config.addinivalue_line("markers", "asyncio: mark test as async")


class FakeVaultServer:
    """Answer httpx requests from a queue of responses or exceptions."""

    def __init__(self):
        self.requests = []
        self.side_effects = []  # list of httpx.Response or exceptions

    @staticmethod
    def json(status_code, payload, content_type="application/json"):
        return httpx.Response(
            status_code,
            content=json.dumps(payload).encode(),
            headers={"Content-Type": content_type},
        )

    @staticmethod
    def no_content():
        return httpx.Response(204)

    def queue(self, *effects):
        self.side_effects.extend(effects)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.side_effects:
            effect = self.side_effects.pop(0)
            if isinstance(effect, Exception):
                raise effect
            return effect
        return self.json(200, {"data": {"default": True}})

    @property
    def transport(self):
        return httpx.MockTransport(self.handler)

    @property
    def last_request(self):
        return self.requests[-1]

    def body(self, index=-1):
        return json.loads(self.requests[index].content)


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch, tmp_path):
    for key in list(os.environ):
        if key.startswith("VAULT_"):
            monkeypatch.delenv(key)
    monkeypatch.setattr("kvault.settings.TOKEN_FILE", tmp_path / ".vault-token")
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def vault_server():
    return FakeVaultServer()


@pytest.fixture
def settings():
    return VaultSettings(
        ADDR="http://vault.local",
        TOKEN="tkn",
        RETRY_INTERVAL_MS=0,
        USE_ENGINE_PATH_MAP=False,
    )
