"""Pytest fixtures: un servidor SugarCRM falso sobre `httpx.MockTransport`."""

from __future__ import annotations

import json
from typing import Any
from urllib.parse import parse_qsl

import httpx
import pytest

from core.config import AppSettings

BASE_URL = "https://crm.example.com"


class FakeSugarServer:
    """Responde por nombre de método y guarda cada formulario recibido."""

    def __init__(self) -> None:
        self.forms: list[dict[str, str]] = []
        self.requests: list[httpx.Request] = []
        self.responses: dict[str, Any] = {"login": {"id": "abc123"}}
        self.raw_bodies: dict[str, str] = {}
        self.statuses: dict[str, int] = {}
        self.fail: set[str] = set()

    def handler(self, request: httpx.Request) -> httpx.Response:
        form = dict(parse_qsl(request.read().decode("utf-8"), keep_blank_values=True))
        self.requests.append(request)
        self.forms.append(form)
        method = form.get("method", "")
        if method in self.fail:
            raise httpx.ConnectError("connection refused", request=request)
        status = self.statuses.get(method, 200)
        if method in self.raw_bodies:
            return httpx.Response(status, text=self.raw_bodies[method])
        return httpx.Response(status, json=self.responses.get(method))

    def http_client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self.handler))

    def rest_data(self, method: str) -> list[dict[str, Any]]:
        return [json.loads(f["rest_data"]) for f in self.forms if f.get("method") == method]

    def methods(self) -> list[str]:
        return [f.get("method", "") for f in self.forms]


@pytest.fixture
def server() -> FakeSugarServer:
    return FakeSugarServer()


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(_env_file=None)


@pytest.fixture
def client(server: FakeSugarServer, settings: AppSettings):
    from core.services.sugar_client import SugarClient

    return SugarClient(BASE_URL, "admin", "secret", settings=settings, http_client=server.http_client())


def bean(bean_id: str, *, deleted: Any = "0", **fields: Any) -> dict[str, Any]:
    nvl = {"id": {"name": "id", "value": bean_id}, "deleted": {"name": "deleted", "value": deleted}}
    for name, value in fields.items():
        nvl[name] = {"name": name, "value": value}
    return {"id": bean_id, "module_name": "Contacts", "name_value_list": nvl}


@pytest.fixture
def make_bean():
    return bean
