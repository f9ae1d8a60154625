"""Tests for registry retrieval."""

from __future__ import annotations

import json
from io import BytesIO
from typing import List
from urllib.error import HTTPError, URLError

import pytest

from registrykit.errors import FetchError, RegistryError
from registrykit.registry import client as client_module
from registrykit.registry import RegistryClient


class _Response(BytesIO):
    def __enter__(self) -> "_Response":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def _install_urlopen(monkeypatch: pytest.MonkeyPatch, payloads: dict) -> List[str]:
    requested: List[str] = []

    def fake_urlopen(request, timeout=None):
        url = request.full_url
        requested.append(url)
        if url not in payloads:
            raise HTTPError(url, 404, "Not Found", hdrs=None, fp=None)
        return _Response(payloads[url].encode("utf-8"))

    monkeypatch.setattr(client_module, "urlopen", fake_urlopen)
    return requested


def test_fetch_registry_over_http(monkeypatch: pytest.MonkeyPatch) -> None:
    document = {"components": {"ui/button": {"name": "Button", "files": ["components/ui/button.tsx"]}}}
    requested = _install_urlopen(
        monkeypatch, {"https://registry.example.test/registry.json": json.dumps(document)}
    )

    registry = RegistryClient("https://registry.example.test/").fetch_registry()

    assert registry.keys() == ["ui/button"]
    assert requested == ["https://registry.example.test/registry.json"]


def test_fetch_file_over_http(monkeypatch: pytest.MonkeyPatch) -> None:
    _install_urlopen(
        monkeypatch,
        {"https://registry.example.test/src/components/ui/button.tsx": "export const Button = 1;\n"},
    )
    content = RegistryClient("https://registry.example.test").fetch_file("components/ui/button.tsx")
    assert content == "export const Button = 1;\n"


def test_http_errors_become_fetch_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    _install_urlopen(monkeypatch, {})
    with pytest.raises(FetchError, match="HTTP 404"):
        RegistryClient("https://registry.example.test").fetch_file("missing.tsx")


def test_network_errors_become_fetch_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    def failing_urlopen(request, timeout=None):
        raise URLError("connection refused")

    monkeypatch.setattr(client_module, "urlopen", failing_urlopen)
    with pytest.raises(FetchError, match="connection refused"):
        RegistryClient("https://registry.example.test").fetch_registry()


def test_invalid_json_is_a_fetch_error(monkeypatch: pytest.MonkeyPatch) -> None:
    _install_urlopen(monkeypatch, {"https://registry.example.test/registry.json": "<html>"})
    with pytest.raises(FetchError, match="not valid JSON"):
        RegistryClient("https://registry.example.test").fetch_registry()


def test_local_registry_reads_checkout(registry_builder) -> None:
    root = (
        registry_builder.component("ui/button", files=["components/ui/button.tsx"])
        .sources({"components/ui/button.tsx": "export const Button = 1;\n"})
        .write()
    )
    client = RegistryClient(local_path=root)

    assert client.fetch_registry().keys() == ["ui/button"]
    assert client.fetch_file("components/ui/button.tsx") == "export const Button = 1;\n"


def test_local_registry_missing_file(registry_builder) -> None:
    client = RegistryClient(local_path=registry_builder.write())
    with pytest.raises(FetchError):
        client.fetch_file("components/ui/ghost.tsx")


def test_fetch_registry_reads_fresh_snapshot_each_time(registry_builder) -> None:
    root = registry_builder.component("a").write()
    client = RegistryClient(local_path=root)
    assert client.fetch_registry().keys() == ["a"]

    registry_builder.component("b").write()
    assert client.fetch_registry().keys() == ["a", "b"]


def test_malformed_local_document(registry_builder) -> None:
    root = registry_builder.write()
    (root / "registry.json").write_text(json.dumps({"components": []}), encoding="utf-8")
    with pytest.raises(RegistryError):
        RegistryClient(local_path=root).fetch_registry()
