"""Registry retrieval over HTTP or from a local registry checkout."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict
from urllib.error import HTTPError, URLError
from urllib.parse import quote
from urllib.request import Request, urlopen

from ..errors import FetchError
from .document import Registry, load_registry

DEFAULT_BASE_URL = "https://raw.githubusercontent.com/space-invoices/react-ui/main"
REGISTRY_FILE = "registry.json"
SOURCE_DIR = "src"


class RegistryClient:
    """Fetches the registry document and component sources.

    Every ``fetch_registry`` call reads a fresh snapshot; nothing is cached
    between resolutions.
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        local_path: Path | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self.local_path = local_path.expanduser().resolve() if local_path else None
        self.timeout = timeout

    def fetch_registry(self) -> Registry:
        if self.local_path is not None:
            text = self._read_local(self.local_path / REGISTRY_FILE)
        else:
            text = self._get(f"{self.base_url}/{REGISTRY_FILE}", label="registry")
        try:
            payload: Dict[str, Any] = json.loads(text)
        except json.JSONDecodeError as exc:
            raise FetchError(f"Registry response is not valid JSON: {exc}") from exc
        return load_registry(payload)

    def fetch_file(self, path: str) -> str:
        relative = path.lstrip("/")
        if self.local_path is not None:
            return self._read_local(self.local_path / SOURCE_DIR / relative)
        return self._get(f"{self.base_url}/{SOURCE_DIR}/{quote(relative)}", label=f"file {path}")

    def _get(self, url: str, *, label: str) -> str:
        request = Request(url, headers={"Accept": "application/json, text/plain, */*"})
        try:
            with urlopen(request, timeout=self.timeout) as response:  # type: ignore[arg-type]
                raw = response.read()
        except HTTPError as exc:
            raise FetchError(f"Failed to fetch {label}: HTTP {exc.code} {exc.reason}") from exc
        except URLError as exc:
            raise FetchError(f"Failed to fetch {label}: {exc.reason}") from exc
        return raw.decode("utf-8")

    @staticmethod
    def _read_local(path: Path) -> str:
        try:
            return path.read_text(encoding="utf-8")
        except OSError as exc:
            raise FetchError(f"Failed to read {path}: {exc.strerror or exc}") from exc


__all__ = ["DEFAULT_BASE_URL", "RegistryClient"]
