"""npm-style registry client: package metadata, version listings and tarballs."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any

import requests

from .errors import InstallFailure, RegistryUnavailable
from .semver import max_semver, newer_versions

log = logging.getLogger(__name__)

OFFICIAL_REGISTRY = "https://registry.npmjs.org"
MIRROR_REGISTRY = "https://registry.npmmirror.com"
DEFAULT_TIMEOUT = 30.0


def default_registry(original: bool = True) -> str:
    return OFFICIAL_REGISTRY if original else MIRROR_REGISTRY


@dataclass(frozen=True)
class TarballInfo:
    name: str
    version: str
    url: str
    shasum: str | None = None
    integrity: str | None = None


class RegistryClient:
    def __init__(self, base_url: str | None = None, *, timeout: float | None = None) -> None:
        self.base_url = (base_url or default_registry()).rstrip("/")
        self.timeout = float(timeout) if timeout is not None else DEFAULT_TIMEOUT
        self._metadata: dict[str, dict[str, Any] | None] = {}

    def _url(self, name: str) -> str:
        return f"{self.base_url}/{name.lstrip('/')}"

    def fetch_metadata(self, name: str) -> dict[str, Any] | None:
        """
        Return the registry document for ``name``.

        Any well-formed non-200 answer means "no data" and yields None; a
        transport failure means "could not ask" and raises RegistryUnavailable.
        Answers are kept for the lifetime of the client.
        """
        if not name:
            return None
        if name not in self._metadata:
            self._metadata[name] = self._get_metadata(name)
        return self._metadata[name]

    def _get_metadata(self, name: str) -> dict[str, Any] | None:
        url = self._url(name)
        log.debug("registry GET %s", url)
        try:
            r = requests.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            raise RegistryUnavailable(f"registry request failed for {name}: {exc}") from exc
        if r.status_code != 200:
            log.debug("registry GET %s -> %s", url, r.status_code)
            return None
        try:
            payload = r.json()
        except ValueError:
            return None
        return payload if isinstance(payload, dict) else None

    def list_versions(self, name: str) -> list[str]:
        data = self.fetch_metadata(name)
        if not data:
            return []
        versions = data.get("versions")
        if not isinstance(versions, dict):
            return []
        return [str(v) for v in versions.keys()]

    def resolve_latest(self, name: str) -> str | None:
        return max_semver(self.list_versions(name))

    def resolve_newer_than(self, base_version: str, name: str) -> str | None:
        newer = newer_versions(base_version, self.list_versions(name))
        return newer[0] if newer else None

    def tarball(self, name: str, version: str) -> TarballInfo | None:
        data = self.fetch_metadata(name)
        if not data:
            return None
        entry = (data.get("versions") or {}).get(version)
        if not isinstance(entry, dict):
            return None
        dist = entry.get("dist") if isinstance(entry.get("dist"), dict) else {}
        url = str(dist.get("tarball") or "").strip()
        if not url:
            return None
        return TarballInfo(
            name=name,
            version=version,
            url=url,
            shasum=str(dist.get("shasum") or "").strip() or None,
            integrity=str(dist.get("integrity") or "").strip() or None,
        )

    def download(self, url: str, out_path: str) -> str:
        try:
            r = requests.get(url, stream=True, timeout=self.timeout)
        except requests.RequestException as exc:
            raise RegistryUnavailable(f"download failed: {url}: {exc}") from exc
        if r.status_code >= 400:
            raise InstallFailure(f"download failed: {r.status_code} {url}")

        os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
        with open(out_path, "wb") as f:
            for chunk in r.iter_content(chunk_size=1024 * 1024):
                if chunk:
                    f.write(chunk)
        return out_path
