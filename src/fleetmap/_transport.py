"""Dataset transports: HTTP via aiohttp and local files."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Protocol

import aiohttp

from fleetmap._constants import USER_AGENT
from fleetmap.exceptions import FleetMapTransportError

_logger = logging.getLogger(__name__)


class DatasetTransport(Protocol):
    """Structural transport interface used by the dataset loader.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementations concrete.
    """

    async def fetch_json(self, resource: str) -> Any:
        ...


class HttpDatasetTransport:
    """Fetch dataset resources as JSON over HTTP."""

    def __init__(
        self,
        base_url: str,
        http_session: aiohttp.ClientSession,
        *,
        timeout: float,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    def url_for(self, resource: str) -> str:
        return f"{self._base_url}/{resource.lstrip('/')}"

    async def fetch_json(self, resource: str) -> Any:
        url = self.url_for(resource)
        headers = {
            "accept": "application/json",
            "user-agent": USER_AGENT,
        }

        _logger.debug("GET %s", url)

        try:
            async with self._http.get(url, headers=headers, timeout=self._timeout) as resp:
                text = await resp.text()
                if resp.status != 200:
                    raise FleetMapTransportError(
                        f"HTTP {resp.status} from {resource}: {text[:200]}",
                        status_code=resp.status,
                        resource=resource,
                    )
        except FleetMapTransportError:
            raise
        except UnicodeDecodeError as exc:
            raise FleetMapTransportError(
                f"Could not decode {resource}: {exc}",
                resource=resource,
            ) from exc
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise FleetMapTransportError(
                f"Request for {resource} failed: {exc!r}",
                resource=resource,
            ) from exc

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise FleetMapTransportError(
                f"Invalid JSON from {resource}: {text[:200]}",
                resource=resource,
            ) from exc


class FileDatasetTransport:
    """Read dataset resources as JSON files from a local directory."""

    def __init__(self, data_dir: Path) -> None:
        self._data_dir = Path(data_dir)

    def path_for(self, resource: str) -> Path:
        return self._data_dir / resource.lstrip("/")

    async def fetch_json(self, resource: str) -> Any:
        path = self.path_for(resource)

        _logger.debug("READ %s", path)

        try:
            text = await asyncio.to_thread(path.read_text, encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise FleetMapTransportError(
                f"Could not decode {resource} as UTF-8: {exc}",
                resource=resource,
            ) from exc
        except OSError as exc:
            raise FleetMapTransportError(
                f"Could not read {resource} from {self._data_dir}: {exc}",
                resource=resource,
            ) from exc

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise FleetMapTransportError(
                f"Invalid JSON in {path}: {text[:200]}",
                resource=resource,
            ) from exc
