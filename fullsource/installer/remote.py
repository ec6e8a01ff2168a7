"""Remote collaborators: manifest fetching over HTTP and source export via svn."""

from __future__ import annotations

import subprocess
import time
from pathlib import Path
from typing import Protocol, runtime_checkable

import httpx
import structlog

from fullsource.errors import FetchError

log = structlog.get_logger("fullsource.remote")

_MAX_RETRIES = 3
_RETRY_BASE_DELAY = 1.0  # seconds


@runtime_checkable
class ManifestSource(Protocol):
    """Anything that can return the raw text of a module manifest."""

    def fetch_manifest(self, location: str) -> str: ...


@runtime_checkable
class SourceExporter(Protocol):
    """Anything that can copy a remote source tree into a local directory."""

    def export(self, remote_location: str, destination: Path) -> None: ...


def _exception_chain(exc: BaseException) -> list[str]:
    """Messages of *exc* and its causes, outermost first."""
    chain: list[str] = []
    current: BaseException | None = exc
    while current is not None:
        chain.append(str(current) or type(current).__name__)
        current = current.__cause__ or current.__context__
    return chain


class ManifestFetcher:
    """Synchronous HTTP fetcher for ``<base_url><location>`` manifests."""

    def __init__(
        self,
        base_url: str,
        *,
        username: str = "guest",
        password: str = "",
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self._client = httpx.Client(
            auth=(username, password),
            timeout=timeout,
            follow_redirects=True,
            transport=transport,
        )

    # ── lifecycle ──────────────────────────────────────────────────────────

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> ManifestFetcher:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    # ── public ─────────────────────────────────────────────────────────────

    def fetch_manifest(self, location: str) -> str:
        url = self.base_url + location.lstrip("/")
        try:
            response = self._request_with_retry(url)
        except httpx.HTTPError as exc:
            raise FetchError(f"unable to fetch {url}", _exception_chain(exc)) from exc
        log.debug("remote.manifest_fetched", url=url, size=len(response.text))
        return response.text

    # ── internal ───────────────────────────────────────────────────────────

    def _request_with_retry(self, url: str) -> httpx.Response:
        """GET with exponential backoff on 5xx and timeout errors."""
        last_exc: Exception | None = None
        for attempt in range(_MAX_RETRIES):
            try:
                resp = self._client.get(url)
                if resp.status_code < 500:
                    resp.raise_for_status()
                    return resp

                log.warning(
                    "remote.server_error",
                    url=url,
                    status=resp.status_code,
                    attempt=attempt + 1,
                    max_retries=_MAX_RETRIES,
                )
                last_exc = httpx.HTTPStatusError(
                    f"{resp.status_code} from {url}", request=resp.request, response=resp
                )
            except httpx.TimeoutException as exc:
                log.warning("remote.timeout", url=url, attempt=attempt + 1, max_retries=_MAX_RETRIES)
                last_exc = exc

            if attempt < _MAX_RETRIES - 1:
                time.sleep(_RETRY_BASE_DELAY * (2**attempt))

        raise last_exc  # type: ignore[misc]


class SubversionExporter:
    """Export a remote tree with the ``svn`` command line client."""

    def __init__(self, username: str = "guest", password: str = "", svn: str = "svn") -> None:
        self.username = username
        self.password = password
        self.svn = svn

    def command(self, remote_location: str, destination: Path) -> list[str]:
        return [
            self.svn,
            "export",
            "--force",
            "--non-interactive",
            "--username",
            self.username,
            "--password",
            self.password,
            remote_location,
            str(destination),
        ]

    def export(self, remote_location: str, destination: Path) -> None:
        try:
            subprocess.run(
                self.command(remote_location, destination),
                check=True,
                capture_output=True,
                text=True,
            )
        except FileNotFoundError as exc:
            raise FetchError(f"unable to export {remote_location}", [f"{self.svn} not found"]) from exc
        except OSError as exc:
            raise FetchError(f"unable to export {remote_location}", [f"cannot run {self.svn}: {exc}"]) from exc
        except subprocess.CalledProcessError as exc:
            details = [line.strip() for line in (exc.stderr or "").splitlines() if line.strip()]
            for line in details:
                log.error("remote.export_error", url=remote_location, detail=line)
            raise FetchError(
                f"unable to export {remote_location} (exit {exc.returncode})", details
            ) from exc
