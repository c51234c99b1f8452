"""Async HTTP client for the Fedora Commons 3.x REST API.

WHY: Dumping, loading, and metadata extraction all need the same handful
of repository calls: read an object profile, list and read datastreams,
create objects, create or replace datastreams, and search for PIDs. This
module puts that behind a single client class so callers (CLI, stream
driver, extractors, tests) never see HTTP details.

HOW: Uses httpx.AsyncClient. FedoraClient is an async context manager:
enter it to get an authenticated client, exit to close the connection
pool. Profile responses are parsed into the dataclasses in models.py.
Datastream content is read through a scoped streaming response so the
connection goes back to the pool as soon as the body is drained.

RULES:
- Always use the async context manager (async with FedoraClient(url) as client:)
- HTTP 404 raises NotFoundError; callers branch on that type, never on text
- Any other non-2xx raises FedoraAPIError with status code and body
- Network failures propagate as httpx.HTTPError
- Credentials in the URL are moved into HTTP basic auth
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from urllib.parse import quote

import httpx

from f3cp.config import (
    FEDORA_PASSWORD,
    FEDORA_USER,
    HTTP_TIMEOUT_S,
    SEARCH_PAGE_SIZE,
)
from f3cp.remote.models import (
    DatastreamRecord,
    ObjectRecord,
    SearchPage,
    parse_datastream_list,
)

logger = logging.getLogger(__name__)

# Control groups whose content lives at dsLocation rather than in the body
_LOCATION_CONTROL_GROUPS = frozenset({"E", "R"})


class FedoraError(Exception):
    """Base class for errors raised by FedoraClient."""


class NotFoundError(FedoraError):
    """Raised when the repository has no such object or datastream.

    WHY: Absence is routine. The loader probes before writing and the
    extractors expect some datastreams to be missing. A dedicated type
    lets callers treat it as a branch condition.
    """


class FedoraAPIError(FedoraError):
    """Raised when the repository returns an unexpected error response.

    RULES:
    - Always include status_code and message
    - message is the response body text
    """

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"Fedora error {status_code}: {message}")


def _check(resp: httpx.Response, what: str) -> None:
    if resp.status_code == 404:
        raise NotFoundError(f"{what} not found")
    if not resp.is_success:
        raise FedoraAPIError(resp.status_code, resp.text)


def _quote(value: str) -> str:
    # PIDs contain ":" which is safe in a path segment
    return quote(value, safe=":")


class FedoraClient:
    """Async client for one Fedora 3 repository.

    WHY: Provides the fixed contract the transcoder and extractors rely
    on, with auth, timeouts, and error wrapping handled once.

    HOW: Wraps httpx.AsyncClient with a base URL and optional basic auth.
    ``transport`` can be an httpx.MockTransport in tests.

    RULES:
    - Use as: async with FedoraClient(url) as client: ...
    - username/password default to the URL userinfo, then to the environment
    """

    def __init__(
        self,
        base_url: str,
        username: str | None = None,
        password: str | None = None,
        timeout: float | None = None,
        page_size: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        url = httpx.URL(base_url)
        self._username = username or url.username or FEDORA_USER
        self._password = password or url.password or FEDORA_PASSWORD
        self._base_url = str(url.copy_with(username=None, password=None)).rstrip("/")
        self._timeout = timeout or HTTP_TIMEOUT_S
        self._page_size = page_size or SEARCH_PAGE_SIZE
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def base_url(self) -> str:
        return self._base_url

    async def __aenter__(self) -> FedoraClient:
        auth = None
        if self._username:
            auth = httpx.BasicAuth(self._username, self._password or "")
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            auth=auth,
            timeout=httpx.Timeout(self._timeout, connect=30.0),
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        if self._client:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        """Return the active httpx client, raising if not in context manager."""
        if self._client is None:
            raise RuntimeError(
                "FedoraClient must be used as an async context manager: "
                "async with FedoraClient(url) as client: ..."
            )
        return self._client

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_object_info(self, pid: str) -> ObjectRecord:
        """Fetch the object profile for ``pid``.

        Raises:
            NotFoundError: If the object does not exist.
        """
        client = self._ensure_client()
        resp = await client.get(f"/objects/{_quote(pid)}", params={"format": "xml"})
        _check(resp, f"object {pid}")
        record = ObjectRecord.from_xml(resp.content)
        if not record.pid:
            record.pid = pid
        return record

    async def list_datastreams(self, pid: str) -> list[str]:
        """Return the ids of every datastream on ``pid``, unsorted."""
        client = self._ensure_client()
        resp = await client.get(
            f"/objects/{_quote(pid)}/datastreams", params={"format": "xml"}
        )
        _check(resp, f"object {pid}")
        return parse_datastream_list(resp.content)

    async def get_datastream_info(self, pid: str, dsid: str) -> DatastreamRecord:
        """Fetch the datastream profile for ``pid``/``dsid``.

        Raises:
            NotFoundError: If the object or datastream does not exist.
        """
        client = self._ensure_client()
        resp = await client.get(
            f"/objects/{_quote(pid)}/datastreams/{_quote(dsid)}",
            params={"format": "xml"},
        )
        _check(resp, f"datastream {pid}/{dsid}")
        return DatastreamRecord.from_xml(resp.content, name=dsid)

    async def get_datastream(self, pid: str, dsid: str) -> bytes:
        """Read the full content of a datastream into memory.

        WHY: Long id lists would exhaust the connection pool if bodies
        were left half-read.

        HOW: Opens a streaming response, drains it, and lets the context
        manager release the connection whether or not reading succeeded.

        Raises:
            NotFoundError: If the object or datastream does not exist.
        """
        client = self._ensure_client()
        url = f"/objects/{_quote(pid)}/datastreams/{_quote(dsid)}/content"
        async with client.stream("GET", url) as resp:
            if not resp.is_success:
                await resp.aread()
            _check(resp, f"datastream {pid}/{dsid}")
            return await resp.aread()

    async def search(self, pattern: str, token: str | None = None) -> SearchPage:
        """Fetch one page of PIDs matching ``pattern`` (e.g. ``und:*``)."""
        client = self._ensure_client()
        params = {
            "query": f"pid~{pattern}",
            "pid": "true",
            "resultFormat": "xml",
            "maxResults": str(self._page_size),
        }
        if token:
            params["sessionToken"] = token
        resp = await client.get("/objects", params=params)
        _check(resp, f"search {pattern}")
        return SearchPage.from_xml(resp.content)

    async def iter_search(self, pattern: str) -> AsyncIterator[str]:
        """Yield every PID matching ``pattern``, following session tokens."""
        token = None
        while True:
            page = await self.search(pattern, token)
            for pid in page.pids:
                yield pid
            if not page.token:
                return
            token = page.token

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def make_object(self, record: ObjectRecord) -> None:
        """Create an empty object with the record's PID, label and state."""
        client = self._ensure_client()
        params = {}
        if record.label:
            params["label"] = record.label
        if record.state:
            params["state"] = record.state
        resp = await client.post(f"/objects/{_quote(record.pid)}", params=params)
        _check(resp, f"object {record.pid}")
        logger.info("created object %s", record.pid)

    async def make_datastream(
        self, pid: str, record: DatastreamRecord, content: bytes | None
    ) -> None:
        """Create datastream ``record.name`` on ``pid``.

        ``content`` of None sends no body; the repository then relies on
        dsLocation (external and redirect datastreams).
        """
        await self._write_datastream("POST", pid, record, content)

    async def update_datastream(
        self, pid: str, record: DatastreamRecord, content: bytes | None
    ) -> None:
        """Replace datastream ``record.name`` on ``pid`` in place."""
        await self._write_datastream("PUT", pid, record, content)

    async def _write_datastream(
        self,
        method: str,
        pid: str,
        record: DatastreamRecord,
        content: bytes | None,
    ) -> None:
        client = self._ensure_client()
        resp = await client.request(
            method,
            f"/objects/{_quote(pid)}/datastreams/{_quote(record.name)}",
            params=_datastream_params(record),
            content=content,
        )
        _check(resp, f"datastream {pid}/{record.name}")
        logger.info("%s datastream %s/%s", method, pid, record.name)


def _datastream_params(record: DatastreamRecord) -> dict[str, str]:
    """Build the query parameters Fedora expects on datastream writes.

    RULES:
    - dsLocation only for external/redirect control groups; for managed
      content the repository would try to fetch the source's internal id
    - checksum only for managed content, whose bytes round-trip exactly
    - empty values are omitted so the repository keeps its defaults
    """
    params = {
        "controlGroup": record.control_group,
        "dsLabel": record.label,
        "versionable": "true" if record.versionable else "false",
        "dsState": record.state,
        "mimeType": record.mime_type,
        "checksumType": record.checksum_type,
    }
    if record.control_group in _LOCATION_CONTROL_GROUPS:
        params["dsLocation"] = record.location
    if record.control_group == "M" and record.checksum != "none":
        params["checksum"] = record.checksum
    return {k: v for k, v in params.items() if v}
