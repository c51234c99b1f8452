"""Stream driver: dump and load JSON arrays one object at a time.

WHY: Id lists can be long and objects large. Holding the whole array in
memory is not an option in either direction, yet the file must stay a
single, valid JSON array that ordinary tools can read.

HOW: dump_list() writes the enclosing brackets and separators by hand
and serializes each fetched object as one compact element. load_list()
decodes the array incrementally with iter_json_array(), a buffered
reader around json.JSONDecoder.raw_decode, and uploads each element
before reading the next.

RULES:
- Dump is best-effort: a failed object is logged, skipped, and leaves no
  separator behind; the output is always valid JSON
- Load is fail-fast: the first decode or upload error stops the run
- At most one SerializedObject is resident at a time
- Progress goes to on_status; failures go to the module logger
"""

from __future__ import annotations

import codecs
import json
import logging
import re
from collections.abc import AsyncIterable, AsyncIterator, Callable, Iterable, Iterator
from dataclasses import dataclass, field
from typing import IO, Any, Union

import httpx
from lxml import etree

from f3cp.config import CHUNK_SIZE
from f3cp.core.serialized import SerializedObject
from f3cp.core.transcoder import fetch_object, upload_object
from f3cp.remote.client import FedoraClient, FedoraError

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"[ \t\n\r]*")
_DECODER = json.JSONDecoder()

# Per-object failures that dump logs and skips
_FETCH_ERRORS = (
    FedoraError,
    httpx.HTTPError,
    httpx.StreamError,
    httpx.InvalidURL,
    etree.LxmlError,
    ValueError,
)

# A value or error this close to the end of the buffer may be cut short
_TAIL = 8

PidSource = Union[Iterable[str], AsyncIterable[str]]


@dataclass
class DumpSummary:
    """Outcome of a dump run.

    RULES:
    - written counts array elements actually emitted
    - failed holds (pid, error message) in input order
    """

    written: int = 0
    failed: list[tuple[str, str]] = field(default_factory=list)


def _notify(on_status: Callable[[str], None] | None, msg: str) -> None:
    if on_status:
        on_status(msg)


async def each_pid(pids: PidSource) -> AsyncIterator[str]:
    """Iterate PIDs from either a plain list or an async source such as a search."""
    if isinstance(pids, AsyncIterable):
        async for pid in pids:
            yield pid
    else:
        for pid in pids:
            yield pid


async def dump_list(
    client: FedoraClient,
    out: IO[str],
    pids: PidSource,
    on_status: Callable[[str], None] | None = None,
) -> DumpSummary:
    """Dump ``pids`` from the repository to ``out`` as one JSON array.

    WHY: Produces a portable copy of any number of objects while only
    ever holding one of them.

    HOW: Writes "[", then per PID fetches the object and, only when the
    fetch succeeded, writes a "," (unless it is the first element) and
    the compact JSON element followed by a newline. Writes "]" at the end.

    RULES:
    - Elements appear in input order
    - A failed fetch is logged with its PID and produces no output
    - Separators always equal written - 1
    - "]" is written even when an unexpected error ends the run

    Args:
        client: An entered FedoraClient.
        out: Text stream receiving the array.
        pids: PIDs to dump, as a plain or async iterable.
        on_status: Optional callback for progress messages.

    Returns:
        DumpSummary with the written count and failed PIDs.
    """
    summary = DumpSummary()
    out.write("[")
    try:
        async for pid in each_pid(pids):
            _notify(on_status, f"dumping {pid}")
            try:
                obj = await fetch_object(client, pid)
            except _FETCH_ERRORS as e:
                logger.error("%s: %s", pid, e)
                summary.failed.append((pid, str(e)))
                continue
            if summary.written:
                out.write(",")
            out.write(json.dumps(obj.to_dict(), ensure_ascii=False, separators=(",", ":")))
            out.write("\n")
            summary.written += 1
    finally:
        # the array is closed even when an unexpected error escapes
        out.write("]")
        out.flush()
    return summary


class _ArrayReader:
    """Buffered text reader that hands out one JSON value at a time."""

    def __init__(self, source: IO[Any], chunk_size: int) -> None:
        self._source = source
        self._chunk_size = chunk_size
        self._utf8 = codecs.getincrementaldecoder("utf-8")()
        self.buf = ""
        self.pos = 0
        self.eof = False

    def fill(self, size: int | None = None) -> bool:
        """Append the next chunk to the buffer; False once the source is exhausted."""
        if self.eof:
            return False
        chunk = self._source.read(size or self._chunk_size)
        if not chunk:
            self.eof = True
            tail = self._utf8.decode(b"", final=True)
            if tail:
                self.buf += tail
                return True
            return False
        if isinstance(chunk, bytes):
            chunk = self._utf8.decode(chunk)
        self.buf = self.buf[self.pos:] + chunk
        self.pos = 0
        return True

    def peek(self) -> str:
        """Skip whitespace and return the next character, or "" at end of input."""
        while True:
            self.pos = _WHITESPACE.match(self.buf, self.pos).end()
            if self.pos < len(self.buf):
                return self.buf[self.pos]
            if not self.fill():
                return ""

    def error(self, msg: str) -> json.JSONDecodeError:
        return json.JSONDecodeError(msg, self.buf, self.pos)

    def _truncated(self, e: json.JSONDecodeError) -> bool:
        """True if ``e`` may only mean the buffer ends inside the value."""
        return e.msg.startswith("Unterminated string") or len(self.buf) - e.pos < _TAIL

    def decode(self) -> Any:
        """Decode exactly one value starting at the next non-blank character.

        RULES:
        - More input is read only while the value may be incomplete
        - A syntax error with enough input behind it is raised at once
        """
        self.peek()
        while True:
            grow = max(self._chunk_size, len(self.buf))
            try:
                value, end = _DECODER.raw_decode(self.buf, self.pos)
            except json.JSONDecodeError as e:
                if self._truncated(e) and self.fill(grow):
                    continue
                raise
            # a number near the buffer edge may continue ("1." then "5")
            if len(self.buf) - end < _TAIL and self.fill(grow):
                continue
            self.buf = self.buf[end:]
            self.pos = 0
            return value


def iter_json_array(source: IO[Any], chunk_size: int | None = None) -> Iterator[Any]:
    """Yield the elements of a JSON array read incrementally from ``source``.

    WHY: Loading must never materialize the whole array.

    HOW: Consumes "[", then alternates between decoding one element and
    consuming "," or "]". The source is read lazily, so a caller that
    processes each element before asking for the next keeps only one
    element in memory. Binary sources are decoded as UTF-8.

    RULES:
    - Missing "[", a trailing comma, or a missing "]" raise json.JSONDecodeError
    - Nothing after the closing "]" is inspected
    """
    reader = _ArrayReader(source, chunk_size or CHUNK_SIZE)
    if reader.peek() != "[":
        raise reader.error("Expecting '['")
    reader.pos += 1
    if reader.peek() == "]":
        reader.pos += 1
        return
    while True:
        yield reader.decode()
        ch = reader.peek()
        if ch == ",":
            reader.pos += 1
            continue
        if ch == "]":
            reader.pos += 1
            return
        raise reader.error("Expecting ',' delimiter or ']'")


async def load_list(
    client: FedoraClient,
    source: IO[Any],
    on_status: Callable[[str], None] | None = None,
    chunk_size: int | None = None,
) -> int:
    """Load every object in the JSON array on ``source`` into the repository.

    WHY: Later objects in a dump may depend on earlier ones (collections
    before members), so the first failure stops the run.

    HOW: Decodes one element, validates it into a SerializedObject,
    uploads it with upload_object(), then reads the next.

    RULES:
    - json.JSONDecodeError / DecodeError propagate before any upload of
      the offending element
    - Upload errors are logged with the PID and re-raised

    Returns:
        The number of objects loaded.
    """
    count = 0
    for element in iter_json_array(source, chunk_size):
        obj = SerializedObject.from_dict(element)
        _notify(on_status, f"loading {obj.pid}")
        try:
            await upload_object(client, obj)
        except (FedoraError, httpx.HTTPError) as e:
            logger.error("%s: %s", obj.pid, e)
            raise
        count += 1
    return count
