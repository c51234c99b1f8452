"""Serialized object form: one element of the dump/load JSON array.

WHY: A dumped object must carry its record, every datastream record,
and every datastream's bytes in a form that is valid JSON and readable
by people when the bytes are text. Binary payloads still need a lossless
representation.

HOW: SerializedObject pairs an ObjectRecord with an ordered list of
DatastreamEntry values. Each entry stores its payload either as text
(valid UTF-8) or as raw bytes written as base64. from_dict() validates
each decoded element against fobject.schema.json with jsonschema before
building the dataclasses.

RULES:
- At most one of content / content_base64 is set by from_bytes()
- On decode, non-empty text wins and raw bytes are ignored
- Invalid base64 is logged and treated as "no content"
- Datastream order is preserved as given; it is not re-validated on decode
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jsonschema

from f3cp.remote.models import DatastreamRecord, ObjectRecord

logger = logging.getLogger(__name__)

_SCHEMA_PATH = Path(__file__).resolve().parent / "fobject.schema.json"

_CACHED_SCHEMA: dict[str, Any] | None = None


def _get_schema() -> dict[str, Any]:
    global _CACHED_SCHEMA
    if _CACHED_SCHEMA is None:
        with open(_SCHEMA_PATH) as f:
            _CACHED_SCHEMA = json.load(f)
    return _CACHED_SCHEMA


class DecodeError(ValueError):
    """Raised when a decoded array element is not a valid serialized object."""


@dataclass
class DatastreamEntry:
    """One datastream record together with its payload.

    RULES:
    - content: UTF-8 text payload, "" when absent or binary
    - content_base64: raw bytes for non-UTF-8 payloads, else None
    """

    record: DatastreamRecord
    content: str = ""
    content_base64: bytes | None = None

    @property
    def name(self) -> str:
        return self.record.name

    @classmethod
    def from_bytes(cls, record: DatastreamRecord, data: bytes | None) -> DatastreamEntry:
        """Pick the payload representation for fetched bytes.

        Valid UTF-8 is kept as text and the raw form dropped; anything else
        is kept raw only.
        """
        if not data:
            return cls(record=record)
        try:
            return cls(record=record, content=data.decode("utf-8"))
        except UnicodeDecodeError:
            return cls(record=record, content_base64=data)

    def payload(self) -> bytes | None:
        """Return the bytes to upload, or None when there is no content."""
        if self.content:
            return self.content.encode("utf-8")
        if self.content_base64:
            return self.content_base64
        return None

    def to_dict(self) -> dict:
        data = self.record.to_dict()
        data["Content"] = self.content
        data["ContentBase64"] = (
            base64.b64encode(self.content_base64).decode("ascii")
            if self.content_base64
            else None
        )
        return data

    @classmethod
    def from_dict(cls, data: dict, pid: str = "") -> DatastreamEntry:
        record = DatastreamRecord.from_dict(data)
        content = data.get("Content") or ""
        if content:
            return cls(record=record, content=content)
        raw = None
        encoded = data.get("ContentBase64")
        if encoded:
            try:
                raw = base64.b64decode(encoded, validate=True)
            except (binascii.Error, ValueError):
                logger.warning(
                    "%s/%s: ContentBase64 is not valid base64; treating as no content",
                    pid,
                    record.name,
                )
        return cls(record=record, content_base64=raw or None)


@dataclass
class SerializedObject:
    """A repository object with every datastream, ready to write or upload.

    WHY: This is the unit the stream driver moves: exactly one of these
    is resident at a time in either direction.

    HOW: Built by the transcoder's fetch path or decoded by the loader.

    RULES:
    - datastreams produced by the fetch path are sorted by name
    - to_dict() keys match the dump file format exactly
    """

    info: ObjectRecord
    datastreams: list[DatastreamEntry] = field(default_factory=list)

    @property
    def pid(self) -> str:
        return self.info.pid

    def to_dict(self) -> dict:
        data = self.info.to_dict()
        data["DSitems"] = [ds.to_dict() for ds in self.datastreams]
        return data

    @classmethod
    def from_dict(cls, data: Any) -> SerializedObject:
        """Validate and decode one array element.

        Raises:
            DecodeError: If ``data`` does not match fobject.schema.json.
        """
        try:
            jsonschema.validate(instance=data, schema=_get_schema())
        except jsonschema.ValidationError as e:
            raise DecodeError(f"invalid serialized object: {e.message}") from e
        info = ObjectRecord.from_dict(data)
        return cls(
            info=info,
            datastreams=[
                DatastreamEntry.from_dict(ds, pid=info.pid)
                for ds in data.get("DSitems") or []
            ],
        )
