"""Object transcoder: repository object ⇄ SerializedObject.

WHY: Dump and load both work one object at a time. The fetch path turns
a PID into a complete, deterministic SerializedObject; the upload path
reconciles a decoded SerializedObject with a (possibly different)
repository by creating or updating as needed.

HOW: fetch_object() reads the object profile, then every datastream
profile and payload in name order. upload_object() probes for the object
and each datastream and picks create vs update from the NotFoundError
branch.

RULES:
- Fetch: any error aborts the whole object; no partial objects
- Fetch: payloads are read only when the datastream size is > 0
- Upload: an existing object's record is never overwritten
- Upload: the DC datastream is never pushed
- Upload: E/R datastreams with no payload send no body; X/M send an
  explicit empty body
"""

from __future__ import annotations

import logging

from f3cp.config import MANAGED_DATASTREAM
from f3cp.core.serialized import DatastreamEntry, SerializedObject
from f3cp.remote.client import FedoraClient, NotFoundError

logger = logging.getLogger(__name__)

# Control groups whose content is dereferenced from dsLocation
_BODYLESS_CONTROL_GROUPS = frozenset({"E", "R"})


async def fetch_object(client: FedoraClient, pid: str) -> SerializedObject:
    """Load every datastream of ``pid`` into one SerializedObject.

    WHY: The dump direction needs the whole object, with datastreams in a
    stable order so repeated dumps of the same object compare equal.

    HOW: Object profile first (existence is mandatory), then the sorted
    datastream names, then per name its profile and, when it has a
    size, its fully drained payload.

    RULES:
    - Raises NotFoundError if the object does not exist
    - Any FedoraError or httpx.HTTPError propagates unchanged
    - Everything is held in memory; very large objects need the memory

    Args:
        client: An entered FedoraClient.
        pid: Identifier of the object to fetch.

    Returns:
        The complete SerializedObject.
    """
    info = await client.get_object_info(pid)
    result = SerializedObject(info=info)
    names = sorted(await client.list_datastreams(pid))
    for name in names:
        record = await client.get_datastream_info(pid, name)
        data = None
        if record.size > 0:
            data = await client.get_datastream(pid, name)
        result.datastreams.append(DatastreamEntry.from_bytes(record, data))
    return result


def _upload_source(entry: DatastreamEntry) -> bytes | None:
    payload = entry.payload()
    if payload is not None:
        return payload
    if entry.record.control_group in _BODYLESS_CONTROL_GROUPS:
        return None
    return b""


async def upload_object(client: FedoraClient, obj: SerializedObject) -> None:
    """Create or update ``obj`` in the repository behind ``client``.

    WHY: Loading must work against an empty repository and against one
    that already holds some or all of the objects.

    HOW: Probe the object; create it only on NotFoundError. Then, in list
    order, probe each datastream and create it on NotFoundError or update
    it in place when it exists.

    RULES:
    - Any error other than the probed NotFoundError propagates
    - Entries named "DC" are skipped
    """
    try:
        await client.get_object_info(obj.pid)
    except NotFoundError:
        await client.make_object(obj.info)

    for entry in obj.datastreams:
        if entry.name == MANAGED_DATASTREAM:
            continue
        source = _upload_source(entry)
        try:
            await client.get_datastream_info(obj.pid, entry.name)
        except NotFoundError:
            await client.make_datastream(obj.pid, entry.record, source)
        else:
            await client.update_datastream(obj.pid, entry.record, source)
        logger.debug("uploaded %s/%s", obj.pid, entry.name)
