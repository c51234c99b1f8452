"""Metadata normalizer: per-object triples from the curate datastreams.

WHY: Curation reports need every object's relationships, rights,
descriptive metadata, and file facts as one tab-separated table. Objects
differ in which of those datastreams they carry, and a broken datastream
on one object must not cost the rest of its metadata.

HOW: fetch_curate_item() runs each registered extractor in order against
a shared PID and merges their results into one CurateItem, collecting
diagnostics instead of raising. download_curate_items() drives a list of
PIDs and writes each object's rows as soon as it is done.

RULES:
- Extractor failures never propagate; they become diagnostics
- Diagnostics are logged as warnings with the PID by the driver
- Rows are subject, predicate, object; newlines in the object become "\\n"
"""

from __future__ import annotations

import csv
import logging
from collections.abc import Callable, Iterable
from typing import IO

from f3cp.core.prefixes import DEFAULT_PREFIX_TABLE, PrefixTable
from f3cp.core.stream import PidSource, each_pid
from f3cp.core.triples import CurateItem, Triple
from f3cp.extractors import EXTRACTORS
from f3cp.extractors.base import BaseExtractor
from f3cp.remote.client import FedoraClient

logger = logging.getLogger(__name__)


async def fetch_curate_item(
    client: FedoraClient,
    pid: str,
    prefixes: PrefixTable = DEFAULT_PREFIX_TABLE,
    extractors: Iterable[type[BaseExtractor]] | None = None,
) -> CurateItem:
    """Gather every metadata triple for ``pid``.

    Args:
        client: An entered FedoraClient.
        pid: Object to read.
        prefixes: Namespace table used for compaction.
        extractors: Extractor classes to run; defaults to EXTRACTORS in order.

    Returns:
        CurateItem holding triples in extractor order and any diagnostics.
    """
    item = CurateItem(pid=pid)
    if extractors is None:
        extractors = EXTRACTORS.values()
    for extractor_cls in extractors:
        result = await extractor_cls(prefixes).run(client, pid)
        item.meta.extend(result.triples)
        if result.diagnostic:
            item.diagnostics.append(result.diagnostic)
    return item


def write_triples(writer, triples: Iterable[Triple]) -> None:  # noqa: ANN001
    """Write triples as TSV rows to a csv writer."""
    for t in triples:
        writer.writerow([t.subject, t.predicate, t.obj.replace("\n", "\\n")])


def triples_writer(out: IO[str]):  # noqa: ANN201
    """Return a csv writer producing the tab-separated triple format."""
    return csv.writer(out, delimiter="\t", lineterminator="\n")


async def download_curate_items(
    client: FedoraClient,
    out: IO[str],
    pids: PidSource,
    on_status: Callable[[str], None] | None = None,
    prefixes: PrefixTable = DEFAULT_PREFIX_TABLE,
) -> int:
    """Write the metadata triples of every PID to ``out`` as TSV.

    RULES:
    - Objects are processed strictly one after another
    - Each object's rows are flushed before the next object is fetched

    Returns:
        The total number of rows written.
    """
    writer = triples_writer(out)
    rows = 0
    async for pid in each_pid(pids):
        if on_status:
            on_status(f"Fetching {pid}")
        item = await fetch_curate_item(client, pid, prefixes)
        for diagnostic in item.diagnostics:
            logger.warning("%s %s", pid, diagnostic)
        write_triples(writer, item.meta)
        out.flush()
        rows += len(item.meta)
    return rows
