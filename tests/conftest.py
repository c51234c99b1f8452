"""Shared test fixtures for the f3cp test suite.

WHY: The transcoder, stream driver, and extractors all talk to a
repository. An in-memory stand-in that honours the same contract as
FedoraClient lets every test run without a Fedora server, and lets tests
inspect exactly which writes were made.

HOW: FakeFedora stores object records and (record, bytes) datastream
pairs in dicts, records every call in ``calls``, and raises
NotFoundError / configured errors the way the real client does.
Sample XML payloads match what Fedora and Hydra write in practice.

RULES:
- FakeFedora method names and signatures match FedoraClient exactly
- Stored records are the very objects passed in, so equality checks work
- run() drives a coroutine to completion with asyncio.run
"""

from __future__ import annotations

import asyncio
import fnmatch
from typing import Dict, List, Optional, Tuple

import pytest

from f3cp.remote.client import FedoraAPIError, NotFoundError
from f3cp.remote.models import DatastreamRecord, ObjectRecord


def run(coro):
    """Run a coroutine to completion."""
    return asyncio.run(coro)


class FakeFedora:
    """In-memory repository implementing the FedoraClient contract."""

    def __init__(self) -> None:
        self.objects: Dict[str, ObjectRecord] = {}
        self.datastreams: Dict[str, Dict[str, Tuple[DatastreamRecord, Optional[bytes]]]] = {}
        self.calls: List[tuple] = []
        self.broken: Dict[Tuple[str, str], Exception] = {}

    # -- setup helpers --------------------------------------------------

    def add_object(
        self,
        record: ObjectRecord,
        datastreams: Optional[List[Tuple[DatastreamRecord, Optional[bytes]]]] = None,
    ) -> None:
        self.objects[record.pid] = record
        self.datastreams[record.pid] = {}
        for ds, content in datastreams or []:
            self.datastreams[record.pid][ds.name] = (ds, content)

    def add_text_datastream(self, pid: str, name: str, text: str, **kwargs) -> None:
        data = text.encode("utf-8")
        record = DatastreamRecord(name=name, size=len(data), control_group="M", **kwargs)
        self.datastreams[pid][name] = (record, data)

    def break_call(self, method: str, key: str, error: Exception) -> None:
        """Make ``method`` raise ``error`` for ``key`` (a PID or "pid/dsid")."""
        self.broken[(method, key)] = error

    def _maybe_fail(self, method: str, key: str) -> None:
        error = self.broken.get((method, key))
        if error is not None:
            raise error

    def call_names(self) -> List[str]:
        return [c[0] for c in self.calls]

    # -- FedoraClient contract ------------------------------------------

    async def get_object_info(self, pid: str) -> ObjectRecord:
        self.calls.append(("get_object_info", pid))
        self._maybe_fail("get_object_info", pid)
        if pid not in self.objects:
            raise NotFoundError(f"object {pid} not found")
        return self.objects[pid]

    async def list_datastreams(self, pid: str) -> List[str]:
        self.calls.append(("list_datastreams", pid))
        self._maybe_fail("list_datastreams", pid)
        if pid not in self.objects:
            raise NotFoundError(f"object {pid} not found")
        # deliberately not sorted
        return list(reversed(list(self.datastreams[pid])))

    async def get_datastream_info(self, pid: str, dsid: str) -> DatastreamRecord:
        self.calls.append(("get_datastream_info", pid, dsid))
        self._maybe_fail("get_datastream_info", f"{pid}/{dsid}")
        try:
            return self.datastreams[pid][dsid][0]
        except KeyError:
            raise NotFoundError(f"datastream {pid}/{dsid} not found") from None

    async def get_datastream(self, pid: str, dsid: str) -> bytes:
        self.calls.append(("get_datastream", pid, dsid))
        self._maybe_fail("get_datastream", f"{pid}/{dsid}")
        try:
            return self.datastreams[pid][dsid][1] or b""
        except KeyError:
            raise NotFoundError(f"datastream {pid}/{dsid} not found") from None

    async def make_object(self, record: ObjectRecord) -> None:
        self.calls.append(("make_object", record.pid))
        self._maybe_fail("make_object", record.pid)
        self.add_object(record)

    async def make_datastream(
        self, pid: str, record: DatastreamRecord, content: Optional[bytes]
    ) -> None:
        self.calls.append(("make_datastream", pid, record.name, content))
        self._maybe_fail("make_datastream", f"{pid}/{record.name}")
        self.datastreams[pid][record.name] = (record, content)

    async def update_datastream(
        self, pid: str, record: DatastreamRecord, content: Optional[bytes]
    ) -> None:
        self.calls.append(("update_datastream", pid, record.name, content))
        self._maybe_fail("update_datastream", f"{pid}/{record.name}")
        self.datastreams[pid][record.name] = (record, content)

    async def iter_search(self, pattern: str):
        for pid in sorted(self.objects):
            if fnmatch.fnmatchcase(pid, pattern):
                yield pid


# ---------------------------------------------------------------------------
# Sample objects
# ---------------------------------------------------------------------------

BINARY_PAYLOAD = b"\x89PNG\r\n\x1a\n\x00\xff\xfe"

RELS_EXT_XML = """<rdf:RDF xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#"
         xmlns:ns0="info:fedora/fedora-system:def/model#"
         xmlns:ns1="info:fedora/fedora-system:def/relations-external#"
         xmlns:ns2="http://projecthydra.org/ns/relations#">
  <rdf:Description rdf:about="info:fedora/und:abc">
    <ns0:hasModel rdf:resource="info:fedora/afmodel:GenericFile"/>
    <ns1:isPartOf rdf:resource="info:fedora/und:parent"/>
    <ns2:hasEditor rdf:resource="info:fedora/und:editor1"/>
    <ns2:hasEditorGroup rdf:resource="info:fedora/und:group1"/>
    <ns2:hasViewer rdf:resource="info:fedora/und:viewer1"/>
  </rdf:Description>
</rdf:RDF>
"""

RIGHTS_XML = """<rightsMetadata xmlns="http://hydra-collab.stanford.edu/schemas/rightsMetadata/v1" version="0.1">
  <copyright><human type="title"/></copyright>
  <access type="discover">
    <human/>
    <machine><group>nobody</group></machine>
  </access>
  <access type="read">
    <human/>
    <machine><group>public</group><group>registered</group></machine>
  </access>
  <access type="edit">
    <human/>
    <machine><person>jdoe</person></machine>
  </access>
  <embargo>
    <human/>
    <machine><date>2030-01-01</date></machine>
  </embargo>
</rightsMetadata>
"""

PROPERTIES_XML = """<fields>
  <depositor>jdoe</depositor>
  <owner>jdoe</owner>
  <representative></representative>
</fields>
"""

DESC_NT = (
    '<info:fedora/und:abc> <http://purl.org/dc/terms/title> "A title\\nwith a newline" .\n'
    '<info:fedora/und:abc> <http://purl.org/dc/terms/creator> "Doe, Jane" .\n'
    '<info:fedora/und:abc/file1> <http://purl.org/dc/terms/type> <http://purl.org/dc/terms/Image> .\n'
)


@pytest.fixture
def fedora() -> FakeFedora:
    """An empty in-memory repository."""
    return FakeFedora()


@pytest.fixture
def populated_fedora() -> FakeFedora:
    """A repository holding one generic-file object with mixed datastreams.

    und:abc has DC (text), RELS-EXT (text), content (binary), an external
    link (no content), and metadata streams for the extractors.
    """
    repo = FakeFedora()
    repo.add_object(
        ObjectRecord(
            pid="und:abc",
            label="Sample object",
            created="2014-01-02T03:04:05.000Z",
            modified="2015-01-02T03:04:05.000Z",
            state="A",
        )
    )
    repo.add_text_datastream("und:abc", "DC", "<oai_dc:dc/>", label="Dublin Core", mime_type="text/xml")
    repo.add_text_datastream("und:abc", "RELS-EXT", RELS_EXT_XML, mime_type="application/rdf+xml")
    repo.add_text_datastream("und:abc", "rightsMetadata", RIGHTS_XML, mime_type="text/xml")
    repo.add_text_datastream("und:abc", "properties", PROPERTIES_XML, mime_type="text/xml")
    repo.add_text_datastream("und:abc", "descMetadata", DESC_NT, mime_type="text/plain")
    repo.datastreams["und:abc"]["content"] = (
        DatastreamRecord(
            name="content",
            label="photo.png",
            version_id="content.0",
            state="A",
            checksum="d41d8cd98f00b204e9800998ecf8427e",
            checksum_type="MD5",
            mime_type="image/png",
            location="und:abc+content+content.0",
            location_type="INTERNAL_ID",
            control_group="M",
            versionable=True,
            size=len(BINARY_PAYLOAD),
        ),
        BINARY_PAYLOAD,
    )
    repo.datastreams["und:abc"]["link"] = (
        DatastreamRecord(
            name="link",
            label="Homepage",
            state="A",
            mime_type="text/html",
            location="https://library.nd.edu/",
            location_type="URL",
            control_group="R",
            size=0,
        ),
        None,
    )
    return repo


@pytest.fixture
def failing_api_error() -> FedoraAPIError:
    return FedoraAPIError(500, "Internal Server Error")
