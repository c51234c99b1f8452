"""Fedora object and datastream records, parsed from REST profile XML.

WHY: The Fedora 3 REST API answers with small XML profile documents
(object profile, datastream profile, datastream list, search result).
Typed dataclasses make the fields explicit for the transcoder and the
extractors, and give the serialized JSON form one place to live.

HOW: Each dataclass has a from_xml() factory that reads the profile by
local element name, so the access/management/types namespaces used by
different Fedora versions do not matter. to_dict()/from_dict() map to the
JSON keys used in dump files.

RULES:
- JSON keys match existing dump files exactly (PID, Label, DSitems, ...)
- Missing profile fields become "" (or 0 / False), never None
- from_dict() tolerates missing keys so older dumps still load
"""

from __future__ import annotations

from dataclasses import dataclass, field

from lxml import etree

_PARSER = etree.XMLParser(resolve_entities=False, no_network=True)


def parse_xml(data: bytes) -> etree._Element:
    """Parse an XML payload without resolving entities or touching the network."""
    return etree.fromstring(data, parser=_PARSER)


def _child_text(root: etree._Element, name: str) -> str:
    child = root.find("{*}" + name)
    if child is None or child.text is None:
        return ""
    return child.text.strip()


@dataclass
class ObjectRecord:
    """Identity and bibliographic metadata for one repository object.

    RULES:
    - pid is the primary key and never empty for a real object
    - state is Fedora's one-letter code: "A" active, "I" inactive, "D" deleted
    - created / modified are kept as the repository's ISO-8601 strings
    """

    pid: str
    label: str = ""
    created: str = ""
    modified: str = ""
    state: str = ""

    @classmethod
    def from_xml(cls, data: bytes) -> ObjectRecord:
        """Parse an ``objectProfile`` document (GET /objects/{pid}?format=xml)."""
        root = parse_xml(data)
        return cls(
            pid=root.get("pid", ""),
            label=_child_text(root, "objLabel"),
            created=_child_text(root, "objCreateDate"),
            modified=_child_text(root, "objLastModDate"),
            state=_child_text(root, "objState"),
        )

    def to_dict(self) -> dict:
        return {
            "PID": self.pid,
            "Label": self.label,
            "CreatedDate": self.created,
            "LastModified": self.modified,
            "State": self.state,
        }

    @classmethod
    def from_dict(cls, data: dict) -> ObjectRecord:
        return cls(
            pid=data["PID"],
            label=data.get("Label") or "",
            created=data.get("CreatedDate") or "",
            modified=data.get("LastModified") or "",
            state=data.get("State") or "",
        )


@dataclass
class DatastreamRecord:
    """Identity and technical metadata for one named datastream.

    WHY: Everything needed to recreate a datastream elsewhere, except its
    bytes, lives here: control group, location, checksum, MIME type.

    HOW: Parsed from a ``datastreamProfile`` document. The name comes from
    the ``dsID`` attribute (or the caller, for older Fedora versions that
    omit it).

    RULES:
    - name is unique within its object and case-sensitive
    - control_group is "X" inline, "M" managed, "E" external, "R" redirect
    - location_type is Fedora's enum, e.g. "INTERNAL_ID" or "URL"
    - size is in bytes; 0 or less means no content is fetched
    """

    name: str
    label: str = ""
    version_id: str = ""
    state: str = ""
    checksum: str = ""
    checksum_type: str = ""
    mime_type: str = ""
    location: str = ""
    location_type: str = ""
    control_group: str = ""
    versionable: bool = False
    size: int = 0

    @classmethod
    def from_xml(cls, data: bytes, name: str = "") -> DatastreamRecord:
        """Parse a ``datastreamProfile`` document."""
        root = parse_xml(data)
        size = _child_text(root, "dsSize")
        return cls(
            name=root.get("dsID") or name,
            label=_child_text(root, "dsLabel"),
            version_id=_child_text(root, "dsVersionID"),
            state=_child_text(root, "dsState"),
            checksum=_child_text(root, "dsChecksum"),
            checksum_type=_child_text(root, "dsChecksumType"),
            mime_type=_child_text(root, "dsMIME"),
            location=_child_text(root, "dsLocation"),
            location_type=_child_text(root, "dsLocationType"),
            control_group=_child_text(root, "dsControlGroup"),
            versionable=_child_text(root, "dsVersionable").lower() == "true",
            size=int(size) if size else 0,
        )

    def to_dict(self) -> dict:
        return {
            "Name": self.name,
            "Label": self.label,
            "VersionID": self.version_id,
            "State": self.state,
            "Checksum": self.checksum,
            "ChecksumType": self.checksum_type,
            "MIMEType": self.mime_type,
            "Location": self.location,
            "LocationType": self.location_type,
            "ControlGroup": self.control_group,
            "Versionable": self.versionable,
            "Size": self.size,
        }

    @classmethod
    def from_dict(cls, data: dict) -> DatastreamRecord:
        return cls(
            name=data["Name"],
            label=data.get("Label") or "",
            version_id=data.get("VersionID") or "",
            state=data.get("State") or "",
            checksum=data.get("Checksum") or "",
            checksum_type=data.get("ChecksumType") or "",
            mime_type=data.get("MIMEType") or "",
            location=data.get("Location") or "",
            location_type=data.get("LocationType") or "",
            control_group=data.get("ControlGroup") or "",
            versionable=bool(data.get("Versionable", False)),
            size=int(data.get("Size") or 0),
        )


def parse_datastream_list(data: bytes) -> list[str]:
    """Return the datastream ids from an ``objectDatastreams`` document.

    Order is whatever the repository sent; callers sort when they need to.
    """
    root = parse_xml(data)
    return [ds.get("dsid") for ds in root.iter("{*}datastream") if ds.get("dsid")]


@dataclass
class SearchPage:
    """One page of PIDs from GET /objects, plus the token for the next page.

    RULES:
    - token is None on the last page
    """

    pids: list[str] = field(default_factory=list)
    token: str | None = None

    @classmethod
    def from_xml(cls, data: bytes) -> SearchPage:
        root = parse_xml(data)
        pids = [
            el.text.strip()
            for el in root.iter("{*}pid")
            if el.text and el.text.strip()
        ]
        token = None
        session = root.find("{*}listSession")
        if session is not None:
            token = _child_text(session, "token") or None
        return cls(pids=pids, token=token)
