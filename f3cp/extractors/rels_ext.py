"""RELS-EXT relationship extractor.

WHY: RELS-EXT holds the object's model and its collection, parent, and
editor relationships, the structural facts curation cares about most.

HOW: The RDF/XML that Fedora writes here is narrow: one rdf:Description
whose subject is the object itself, with one child element per
relationship and the target in an attribute (rdf:resource). It is read
directly with lxml rather than a full RDF/XML parser, which rejects the
undeclared ``info:`` scheme Fedora uses.

RULES:
- Every triple's subject is the object PID
- hasModel → af-model; hasEditor/hasEditorGroup → edit-person/edit-group
  so labels match rightsMetadata
- isMemberOfCollection and isPartOf keep their local names
- Anything else uses the compacted namespace + local name
- Values are prefix-compacted; a child without attributes uses its text
"""

from __future__ import annotations

from lxml import etree

from f3cp.core.triples import CurateItem
from f3cp.extractors.base import BaseExtractor
from f3cp.remote.client import FedoraClient
from f3cp.remote.models import parse_xml

_PREDICATE_LABELS = {
    "hasModel": "af-model",
    "isMemberOfCollection": "isMemberOfCollection",
    "isPartOf": "isPartOf",
    "hasEditor": "edit-person",
    "hasEditorGroup": "edit-group",
}


def _value(element: etree._Element) -> str:
    for value in element.attrib.values():
        return value
    return (element.text or "").strip()


class RelsExtExtractor(BaseExtractor):

    @property
    def datastream(self) -> str:
        return "RELS-EXT"

    async def extract(self, client: FedoraClient, item: CurateItem) -> None:
        root = parse_xml(await client.get_datastream(item.pid, self.datastream))
        description = root.find(".//{*}Description")
        if description is None:
            return
        for child in description:
            if not isinstance(child.tag, str):
                continue  # comments and processing instructions
            name = etree.QName(child)
            value = self.prefixes.compact(_value(child))
            predicate = _PREDICATE_LABELS.get(name.localname)
            if predicate is None:
                predicate = self.prefixes.compact((name.namespace or "") + name.localname)
            item.add(predicate, value)
