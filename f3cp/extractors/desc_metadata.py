"""descMetadata extractor (N-Triples).

WHY: Descriptive metadata (title, creator, dates, ...) is stored as
N-Triples. Subjects may be the object itself or nested resources such
as "<info:fedora/und:abc/file1>", and every row must stay scoped to the
owning object.

HOW: rdflib's N-Triples parser feeds a sink that records statements in
document order. Subject, predicate, and object are prefix-compacted; a
subject that is not the PID itself becomes "PID/subject".

RULES:
- Literals contribute their lexical value; blank nodes render as "_:id"
  with the label used in the document, so output is stable across runs
- A parse error stops this extractor only; earlier triples are kept
"""

from __future__ import annotations

from rdflib import BNode
from rdflib.plugins.parsers.ntriples import W3CNTriplesParser, r_nodeid

from f3cp.core.triples import CurateItem
from f3cp.extractors.base import BaseExtractor
from f3cp.remote.client import FedoraClient


def _term(term) -> str:  # noqa: ANN001
    if isinstance(term, BNode):
        return "_:" + str(term)
    return str(term)


class _LabelledParser(W3CNTriplesParser):
    """N-Triples parser that keeps blank node labels as written."""

    def nodeid(self, bnode_context=None):  # noqa: ANN001, ANN201
        if self.peek("_"):
            return BNode(self.eat(r_nodeid).group(1))
        return False


class _OrderedSink:
    """rdflib parser sink that forwards each statement as it is parsed."""

    def __init__(self, on_triple) -> None:  # noqa: ANN001
        self._on_triple = on_triple

    def triple(self, s, p, o) -> None:  # noqa: ANN001
        self._on_triple(_term(s), _term(p), _term(o))


class DescMetadataExtractor(BaseExtractor):

    @property
    def datastream(self) -> str:
        return "descMetadata"

    async def extract(self, client: FedoraClient, item: CurateItem) -> None:
        data = await client.get_datastream(item.pid, self.datastream)

        def add(subject: str, predicate: str, value: str) -> None:
            subject = self.prefixes.compact(subject)
            if subject != item.pid:
                subject = item.pid + "/" + subject
            item.add3(
                subject,
                self.prefixes.compact(predicate),
                self.prefixes.compact(value),
            )

        parser = _LabelledParser(sink=_OrderedSink(add))
        parser.parsestring(data.decode("utf-8"))
