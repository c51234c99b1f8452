"""Abstract base extractor and its result container.

WHY: Each metadata datastream has its own format, but the normalizer
must treat every extractor the same way: run it, keep whatever triples
it produced, and record (never raise) whatever went wrong.

HOW: BaseExtractor is an ABC with a ``datastream`` name and an async
``extract()`` that adds triples to a CurateItem. ``run()`` wraps extract()
and turns absence and failure into an ExtractorResult diagnostic.

RULES:
- Subclasses MUST implement ``datastream`` and ``extract()``
- ``optional = True`` makes a missing datastream silent (no diagnostic)
- Triples added before a failure are kept
- Only the known failure types are caught; anything else is a bug and
  propagates

To add a new extractor:
1. Create a new file in extractors/
2. Subclass BaseExtractor
3. Implement datastream and extract()
4. Register in EXTRACTORS in extractors/__init__.py
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

import httpx
from lxml import etree
from rdflib.exceptions import ParserError

from f3cp.core.prefixes import DEFAULT_PREFIX_TABLE, PrefixTable
from f3cp.core.triples import CurateItem, Triple
from f3cp.remote.client import FedoraClient, FedoraError, NotFoundError

_EXTRACTOR_ERRORS = (
    FedoraError,
    httpx.HTTPError,
    httpx.StreamError,
    httpx.InvalidURL,
    etree.LxmlError,
    ParserError,
    ValueError,
)


@dataclass
class ExtractorResult:
    """Triples from one extractor plus an optional diagnostic.

    Attributes:
        triples: Triples gathered, in the order they were found.
        diagnostic: Why extraction stopped early, or None.
    """

    triples: list[Triple] = field(default_factory=list)
    diagnostic: str | None = None


class BaseExtractor(ABC):
    """Abstract base for all metadata extractors."""

    optional: bool = False

    def __init__(self, prefixes: PrefixTable = DEFAULT_PREFIX_TABLE) -> None:
        self.prefixes = prefixes

    @property
    @abstractmethod
    def datastream(self) -> str:
        """Name of the datastream this extractor reads, e.g. 'RELS-EXT'."""

    @abstractmethod
    async def extract(self, client: FedoraClient, item: CurateItem) -> None:
        """Read the datastream for ``item.pid`` and add triples to ``item``.

        Raises:
            NotFoundError: If the datastream is absent.
        """

    async def run(self, client: FedoraClient, pid: str) -> ExtractorResult:
        item = CurateItem(pid=pid)
        diagnostic = None
        try:
            await self.extract(client, item)
        except NotFoundError:
            if not self.optional:
                diagnostic = f"{self.datastream}: not found"
        except _EXTRACTOR_ERRORS as e:
            diagnostic = f"{self.datastream}: {e}"
        return ExtractorResult(triples=item.meta, diagnostic=diagnostic)
