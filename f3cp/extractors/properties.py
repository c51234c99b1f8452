"""properties extractor: depositor, owner, and representative."""

from __future__ import annotations

from f3cp.core.triples import CurateItem
from f3cp.extractors.base import BaseExtractor
from f3cp.remote.client import FedoraClient
from f3cp.remote.models import parse_xml

_FIELDS = ("depositor", "owner", "representative")


class PropertiesExtractor(BaseExtractor):

    @property
    def datastream(self) -> str:
        return "properties"

    async def extract(self, client: FedoraClient, item: CurateItem) -> None:
        root = parse_xml(await client.get_datastream(item.pid, self.datastream))
        for name in _FIELDS:
            element = root.find("{*}" + name)
            if element is not None:
                item.add(name, (element.text or "").strip())
