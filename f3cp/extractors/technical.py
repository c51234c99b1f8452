"""Technical metadata extractors for file-bearing objects.

WHY: Only GenericFile objects carry ``content`` and ``thumbnail``
datastreams, and only preserved files carry a ``bendo-item`` reference.
Their absence on every other object kind is normal.

HOW: content and thumbnail read the datastream profile only (no bytes);
bendo-item reads the small text payload.

RULES:
- All three are optional: a missing datastream yields no diagnostic
- content → filename (label), checksum-md5, mime-type, file-location
- thumbnail → thumbnail (location)
- bendo-item → bendo-item (payload text)
"""

from __future__ import annotations

from f3cp.core.triples import CurateItem
from f3cp.extractors.base import BaseExtractor
from f3cp.remote.client import FedoraClient


class ContentExtractor(BaseExtractor):

    optional = True

    @property
    def datastream(self) -> str:
        return "content"

    async def extract(self, client: FedoraClient, item: CurateItem) -> None:
        info = await client.get_datastream_info(item.pid, self.datastream)
        item.add("filename", info.label)
        item.add("checksum-md5", info.checksum)
        item.add("mime-type", info.mime_type)
        item.add("file-location", info.location)


class ThumbnailExtractor(BaseExtractor):

    optional = True

    @property
    def datastream(self) -> str:
        return "thumbnail"

    async def extract(self, client: FedoraClient, item: CurateItem) -> None:
        info = await client.get_datastream_info(item.pid, self.datastream)
        item.add("thumbnail", info.location)


class BendoItemExtractor(BaseExtractor):

    optional = True

    @property
    def datastream(self) -> str:
        return "bendo-item"

    async def extract(self, client: FedoraClient, item: CurateItem) -> None:
        data = await client.get_datastream(item.pid, self.datastream)
        item.add("bendo-item", data.decode("utf-8", errors="replace"))
