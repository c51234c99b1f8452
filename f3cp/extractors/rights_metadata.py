"""rightsMetadata extractor.

WHY: Access control for each object is recorded as Hydra rightsMetadata
XML: access blocks typed "read", "edit", "discover", ... each listing
people and groups, plus an optional embargo date.

HOW: lxml, matching elements by local name. The embargo date comes
first, then each read/edit block contributes its groups and persons.

RULES:
- read → read-group / read-person; edit → edit-group / edit-person
- Other access types are ignored
- embargo-date is the text under embargo/machine, if any
"""

from __future__ import annotations

from f3cp.core.triples import CurateItem
from f3cp.extractors.base import BaseExtractor
from f3cp.remote.client import FedoraClient
from f3cp.remote.models import parse_xml

# access type → (group label, person label)
_ACCESS_LABELS = {
    "read": ("read-group", "read-person"),
    "edit": ("edit-group", "edit-person"),
}


def _text(element) -> str:  # noqa: ANN001
    return "".join(element.itertext()).strip()


class RightsMetadataExtractor(BaseExtractor):

    @property
    def datastream(self) -> str:
        return "rightsMetadata"

    async def extract(self, client: FedoraClient, item: CurateItem) -> None:
        root = parse_xml(await client.get_datastream(item.pid, self.datastream))

        embargo = root.find("{*}embargo/{*}machine")
        if embargo is not None:
            item.add("embargo-date", _text(embargo))

        for access in root.findall("{*}access"):
            labels = _ACCESS_LABELS.get(access.get("type", ""))
            if labels is None:
                continue
            group_label, person_label = labels
            for group in access.findall("{*}machine/{*}group"):
                item.add(group_label, _text(group))
            for person in access.findall("{*}machine/{*}person"):
                item.add(person_label, _text(person))
