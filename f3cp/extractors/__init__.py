"""Metadata extractor registry — one extractor per curate datastream.

WHY: The normalizer runs a fixed, ordered set of extractors against each
object. A central dict makes the order explicit and adding a datastream
trivial: create the extractor class, import it here, add one line.

HOW: EXTRACTORS maps string keys to extractor *classes* (not instances).
The normalizer instantiates them with the prefix table in use.

RULES:
- Keys are snake_case identifiers
- Insertion order is run order
- Every extractor listed here must be importable without side effects
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from f3cp.extractors.desc_metadata import DescMetadataExtractor
from f3cp.extractors.properties import PropertiesExtractor
from f3cp.extractors.rels_ext import RelsExtExtractor
from f3cp.extractors.rights_metadata import RightsMetadataExtractor
from f3cp.extractors.technical import (
    BendoItemExtractor,
    ContentExtractor,
    ThumbnailExtractor,
)

if TYPE_CHECKING:
    from f3cp.extractors.base import BaseExtractor

EXTRACTORS: dict[str, type[BaseExtractor]] = {
    "rels_ext": RelsExtExtractor,
    "properties": PropertiesExtractor,
    "rights_metadata": RightsMetadataExtractor,
    "desc_metadata": DescMetadataExtractor,
    "content": ContentExtractor,
    "thumbnail": ThumbnailExtractor,
    "bendo_item": BendoItemExtractor,
}
