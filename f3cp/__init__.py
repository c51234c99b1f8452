"""f3cp — copy Fedora 3 objects through a streaming JSON array.

WHY: Moving objects between Fedora repositories (or keeping a portable
backup of them) needs a representation that carries every datastream's
metadata and bytes, can be piped between processes, and never needs the
whole repository in memory. Separately, curation work needs the handful
of metadata streams on each object flattened into plain triples.

HOW: Three layers: a typed async client for the Fedora REST API
(remote), the transcoder and stream driver that dump/load the JSON array
(core), and pluggable per-datastream extractors that feed the metadata
normalizer (extractors).

RULES:
- Only one object is resident in memory at a time in either direction
- Dump is best-effort per object; load is fail-fast
- Extractors never abort the object they run against
"""

__version__ = "0.1.0"
