"""Namespace prefix compaction for metadata URIs.

WHY: RDF predicates and values carry long namespace URIs
("http://purl.org/dc/terms/title"). Tabular output is far easier to read
and filter with short aliases ("dc:title").

HOW: PrefixTable holds an immutable copy of a URI → alias mapping with
its keys ordered longest first. compact() replaces the first (longest)
matching URI prefix with its alias and keeps the remainder verbatim.

RULES:
- Longest matching URI wins; equal-length ties resolve lexicographically
- At most one substitution per value
- Values matching no URI are returned unchanged
- The table is never mutated after construction
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from types import MappingProxyType

from f3cp.config import DEFAULT_PREFIXES


class PrefixTable(Mapping):
    """Immutable, deterministically ordered namespace → alias table."""

    def __init__(self, prefixes: Mapping[str, str]) -> None:
        self._prefixes = MappingProxyType(dict(prefixes))
        self._order = tuple(sorted(self._prefixes, key=lambda uri: (-len(uri), uri)))

    def __getitem__(self, uri: str) -> str:
        return self._prefixes[uri]

    def __iter__(self) -> Iterator[str]:
        return iter(self._order)

    def __len__(self) -> int:
        return len(self._order)

    def __repr__(self) -> str:
        return f"PrefixTable({dict(self._prefixes)!r})"

    def compact(self, value: str) -> str:
        """Rewrite a leading namespace URI in ``value`` to its alias."""
        for uri in self._order:
            if value.startswith(uri):
                return self._prefixes[uri] + value[len(uri):]
        return value


DEFAULT_PREFIX_TABLE = PrefixTable(DEFAULT_PREFIXES)
