"""Triple list accumulated per object by the metadata normalizer.

WHY: Relationship, descriptive, rights, and technical metadata live in
different datastreams with different formats. Downstream tooling wants
one flat list of (subject, predicate, object) rows per object.

HOW: CurateItem collects Triple values in insertion order. add() scopes
a triple to the object's PID; add3() takes an explicit subject.

RULES:
- Empty values are dropped, never emitted as blank rows
- Order of insertion is the output order
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Triple:
    """One normalized metadata fact."""

    subject: str
    predicate: str
    obj: str


@dataclass
class CurateItem:
    """Triples gathered for one object, plus any extractor diagnostics.

    RULES:
    - pid is the default subject for every triple
    - diagnostics are human-readable strings, one per failed extractor
    """

    pid: str
    meta: list[Triple] = field(default_factory=list)
    diagnostics: list[str] = field(default_factory=list)

    def add(self, predicate: str, value: str) -> None:
        self.add3(self.pid, predicate, value)

    def add3(self, subject: str, predicate: str, value: str) -> None:
        if not value:
            return
        self.meta.append(Triple(subject=subject, predicate=predicate, obj=value))
