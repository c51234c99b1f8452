"""Fedora repository client package — async HTTP interface to Fedora 3.

WHY: The transcoder and the metadata extractors consume a small, fixed
set of repository operations. This package encapsulates all Fedora REST
communication behind one async client class.

HOW: Uses httpx.AsyncClient for HTTP. FedoraClient provides one method
per contract operation. Profile XML is parsed into the typed dataclasses
defined in models.py.

RULES:
- All HTTP calls go through FedoraClient (no direct httpx usage elsewhere)
- "Not found" is always NotFoundError, a subclass of FedoraError
"""

from f3cp.remote.client import (
    FedoraAPIError,
    FedoraClient,
    FedoraError,
    NotFoundError,
)
from f3cp.remote.models import DatastreamRecord, ObjectRecord, SearchPage

__all__ = [
    "DatastreamRecord",
    "FedoraAPIError",
    "FedoraClient",
    "FedoraError",
    "NotFoundError",
    "ObjectRecord",
    "SearchPage",
]
