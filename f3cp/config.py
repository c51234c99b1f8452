"""Configuration constants, the namespace prefix table, and .env loading.

WHY: Centralizes every tunable value so it is easy to find, update, and
override. The namespace prefix table is plain data, kept out of the
extractors, so it can be extended without touching parsing code.

HOW: python-dotenv loads the .env file on import. Constants are defined
as module-level values read from the environment with defaults. The
load_fedora_url() function provides a clear error when no repository
was given.

RULES:
- DEFAULT_PREFIXES maps full namespace URIs to short aliases
- An alias may be empty (the URI is simply stripped)
- Credentials are never hardcoded; they come from the URL or the environment
- All defaults can be overridden via environment variables
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

# Load .env from the directory the tool is run from
load_dotenv()

# ---------------------------------------------------------------------------
# Namespace prefixes: full URI → short alias
# ---------------------------------------------------------------------------

DEFAULT_PREFIXES: dict[str, str] = {
    "info:fedora/und:": "und:",
    "info:fedora/afmodel:": "",
    "http://purl.org/dc/terms/": "dc:",
    "https://library.nd.edu/ns/terms/": "nd:",
    "http://purl.org/ontology/bibo/": "bibo:",
    "http://www.ndltd.org/standards/metadata/etdms/1.1/": "ms:",
    "http://purl.org/vra/": "vracore:",
    "http://id.loc.gov/vocabulary/relators/": "mrel:",
    "http://www.ebu.ch/metadata/ontologies/ebucore/ebucore#": "ebucore:",
    "http://xmlns.com/foaf/0.1/": "foaf:",
    "http://projecthydra.org/ns/relations#": "hydra:",
    "http://www.w3.org/2000/01/rdf-schema#": "rdfs:",
    "http://purl.org/pav/": "pav:",
}

# ---------------------------------------------------------------------------
# Repository and I/O defaults
# ---------------------------------------------------------------------------

FEDORA_URL = os.getenv("F3CP_FEDORA_URL", "").strip()
FEDORA_USER = os.getenv("F3CP_FEDORA_USER") or None
FEDORA_PASSWORD = os.getenv("F3CP_FEDORA_PASSWORD") or None
HTTP_TIMEOUT_S = float(os.getenv("F3CP_TIMEOUT", "300"))
CHUNK_SIZE = int(os.getenv("F3CP_CHUNK_SIZE", str(64 * 1024)))
SEARCH_PAGE_SIZE = int(os.getenv("F3CP_SEARCH_PAGE_SIZE", "100"))
LOG_LEVEL = os.getenv("F3CP_LOG_LEVEL", "WARNING").upper()

MANAGED_DATASTREAM = "DC"
"""Datastream the repository maintains itself; never uploaded."""


def load_fedora_url(explicit: str | None = None) -> str:
    """Return the repository URL to talk to.

    WHY: Every verb needs a repository. Users usually pass it on the
    command line, but scripted runs prefer the environment.

    HOW: An explicit value (anything except ``-``) wins; otherwise
    F3CP_FEDORA_URL is used.

    RULES:
    - Raises ValueError if neither source provides a URL
    - Trailing slashes are stripped
    """
    url = (explicit or "").strip()
    if not url or url == "-":
        url = FEDORA_URL
    if not url:
        raise ValueError(
            "No Fedora repository given. Pass a URL on the command line "
            "or set F3CP_FEDORA_URL in the .env file."
        )
    return url.rstrip("/")
