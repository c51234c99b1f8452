"""Core transcoding, streaming, and metadata modules.

WHY: The core package holds the logic with real ordering and failure
rules: the object transcoder, the JSON array stream driver, prefix
compaction, and the metadata normalizer, apart from HTTP details.

HOW: serialized.py defines the dump element, transcoder.py converts one
object in each direction, stream.py drives whole arrays, prefixes.py
compacts namespace URIs, triples.py and metadata.py hold the metadata
triple list and the per-object normalizer.

RULES:
- Serialized field names are the dump file contract; change with care
- No module here talks HTTP directly; everything goes through FedoraClient
"""
