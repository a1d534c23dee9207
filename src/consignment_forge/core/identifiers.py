# src/consignment_forge/core/identifiers.py
"""Content-derived identifiers.

Codex ids, contract ids and operation ids are tagged SHA-256 digests over the
strict encoding of the record they name. Tagging keeps identifiers of
different record kinds from colliding even when the encoded bytes match.
"""

from __future__ import annotations

import hashlib
import re

CODEX_ID_TAG = "urn:consignment-forge:codex#v1"
CONTRACT_ID_TAG = "urn:consignment-forge:contract#v1"
OPID_TAG = "urn:consignment-forge:operation#v1"

ID_LEN = 32

_HEX_ID_PATTERN = re.compile(r"^[a-f0-9]{64}$")


def tagged_hash(tag: str, data: bytes) -> bytes:
    """Compute sha256(sha256(tag) || sha256(tag) || data)."""
    tag_digest = hashlib.sha256(tag.encode("utf-8")).digest()
    return hashlib.sha256(tag_digest + tag_digest + data).digest()


def parse_id(value: str, context: str) -> bytes:
    """Parse a 32-byte identifier from its lowercase hex display form.

    Raises:
        ValueError: If value is not exactly 64 lowercase hex characters
    """
    if not _HEX_ID_PATTERN.match(value):
        raise ValueError(f"{context} must be 64 lowercase hex characters, got {value[:70]!r}")
    return bytes.fromhex(value)


def display_id(value: bytes) -> str:
    return value.hex()
