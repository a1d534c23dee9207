# src/consignment_forge/core/__init__.py
"""Core transcoding: strict encoding, records, DOM, decoder and encoder."""

from consignment_forge.core.decoder import DecodeSummary, explode_consignment, read_consignment_header
from consignment_forge.core.encoder import EncodeSummary, rebuild_consignment

__all__ = [
    "DecodeSummary",
    "EncodeSummary",
    "explode_consignment",
    "read_consignment_header",
    "rebuild_consignment",
]
