# src/consignment_forge/contracts/errors.py
"""Error hierarchy for consignment transcoding.

Every failure surfaced by the decoder, encoder and attack generator derives
from ConsignmentError, so callers can catch one type and inspect the subclass
to learn what went wrong. The clean end-of-stream at an operation boundary is
the only condition that is not an error.
"""

from __future__ import annotations

from pathlib import Path


class ConsignmentError(Exception):
    """Base error for consignment processing."""


class ConsignmentIoError(ConsignmentError):
    """Filesystem failure while reading or writing an artifact."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class DecodingError(ConsignmentError):
    """Malformed binary framing in a consignment stream."""


class UnexpectedEofError(DecodingError):
    """Stream ended in the middle of a record."""

    def __init__(self, expected: int, received: int) -> None:
        super().__init__(f"Unexpected end of stream: expected {expected} bytes, got {received}")
        self.expected = expected
        self.received = received


class UnrecognizedMagicError(ConsignmentError):
    """Stream does not start with the consignment magic bytes."""

    def __init__(self, magic_hex: str) -> None:
        super().__init__(f"Unrecognized magic bytes in consignment stream ({magic_hex})")
        self.magic_hex = magic_hex


class UnknownContractError(ConsignmentError):
    """Consignment references a contract that has not been registered."""

    def __init__(self, contract_id: str) -> None:
        super().__init__(f"Unknown contract {contract_id} can't be consumed; please import contract articles first.")
        self.contract_id = contract_id


class InvalidWitnessCountError(ConsignmentError):
    """Genesis record is followed by a nonzero witness count."""

    def __init__(self, count: int) -> None:
        super().__init__(f"Invalid witness count: {count}")
        self.count = count


class InvalidDataError(ConsignmentError):
    """Missing or unrecoverable structural data."""


class SerializationError(ConsignmentError):
    """A DOM file does not parse into its expected record shape."""

    def __init__(self, message: str, *, path: Path) -> None:
        super().__init__(f"Serialization error in {path}: {message}")
        self.path = path


class ResolverError(ConsignmentError):
    """Witness resolver could not answer a query."""

    def __init__(self, txid: str, reason: str) -> None:
        super().__init__(f"Unable to resolve witness {txid}: {reason}")
        self.txid = txid
        self.reason = reason
