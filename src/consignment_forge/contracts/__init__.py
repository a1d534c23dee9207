"""Shared contracts: error taxonomy and collaborator protocols."""

from consignment_forge.contracts.collaborators import (
    ConsignmentValidator,
    ValidationReport,
    WitnessResolver,
    WitnessStatus,
    ensure_known_contract,
)
from consignment_forge.contracts.errors import (
    ConsignmentError,
    ConsignmentIoError,
    DecodingError,
    InvalidDataError,
    InvalidWitnessCountError,
    ResolverError,
    SerializationError,
    UnexpectedEofError,
    UnknownContractError,
    UnrecognizedMagicError,
)

__all__ = [
    "ConsignmentError",
    "ConsignmentIoError",
    "ConsignmentValidator",
    "DecodingError",
    "InvalidDataError",
    "InvalidWitnessCountError",
    "ResolverError",
    "SerializationError",
    "UnexpectedEofError",
    "UnknownContractError",
    "UnrecognizedMagicError",
    "ValidationReport",
    "WitnessResolver",
    "WitnessStatus",
    "ensure_known_contract",
]
