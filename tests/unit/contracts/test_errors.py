# tests/unit/contracts/test_errors.py
"""Unit tests for the consignment error hierarchy."""

from __future__ import annotations

from pathlib import Path

import pytest

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


class TestHierarchy:
    """Every error kind is catchable as ConsignmentError."""

    @pytest.mark.parametrize(
        "error",
        [
            ConsignmentIoError("disk full"),
            DecodingError("bad tag"),
            UnexpectedEofError(expected=4, received=1),
            UnrecognizedMagicError("00"),
            UnknownContractError("ab" * 32),
            InvalidWitnessCountError(1),
            InvalidDataError("missing"),
            SerializationError("bad yaml", path=Path("x.yaml")),
            ResolverError("cd" * 32, "offline"),
        ],
    )
    def test_is_consignment_error(self, error: ConsignmentError) -> None:
        assert isinstance(error, ConsignmentError)

    def test_eof_is_decoding_error(self) -> None:
        assert issubclass(UnexpectedEofError, DecodingError)


class TestMessages:
    """Messages carry the context callers report."""

    def test_witness_count(self) -> None:
        assert str(InvalidWitnessCountError(2)) == "Invalid witness count: 2"

    def test_unknown_contract(self) -> None:
        error = UnknownContractError("ff" * 32)
        assert error.contract_id == "ff" * 32
        assert "please import contract articles first" in str(error)

    def test_serialization_names_file(self) -> None:
        error = SerializationError("unexpected key", path=Path("operations/0001-seals.yml"))
        assert str(error) == "Serialization error in operations/0001-seals.yml: unexpected key"
        assert error.path == Path("operations/0001-seals.yml")

    def test_eof_counts(self) -> None:
        error = UnexpectedEofError(expected=32, received=5)
        assert "expected 32 bytes, got 5" in str(error)

    def test_io_error_path_optional(self) -> None:
        assert ConsignmentIoError("x").path is None
        assert ConsignmentIoError("x", path=Path("a")).path == Path("a")

    def test_resolver_error(self) -> None:
        error = ResolverError("abc", "timeout")
        assert error.txid == "abc"
        assert error.reason == "timeout"
        assert str(error) == "Unable to resolve witness abc: timeout"
