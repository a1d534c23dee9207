# tests/unit/core/test_decoder.py
"""Unit tests for the stream decoder (explode_consignment)."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

import pytest
import yaml

from consignment_forge.contracts.errors import (
    ConsignmentIoError,
    DecodingError,
    InvalidWitnessCountError,
    UnexpectedEofError,
    UnrecognizedMagicError,
)
from consignment_forge.core.decoder import explode_consignment, read_consignment_header
from consignment_forge.core.dom import (
    CONTRACT_FILE,
    CONTRACT_ID_FILE,
    CONTRACT_SIGS_FILE,
    GENESIS_SEALS_FILE,
    MANIFEST_FILE,
    OPERATIONS_DIR,
    SCHEMA_FILE,
    codex_filename,
    genesis_filename,
    load_manifest,
    load_record,
    load_seals,
    operation_filename,
    seals_filename,
    witness_filename,
)
from consignment_forge.core.records import Contract, Operation, Witness
from consignment_forge.core.stream import Consignment
from tests.fixtures.consignments import build_consignment, digest, write_consignment


def _snapshot(root: Path) -> dict[str, bytes]:
    return {str(p.relative_to(root)): p.read_bytes() for p in sorted(root.rglob("*")) if p.is_file()}


# =============================================================================
# Layout
# =============================================================================


class TestExplodeLayout:
    """Tests for the files written by the decoder."""

    def test_writes_articles(self, tmp_path: Path, consignment: Consignment, consignment_file: Path) -> None:
        dst = tmp_path / "dom"
        explode_consignment(consignment_file, dst)

        contract = consignment.articles.contract
        codex = consignment.articles.schema.codex
        for name in (
            CONTRACT_FILE,
            CONTRACT_SIGS_FILE,
            SCHEMA_FILE,
            GENESIS_SEALS_FILE,
            MANIFEST_FILE,
            genesis_filename(contract.genesis_opid()),
            codex_filename(codex.codex_id()),
        ):
            assert (dst / name).is_file(), name
        assert load_record(dst / CONTRACT_FILE, Contract) == contract
        assert load_seals(dst / GENESIS_SEALS_FILE) == consignment.genesis_seals

    def test_writes_operation_blocks_in_order(self, tmp_path: Path) -> None:
        consignment = build_consignment(operations=3, witnesses=[2, 0, 1])
        src = write_consignment(tmp_path / "c.rgb", consignment)
        dst = tmp_path / "dom"
        explode_consignment(src, dst)

        operations_dir = dst / OPERATIONS_DIR
        for seq, entry in enumerate(consignment.operations, start=1):
            op_path = operations_dir / operation_filename(seq, entry.operation.opid())
            assert load_record(op_path, Operation) == entry.operation
            assert load_seals(operations_dir / seals_filename(seq)) == entry.seals
            for number, witness in enumerate(entry.witnesses, start=1):
                assert load_record(operations_dir / witness_filename(seq, number), Witness) == witness
        assert not (operations_dir / witness_filename(2, 1)).exists()
        assert not (operations_dir / witness_filename(1, 3)).exists()

    def test_manifest_records_counts(self, tmp_path: Path) -> None:
        consignment = build_consignment(operations=2, witnesses=[3, 1], genesis_seals=4)
        src = write_consignment(tmp_path / "c.rgb", consignment)
        explode_consignment(src, tmp_path / "dom")

        manifest = load_manifest(tmp_path / "dom")
        assert manifest is not None
        assert manifest.contract_id == consignment.contract_id.hex()
        assert manifest.genesis.seals == 4
        assert [(e.seq, e.witnesses) for e in manifest.operations] == [(1, 3), (2, 1)]
        assert [e.opid for e in manifest.operations] == [entry.operation.opid().hex() for entry in consignment.operations]

    def test_summary_counts(self, tmp_path: Path) -> None:
        consignment = build_consignment(operations=2, witnesses=[1, 2], genesis_seals=2)
        src = write_consignment(tmp_path / "c.rgb", consignment)
        summary = explode_consignment(src, tmp_path / "dom")

        expected_seals = 2 + sum(len(entry.seals) for entry in consignment.operations)
        assert summary.operations == 2
        assert summary.witnesses == 3
        assert summary.seals == expected_seals
        assert summary.contract_id == consignment.contract_id.hex()

    def test_yaml_is_human_readable(self, tmp_path: Path, consignment_file: Path) -> None:
        dst = tmp_path / "dom"
        explode_consignment(consignment_file, dst)
        data = yaml.safe_load((dst / CONTRACT_FILE).read_text())
        assert data["meta"]["consensus"] == "bitcoin"
        assert data["meta"]["testnet"] is True

    def test_genesis_only_consignment(self, tmp_path: Path) -> None:
        src = write_consignment(tmp_path / "c.rgb", build_consignment(operations=0))
        summary = explode_consignment(src, tmp_path / "dom")
        assert summary.operations == 0
        assert list((tmp_path / "dom" / OPERATIONS_DIR).iterdir()) == []


    def test_consistent_header_id_is_not_pinned(self, tmp_path: Path, consignment_file: Path) -> None:
        explode_consignment(consignment_file, tmp_path / "dom")
        assert not (tmp_path / "dom" / CONTRACT_ID_FILE).exists()

    def test_foreign_header_id_is_pinned(self, tmp_path: Path) -> None:
        """A header id the contract does not derive is written to contract_id.yaml."""
        foreign = digest("foreign header")
        src = write_consignment(tmp_path / "c.rgb", replace(build_consignment(), contract_id=foreign))
        dst = tmp_path / "dom"
        summary = explode_consignment(src, dst)
        assert summary.contract_id == foreign.hex()
        assert yaml.safe_load((dst / CONTRACT_ID_FILE).read_text()) == foreign.hex()

    def test_re_explode_drops_stale_pin(self, tmp_path: Path, consignment_file: Path) -> None:
        dst = tmp_path / "dom"
        src = write_consignment(tmp_path / "foreign.rgb", replace(build_consignment(), contract_id=digest("foreign header")))
        explode_consignment(src, dst)
        explode_consignment(consignment_file, dst)
        assert not (dst / CONTRACT_ID_FILE).exists()

# =============================================================================
# Failures
# =============================================================================


class TestExplodeFailures:
    """Tests for decoder error handling."""

    def test_unrecognized_magic_writes_nothing(self, tmp_path: Path) -> None:
        src = tmp_path / "not-a-consignment.bin"
        src.write_bytes(b"\x89PNG\r\n\x1a\n" + bytes(100))
        dst = tmp_path / "dom"
        with pytest.raises(UnrecognizedMagicError):
            explode_consignment(src, dst)
        assert not dst.exists()

    def test_missing_source(self, tmp_path: Path) -> None:
        with pytest.raises(ConsignmentIoError):
            explode_consignment(tmp_path / "missing.rgb", tmp_path / "dom")

    def test_genesis_witnesses_rejected(self, tmp_path: Path) -> None:
        consignment = build_consignment(operations=0)
        data = bytearray(consignment.to_bytes())
        # genesis witness count is the final u64 of a genesis-only stream
        data[-8:] = (1).to_bytes(8, "little")
        src = tmp_path / "c.rgb"
        src.write_bytes(bytes(data))
        with pytest.raises(InvalidWitnessCountError):
            explode_consignment(src, tmp_path / "dom")

    def test_truncated_operation(self, tmp_path: Path) -> None:
        data = build_consignment(operations=2).to_bytes()
        src = tmp_path / "c.rgb"
        src.write_bytes(data[:-10])
        dst = tmp_path / "dom"
        with pytest.raises(DecodingError):
            explode_consignment(src, dst)
        # records decoded before the failure stay on disk
        assert (dst / CONTRACT_FILE).is_file()
        assert not (dst / MANIFEST_FILE).exists()

    @pytest.mark.parametrize("length", [2**64 - 1, 2**42])
    def test_oversized_witness_item_length(self, tmp_path: Path, length: int) -> None:
        """A huge CompactSize length runs out of stream instead of allocating it."""
        data = build_consignment(operations=1).to_bytes()
        item = b"\x47" + b"\x30" * 71
        assert item in data
        src = tmp_path / "c.rgb"
        src.write_bytes(data.replace(item, b"\xff" + length.to_bytes(8, "little") + item[1:], 1))
        with pytest.raises(UnexpectedEofError):
            explode_consignment(src, tmp_path / "dom")


# =============================================================================
# Idempotence and header
# =============================================================================


class TestExplodeIdempotence:
    """Tests for repeated explosion."""

    def test_same_bytes_same_tree(self, tmp_path: Path, consignment_file: Path) -> None:
        explode_consignment(consignment_file, tmp_path / "a")
        explode_consignment(consignment_file, tmp_path / "b")
        assert _snapshot(tmp_path / "a") == _snapshot(tmp_path / "b")

    def test_re_explode_into_same_directory(self, tmp_path: Path, consignment_file: Path) -> None:
        explode_consignment(consignment_file, tmp_path / "a")
        before = _snapshot(tmp_path / "a")
        explode_consignment(consignment_file, tmp_path / "a")
        assert _snapshot(tmp_path / "a") == before


class TestReadHeader:
    """Tests for read_consignment_header."""

    def test_reads_contract_id(self, consignment: Consignment, consignment_file: Path) -> None:
        header = read_consignment_header(consignment_file)
        assert header.contract_id_hex == consignment.contract_id.hex()

    def test_rejects_other_files(self, tmp_path: Path) -> None:
        src = tmp_path / "x"
        src.write_bytes(b"hello")
        with pytest.raises(UnrecognizedMagicError):
            read_consignment_header(src)
