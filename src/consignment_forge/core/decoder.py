# src/consignment_forge/core/decoder.py
"""Stream decoder: explode a binary consignment into a DOM tree.

The decoder streams the source record by record, writing each one to its
own YAML file as soon as it is decoded. It never needs the whole consignment
in memory beyond a single operation block.

Files written before a failure are left in place; decoding into a fresh
directory is idempotent.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import structlog

from consignment_forge.contracts.errors import ConsignmentIoError
from consignment_forge.core.dom import (
    CONTRACT_FILE,
    CONTRACT_SIGS_FILE,
    GENESIS_SEALS_FILE,
    OPERATIONS_DIR,
    SCHEMA_FILE,
    DomManifest,
    GenesisEntry,
    OperationManifestEntry,
    codex_filename,
    genesis_filename,
    operation_filename,
    seals_filename,
    witness_filename,
    write_contract_id,
    write_manifest,
    write_record,
    write_seals,
)
from consignment_forge.core.identifiers import display_id
from consignment_forge.core.records import Articles
from consignment_forge.core.stream import ConsignmentHeader, iter_operation_entries, read_genesis_seals, read_header
from consignment_forge.core.strict import StrictReader

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class DecodeSummary:
    """Counts reported after a successful explosion."""

    contract_id: str
    destination: Path
    operations: int
    seals: int
    witnesses: int


def read_consignment_header(src: Path) -> ConsignmentHeader:
    """Read only the magic, version and contract id of a consignment file.

    Raises:
        ConsignmentIoError: If the file cannot be read
        UnrecognizedMagicError: If the file is not a consignment
        DecodingError: If the header is truncated or malformed
    """
    try:
        with src.open("rb") as stream:
            return read_header(StrictReader(stream))
    except OSError as e:
        raise ConsignmentIoError(f"Failed to read {src}: {e}", path=src) from e


def explode_consignment(src: Path, dst: Path) -> DecodeSummary:
    """Decode ``src`` into a DOM tree rooted at ``dst``.

    The destination is only created once the magic bytes have been accepted,
    so a non-consignment input leaves no files behind.

    Raises:
        ConsignmentIoError: On filesystem failure
        UnrecognizedMagicError: If ``src`` is not a consignment
        InvalidWitnessCountError: If genesis is followed by witnesses
        DecodingError: On malformed framing, including truncation mid-record
    """
    try:
        with src.open("rb") as stream:
            return _explode(StrictReader(stream), src, dst)
    except OSError as e:
        raise ConsignmentIoError(f"Failed to read {src}: {e}", path=src) from e


def _make_dir(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ConsignmentIoError(f"Failed to create {path}: {e}", path=path) from e


def _explode(reader: StrictReader, src: Path, dst: Path) -> DecodeSummary:
    header = read_header(reader)
    log = logger.bind(contract_id=header.contract_id_hex)
    log.info("consignment_decode_started", source=str(src), destination=str(dst))
    _make_dir(dst)

    articles = Articles.strict_decode(reader)
    contract = articles.contract
    genesis_opid = contract.genesis_opid()
    codex_id = articles.schema.codex.codex_id()

    write_record(dst / genesis_filename(genesis_opid), contract.genesis)
    write_record(dst / codex_filename(codex_id), articles.schema.codex)
    write_record(dst / SCHEMA_FILE, articles.schema)
    write_record(dst / CONTRACT_FILE, contract)
    write_record(dst / CONTRACT_SIGS_FILE, articles.contract_sigs)

    derived_id = contract.contract_id()
    if header.contract_id == derived_id:
        write_contract_id(dst, None)
    else:
        write_contract_id(dst, header.contract_id_hex)
        log.warning("contract_id_pinned", derived_contract_id=display_id(derived_id))

    genesis_seals = read_genesis_seals(reader)
    write_seals(dst / GENESIS_SEALS_FILE, genesis_seals)
    log.info(
        "contract_articles_decoded",
        genesis_opid=display_id(genesis_opid),
        codex_id=display_id(codex_id),
        seals=len(genesis_seals),
    )

    operations_dir = dst / OPERATIONS_DIR
    _make_dir(operations_dir)

    entries: list[OperationManifestEntry] = []
    seal_count = len(genesis_seals)
    witness_count = 0
    for seq, entry in enumerate(iter_operation_entries(reader), start=1):
        opid = entry.operation.opid()
        write_record(operations_dir / operation_filename(seq, opid), entry.operation)
        write_seals(operations_dir / seals_filename(seq), entry.seals)
        for number, witness in enumerate(entry.witnesses, start=1):
            write_record(operations_dir / witness_filename(seq, number), witness)

        seal_count += len(entry.seals)
        witness_count += len(entry.witnesses)
        entries.append(
            OperationManifestEntry(
                seq=seq,
                opid=display_id(opid),
                seals=len(entry.seals),
                witnesses=len(entry.witnesses),
            )
        )
        log.debug(
            "operation_decoded",
            seq=seq,
            opid=display_id(opid),
            operations=seq,
            seals=seal_count,
            witnesses=witness_count,
        )

    write_manifest(
        dst,
        DomManifest(
            contract_id=header.contract_id_hex,
            genesis=GenesisEntry(opid=display_id(genesis_opid), seals=len(genesis_seals)),
            operations=tuple(entries),
        ),
    )
    log.info(
        "consignment_decoded",
        destination=str(dst),
        operations=len(entries),
        seals=seal_count,
        witnesses=witness_count,
    )
    return DecodeSummary(
        contract_id=header.contract_id_hex,
        destination=dst,
        operations=len(entries),
        seals=seal_count,
        witnesses=witness_count,
    )
