# src/consignment_forge/core/encoder.py
"""Stream encoder: rebuild a binary consignment from a DOM tree.

Operation order and per-operation counts come from ``manifest.yaml`` when
the tree has one. Hand-assembled trees without a manifest fall back to
ordering operation files by their numeric sequence prefix and probing
witness files until the first gap.

Output is atomic: bytes go to a temporary file next to the destination and
are moved into place only after the whole stream has been written.
"""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

import structlog

from consignment_forge.contracts.errors import ConsignmentIoError, InvalidDataError
from consignment_forge.core.dom import (
    CONTRACT_FILE,
    CONTRACT_ID_FILE,
    CONTRACT_SIGS_FILE,
    GENESIS_SEALS_FILE,
    OPERATIONS_DIR,
    SCHEMA_FILE,
    DomManifest,
    discover_operations,
    find_operation_file,
    load_manifest,
    load_record,
    load_seals,
    probe_witnesses,
    read_yaml,
    seals_filename,
    witness_filename,
    witness_numbers_on_disk,
)
from consignment_forge.core.identifiers import display_id, parse_id
from consignment_forge.core.records import Articles, ContentSigs, Contract, Operation, Schema, Witness
from consignment_forge.core.stream import OperationEntry, write_genesis_seals, write_header, write_operation_entry
from consignment_forge.core.strict import StrictWriter

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class EncodeSummary:
    """Counts reported after a successful rebuild."""

    contract_id: str
    destination: Path
    operations: int
    seals: int
    witnesses: int
    size: int


@dataclass(frozen=True, slots=True)
class _OperationFiles:
    seq: int
    operation: Path
    seals: Path
    witnesses: tuple[Path, ...]
    expected_seals: int | None = None


def rebuild_consignment(src_dir: Path, dst_path: Path) -> EncodeSummary:
    """Encode the DOM tree at ``src_dir`` into ``dst_path``.

    Raises:
        InvalidDataError: If a required file is missing or counts disagree
        SerializationError: If a DOM file does not parse into its record
        ConsignmentIoError: On filesystem failure
    """
    contract_id = _resolve_contract_id(src_dir)
    articles = _load_articles(src_dir)
    genesis_seals_path = src_dir / GENESIS_SEALS_FILE
    if not genesis_seals_path.is_file():
        raise InvalidDataError("Missing genesis seals file")
    genesis_seals = load_seals(genesis_seals_path)

    manifest = load_manifest(src_dir)
    if manifest is not None and manifest.genesis.seals != len(genesis_seals):
        raise InvalidDataError(
            f"Manifest lists {manifest.genesis.seals} genesis seals but {GENESIS_SEALS_FILE} holds {len(genesis_seals)}"
        )
    operations = _plan_operations(src_dir, manifest)

    log = logger.bind(contract_id=display_id(contract_id))
    if manifest is not None and manifest.contract_id != display_id(contract_id):
        log.warning("contract_id_differs_from_manifest", manifest_contract_id=manifest.contract_id)

    try:
        dst_path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{dst_path.name}.", suffix=".tmp", dir=dst_path.parent)
    except OSError as e:
        raise ConsignmentIoError(f"Failed to create output for {dst_path}: {e}", path=dst_path) from e

    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as stream:
            writer = StrictWriter(stream)
            write_header(writer, contract_id)
            articles.strict_encode(writer)
            write_genesis_seals(writer, genesis_seals)
            seal_count = len(genesis_seals)
            witness_count = 0
            for files in operations:
                entry = _load_operation_entry(files)
                write_operation_entry(writer, entry)
                seal_count += len(entry.seals)
                witness_count += len(entry.witnesses)
                log.debug("operation_encoded", seq=files.seq, operation=files.operation.name, witnesses=len(entry.witnesses))
            size = writer.written
        os.chmod(tmp_path, _default_file_mode())
        os.replace(tmp_path, dst_path)
    except OSError as e:
        tmp_path.unlink(missing_ok=True)
        raise ConsignmentIoError(f"Failed to write {dst_path}: {e}", path=dst_path) from e
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise

    log.info(
        "consignment_rebuilt",
        source=str(src_dir),
        destination=str(dst_path),
        operations=len(operations),
        seals=seal_count,
        witnesses=witness_count,
        size=size,
    )
    return EncodeSummary(
        contract_id=display_id(contract_id),
        destination=dst_path,
        operations=len(operations),
        seals=seal_count,
        witnesses=witness_count,
        size=size,
    )


def _default_file_mode() -> int:
    """Mode a plain open() would create, since mkstemp always uses 0600."""
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def _resolve_contract_id(src_dir: Path) -> bytes:
    """Contract id from contract_id.yaml, else derived from contract.yaml."""
    pinned = src_dir / CONTRACT_ID_FILE
    if pinned.is_file():
        value = read_yaml(pinned)
        if not isinstance(value, str):
            raise InvalidDataError(f"{CONTRACT_ID_FILE} must hold a hex contract id string")
        try:
            return parse_id(value, "contract id")
        except ValueError as e:
            raise InvalidDataError(str(e)) from e
    contract_path = src_dir / CONTRACT_FILE
    if contract_path.is_file():
        return load_record(contract_path, Contract).contract_id()
    raise InvalidDataError("Contract ID not found")


def _load_articles(src_dir: Path) -> Articles:
    required = {"schema": SCHEMA_FILE, "contract": CONTRACT_FILE, "contract signatures": CONTRACT_SIGS_FILE}
    for role, name in required.items():
        if not (src_dir / name).is_file():
            raise InvalidDataError(f"Missing {role} file {name}")
    return Articles(
        schema=load_record(src_dir / SCHEMA_FILE, Schema),
        contract=load_record(src_dir / CONTRACT_FILE, Contract),
        contract_sigs=load_record(src_dir / CONTRACT_SIGS_FILE, ContentSigs),
    )


def _plan_operations(src_dir: Path, manifest: DomManifest | None) -> list[_OperationFiles]:
    operations_dir = src_dir / OPERATIONS_DIR
    if not operations_dir.is_dir():
        raise InvalidDataError("Operations directory not found")
    if manifest is None:
        return [
            _OperationFiles(
                seq=seq,
                operation=path,
                seals=_require_seals(operations_dir, seq),
                witnesses=tuple(probe_witnesses(operations_dir, seq)),
            )
            for seq, path in discover_operations(operations_dir)
        ]

    listed = {entry.seq for entry in manifest.operations}
    for seq, path in discover_operations(operations_dir):
        if seq not in listed:
            raise InvalidDataError(f"Operation file {path.name} is not listed in the manifest")

    plan = []
    for entry in manifest.operations:
        operation = find_operation_file(operations_dir, entry.seq)
        if operation is None:
            raise InvalidDataError(f"Missing operation file for operation {entry.seq}")
        on_disk = witness_numbers_on_disk(operations_dir, entry.seq)
        expected = set(range(1, entry.witnesses + 1))
        if on_disk != expected:
            raise InvalidDataError(
                f"Operation {entry.seq} lists {entry.witnesses} witnesses but found witness files {sorted(on_disk)}"
            )
        plan.append(
            _OperationFiles(
                seq=entry.seq,
                operation=operation,
                seals=_require_seals(operations_dir, entry.seq),
                witnesses=tuple(operations_dir / witness_filename(entry.seq, n) for n in sorted(expected)),
                expected_seals=entry.seals,
            )
        )
    return plan


def _require_seals(operations_dir: Path, seq: int) -> Path:
    path = operations_dir / seals_filename(seq)
    if not path.is_file():
        raise InvalidDataError(f"Missing seals file for operation {seq}")
    return path


def _load_operation_entry(files: _OperationFiles) -> OperationEntry:
    seals = load_seals(files.seals)
    if files.expected_seals is not None and len(seals) != files.expected_seals:
        raise InvalidDataError(f"Operation {files.seq} lists {files.expected_seals} seals but {files.seals.name} holds {len(seals)}")
    return OperationEntry(
        operation=load_record(files.operation, Operation),
        seals=seals,
        witnesses=tuple(load_record(path, Witness) for path in files.witnesses),
    )
