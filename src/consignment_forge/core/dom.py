# src/consignment_forge/core/dom.py
"""Directory Object Model for exploded consignments.

Layout produced by the decoder and consumed by the encoder:

    <root>/
        manifest.yaml                 ordered record sequence and counts
        contract.yaml                 contract meta + genesis
        contract_sigs.yaml            content signatures
        schema.yaml                   codex + api + libs
        codex.<codex_id>.yaml         codex alone (informational)
        0000-genesis.<opid>.yaml      genesis alone (informational)
        0000-seals.yml                genesis seal map
        contract_id.yaml              pins the header contract id when it differs from the derived one
        operations/
            NNNN-op.<opid>.yaml
            NNNN-seals.yml
            NNNN-witness-MM.yml

Sequence numbers are 1-based and zero-padded to 4 digits (operations) and
2 digits (witnesses); wider numbers simply get more digits. The manifest
carries the order and the seal/witness counts explicitly, so the encoder
does not depend on lexical filename order when one is present.
"""

from __future__ import annotations

import re
import shutil
from pathlib import Path
from typing import Any, Literal, TypeVar

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from consignment_forge.contracts.errors import ConsignmentIoError, InvalidDataError, SerializationError
from consignment_forge.core.identifiers import display_id
from consignment_forge.core.records import SealDefinition
from consignment_forge.core.strict import U16_MAX

CONTRACT_FILE = "contract.yaml"
CONTRACT_SIGS_FILE = "contract_sigs.yaml"
SCHEMA_FILE = "schema.yaml"
CONTRACT_ID_FILE = "contract_id.yaml"
MANIFEST_FILE = "manifest.yaml"
GENESIS_SEALS_FILE = "0000-seals.yml"
OPERATIONS_DIR = "operations"

MANIFEST_FORMAT = 1

_OPERATION_FILE_PATTERN = re.compile(r"^(\d{4,})-op\.([a-f0-9]{64})\.yaml$")
_WITNESS_FILE_PATTERN = re.compile(r"^(\d{4,})-witness-(\d{2,})\.yml$")


def genesis_filename(opid: bytes) -> str:
    return f"0000-genesis.{display_id(opid)}.yaml"


def codex_filename(codex_id: bytes) -> str:
    return f"codex.{display_id(codex_id)}.yaml"


def operation_filename(seq: int, opid: bytes) -> str:
    return f"{seq:04d}-op.{display_id(opid)}.yaml"


def seals_filename(seq: int) -> str:
    return f"{seq:04d}-seals.yml"


def witness_filename(seq: int, number: int) -> str:
    return f"{seq:04d}-witness-{number:02d}.yml"


# =============================================================================
# Manifest
# =============================================================================


class GenesisEntry(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    opid: str
    seals: int = Field(ge=0, le=U16_MAX)


class OperationManifestEntry(BaseModel):
    """One operation block in the manifest."""

    model_config = {"frozen": True, "extra": "forbid"}

    seq: int = Field(ge=1)
    opid: str
    seals: int = Field(ge=0, le=U16_MAX)
    witnesses: int = Field(ge=0)


class DomManifest(BaseModel):
    """Explicit ordered listing of the records in an exploded consignment."""

    model_config = {"frozen": True, "extra": "forbid"}

    format: Literal[1] = MANIFEST_FORMAT
    contract_id: str
    genesis: GenesisEntry
    operations: tuple[OperationManifestEntry, ...] = ()

    @model_validator(mode="after")
    def validate_sequence(self) -> DomManifest:
        """Ensure operation sequence numbers are strictly increasing."""
        previous = 0
        for entry in self.operations:
            if entry.seq <= previous:
                raise ValueError(f"operation seq {entry.seq} must be greater than {previous}")
            previous = entry.seq
        return self


# =============================================================================
# YAML I/O
# =============================================================================


def write_yaml(path: Path, data: Any) -> None:
    try:
        with path.open("w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)
    except OSError as e:
        raise ConsignmentIoError(f"Failed to write {path}: {e}", path=path) from e


def read_yaml(path: Path) -> Any:
    """Load a YAML document.

    Raises:
        ConsignmentIoError: If the file cannot be read
        SerializationError: If the file is not valid YAML
    """
    try:
        with path.open(encoding="utf-8") as f:
            return yaml.safe_load(f)
    except OSError as e:
        raise ConsignmentIoError(f"Failed to read {path}: {e}", path=path) from e
    except yaml.YAMLError as e:
        raise SerializationError(str(e), path=path) from e


def write_record(path: Path, record: BaseModel) -> None:
    write_yaml(path, record.model_dump(mode="json", by_alias=True))


ModelT = TypeVar("ModelT", bound=BaseModel)


def load_record(path: Path, model: type[ModelT]) -> ModelT:
    """Load a DOM file into its record model.

    Raises:
        SerializationError: If the YAML does not validate as ``model``
    """
    data = read_yaml(path)
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise SerializationError(str(e), path=path) from e


def write_seals(path: Path, seals: dict[int, SealDefinition]) -> None:
    write_yaml(path, {index: seals[index].to_yaml_data() for index in sorted(seals)})


def load_seals(path: Path) -> dict[int, SealDefinition]:
    data = read_yaml(path)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise SerializationError(f"seal map must be a mapping, got {type(data).__name__}", path=path)
    seals: dict[int, SealDefinition] = {}
    for index, definition in data.items():
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index <= U16_MAX:
            raise SerializationError(f"seal index {index!r} is not a u16 integer", path=path)
        try:
            seals[index] = SealDefinition.model_validate(definition)
        except ValidationError as e:
            raise SerializationError(f"seal {index}: {e}", path=path) from e
    return dict(sorted(seals.items()))


def write_manifest(root: Path, manifest: DomManifest) -> None:
    write_yaml(root / MANIFEST_FILE, manifest.model_dump(mode="json"))


def write_contract_id(root: Path, contract_id: str | None) -> None:
    """Pin the header contract id, or remove a stale pin when None."""
    path = root / CONTRACT_ID_FILE
    if contract_id is not None:
        write_yaml(path, contract_id)
        return
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        raise ConsignmentIoError(f"Failed to remove {path}: {e}", path=path) from e


def load_manifest(root: Path) -> DomManifest | None:
    """Load the manifest, or None when the tree has none."""
    path = root / MANIFEST_FILE
    if not path.exists():
        return None
    return load_record(path, DomManifest)


# =============================================================================
# Directory helpers
# =============================================================================


def clear_directory(path: Path) -> None:
    """Empty a directory, creating it when missing."""
    try:
        if not path.exists():
            path.mkdir(parents=True)
            return
        for entry in path.iterdir():
            if entry.is_dir() and not entry.is_symlink():
                shutil.rmtree(entry)
            else:
                entry.unlink()
    except OSError as e:
        raise ConsignmentIoError(f"Failed to clear {path}: {e}", path=path) from e


def discover_operations(operations_dir: Path) -> list[tuple[int, Path]]:
    """List operation files ordered by their numeric sequence prefix.

    Raises:
        InvalidDataError: If two operation files share a sequence number
    """
    found: dict[int, Path] = {}
    for path in operations_dir.iterdir():
        match = _OPERATION_FILE_PATTERN.match(path.name)
        if match is None or not path.is_file():
            continue
        seq = int(match.group(1))
        if seq in found:
            raise InvalidDataError(f"Duplicate operation files for sequence {seq}: {found[seq].name}, {path.name}")
        found[seq] = path
    return sorted(found.items())


def find_operation_file(operations_dir: Path, seq: int) -> Path | None:
    matches = []
    for path in sorted(operations_dir.glob(f"{seq:04d}-op.*.yaml")):
        match = _OPERATION_FILE_PATTERN.match(path.name)
        if match is not None and int(match.group(1)) == seq:
            matches.append(path)
    if len(matches) > 1:
        raise InvalidDataError(f"Duplicate operation files for sequence {seq}: {[m.name for m in matches]}")
    return matches[0] if matches else None


def probe_witnesses(operations_dir: Path, seq: int) -> list[Path]:
    """Collect witness files for an operation, stopping at the first gap."""
    witnesses = []
    number = 1
    while (path := operations_dir / witness_filename(seq, number)).is_file():
        witnesses.append(path)
        number += 1
    return witnesses


def witness_numbers_on_disk(operations_dir: Path, seq: int) -> set[int]:
    numbers = set()
    for path in operations_dir.glob(f"{seq:04d}-witness-*.yml"):
        match = _WITNESS_FILE_PATTERN.match(path.name)
        if match is not None and int(match.group(1)) == seq:
            numbers.add(int(match.group(2)))
    return numbers
