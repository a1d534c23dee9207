# src/consignment_forge/core/stream.py
"""Consignment stream framing.

Layout:

    magic (16) | version (2, reserved) | contract id (32) | articles
    | genesis seals | genesis witness count (u64, always 0)
    | { operation | seals | witness count (u64) | witness * count } ...

The operation block repeats until the stream ends. Ending cleanly before an
operation starts is the normal terminator; ending anywhere inside a block is
a decoding error.
"""

from __future__ import annotations

import io
from collections.abc import Iterator
from dataclasses import dataclass, field

from consignment_forge.contracts.errors import DecodingError, InvalidWitnessCountError, UnrecognizedMagicError
from consignment_forge.core.identifiers import ID_LEN, display_id
from consignment_forge.core.records import (
    Articles,
    Operation,
    SealDefinition,
    Witness,
    decode_seal_map,
    encode_seal_map,
)
from consignment_forge.core.strict import StrictReader, StrictWriter

MAGIC_BYTES_CONSIGNMENT = b"RGB CONSIGNMENT\x00"
VERSION_LEN = 2


@dataclass(frozen=True, slots=True)
class ConsignmentHeader:
    """Fixed-size prefix of every consignment stream."""

    version: int
    contract_id: bytes

    @property
    def contract_id_hex(self) -> str:
        return display_id(self.contract_id)


@dataclass(frozen=True, slots=True)
class OperationEntry:
    """One operation block: the operation, its seals and its witnesses."""

    operation: Operation
    seals: dict[int, SealDefinition]
    witnesses: tuple[Witness, ...] = ()


def read_header(reader: StrictReader) -> ConsignmentHeader:
    """Read magic, version and contract id.

    Raises:
        UnrecognizedMagicError: If the stream does not start with the magic bytes
        DecodingError: If the reserved version field is not zero or the stream is truncated
    """
    magic = reader.read_upto(len(MAGIC_BYTES_CONSIGNMENT))
    if magic != MAGIC_BYTES_CONSIGNMENT:
        raise UnrecognizedMagicError(magic.hex())
    version = int.from_bytes(reader.read_exact(VERSION_LEN), "little")
    if version != 0:
        raise DecodingError(f"Unsupported consignment version {version}")
    return ConsignmentHeader(version=version, contract_id=reader.read_exact(ID_LEN))


def write_header(writer: StrictWriter, contract_id: bytes) -> None:
    writer.write_raw(MAGIC_BYTES_CONSIGNMENT)
    writer.write_u16(0)
    writer.write_fixed(contract_id, ID_LEN)


def read_genesis_seals(reader: StrictReader) -> dict[int, SealDefinition]:
    """Read the genesis seal map and enforce a zero genesis witness count."""
    seals = decode_seal_map(reader)
    count = reader.read_u64()
    if count != 0:
        raise InvalidWitnessCountError(count)
    return seals


def write_genesis_seals(writer: StrictWriter, seals: dict[int, SealDefinition]) -> None:
    encode_seal_map(writer, seals)
    writer.write_u64(0)


def read_operation_entry(reader: StrictReader) -> OperationEntry:
    operation = Operation.strict_decode(reader)
    seals = decode_seal_map(reader)
    count = reader.read_u64()
    witnesses = tuple(Witness.strict_decode(reader) for _ in range(count))
    return OperationEntry(operation=operation, seals=seals, witnesses=witnesses)


def iter_operation_entries(reader: StrictReader) -> Iterator[OperationEntry]:
    """Yield operation blocks until the stream ends at a block boundary."""
    while not reader.at_eof():
        yield read_operation_entry(reader)


def write_operation_entry(writer: StrictWriter, entry: OperationEntry) -> None:
    entry.operation.strict_encode(writer)
    encode_seal_map(writer, entry.seals)
    writer.write_u64(len(entry.witnesses))
    for witness in entry.witnesses:
        witness.strict_encode(writer)


@dataclass(frozen=True, slots=True)
class Consignment:
    """Fully materialized consignment.

    The decoder and encoder stream record by record and never build one of
    these; it exists for callers that want the whole artifact in memory.
    """

    contract_id: bytes
    articles: Articles
    genesis_seals: dict[int, SealDefinition]
    operations: tuple[OperationEntry, ...] = field(default=())

    def strict_encode(self, writer: StrictWriter) -> None:
        write_header(writer, self.contract_id)
        self.articles.strict_encode(writer)
        write_genesis_seals(writer, self.genesis_seals)
        for entry in self.operations:
            write_operation_entry(writer, entry)

    @classmethod
    def strict_decode(cls, reader: StrictReader) -> Consignment:
        header = read_header(reader)
        articles = Articles.strict_decode(reader)
        genesis_seals = read_genesis_seals(reader)
        return cls(
            contract_id=header.contract_id,
            articles=articles,
            genesis_seals=genesis_seals,
            operations=tuple(iter_operation_entries(reader)),
        )

    def to_bytes(self) -> bytes:
        buffer = io.BytesIO()
        self.strict_encode(StrictWriter(buffer))
        return buffer.getvalue()

    @classmethod
    def from_bytes(cls, data: bytes) -> Consignment:
        return cls.strict_decode(StrictReader(io.BytesIO(data)))
