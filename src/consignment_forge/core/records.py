# src/consignment_forge/core/records.py
"""Typed consignment records.

Each record is a frozen Pydantic model that knows its strict binary encoding
(``strict_encode`` / ``strict_decode``) and its YAML form (``to_yaml_data`` /
``model_validate``). Field order in each encoder matches the wire order.

Byte strings appear in YAML as lowercase hex; field names are camelCase so a
DOM file reads ``codexId: ...`` rather than ``codex_id: ...``.

Records only model what is needed to find record boundaries and preserve
bytes. Nothing here checks contract semantics.
"""

from __future__ import annotations

import io
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum
from typing import Annotated, Any, Literal, Self, TypeVar

from pydantic import BaseModel, BeforeValidator, Field, PlainSerializer
from pydantic.alias_generators import to_camel

from consignment_forge.contracts.errors import DecodingError, InvalidDataError
from consignment_forge.core.identifiers import CODEX_ID_TAG, CONTRACT_ID_TAG, ID_LEN, OPID_TAG, tagged_hash
from consignment_forge.core.strict import (
    I32_MAX,
    I32_MIN,
    I64_MAX,
    I64_MIN,
    U16_MAX,
    U32_MAX,
    U64_MAX,
    Confinement,
    StrictReader,
    StrictWriter,
)


def _hex_to_bytes(value: Any) -> Any:
    if isinstance(value, str):
        try:
            return bytes.fromhex(value)
        except ValueError as e:
            raise ValueError(f"invalid hex string: {e}") from e
    return value


def _bytes_to_hex(value: bytes) -> str:
    return value.hex()


HexBytes = Annotated[bytes, BeforeValidator(_hex_to_bytes), PlainSerializer(_bytes_to_hex, return_type=str)]
Bytes32 = Annotated[
    bytes,
    BeforeValidator(_hex_to_bytes),
    Field(min_length=ID_LEN, max_length=ID_LEN),
    PlainSerializer(_bytes_to_hex, return_type=str),
]

U8 = Annotated[int, Field(ge=0, le=0xFF)]
U16 = Annotated[int, Field(ge=0, le=U16_MAX)]
U32 = Annotated[int, Field(ge=0, le=U32_MAX)]
U64 = Annotated[int, Field(ge=0, le=U64_MAX)]
I32 = Annotated[int, Field(ge=I32_MIN, le=I32_MAX)]
I64 = Annotated[int, Field(ge=I64_MIN, le=I64_MAX)]

# Field elements carried by a state value; the u8 prefix is the element count
StateValue = Annotated[tuple[U64, ...], Field(max_length=4)]


def _write_state_value(writer: StrictWriter, value: tuple[int, ...]) -> None:
    writer.write_u8(len(value))
    for element in value:
        writer.write_u64(element)


def _read_state_value(reader: StrictReader) -> tuple[int, ...]:
    count = reader.read_u8()
    if count > 4:
        raise DecodingError(f"State value has {count} elements, at most 4 allowed")
    return tuple(reader.read_u64() for _ in range(count))


def ensure_ascending(keys: Iterable[Any], context: str) -> None:
    """Raise InvalidDataError unless keys are strictly ascending."""
    previous = None
    for key in keys:
        if previous is not None and key <= previous:
            raise InvalidDataError(f"{context}: keys must be unique and ascending, {key!r} follows {previous!r}")
        previous = key


def _decode_ascending(keys: list[Any], context: str) -> None:
    try:
        ensure_ascending(keys, context)
    except InvalidDataError as e:
        raise DecodingError(str(e)) from e


class Record(BaseModel):
    """Base class for strict-encodable records."""

    model_config = {
        "frozen": True,
        "extra": "forbid",
        "alias_generator": to_camel,
        "validate_by_name": True,
        "validate_by_alias": True,
    }

    def strict_encode(self, writer: StrictWriter) -> None:
        raise NotImplementedError

    @classmethod
    def strict_decode(cls, reader: StrictReader) -> Self:
        raise NotImplementedError

    def to_bytes(self) -> bytes:
        buffer = io.BytesIO()
        self.strict_encode(StrictWriter(buffer))
        return buffer.getvalue()

    @classmethod
    def from_bytes(cls, data: bytes) -> Self:
        reader = StrictReader(io.BytesIO(data))
        record = cls.strict_decode(reader)
        if not reader.at_eof():
            raise DecodingError(f"Trailing bytes after {cls.__name__} at offset {reader.position}")
        return record

    def to_yaml_data(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


# =============================================================================
# Schema and codex
# =============================================================================


class LibSite(Record):
    lib_id: Bytes32
    offset: U16


class Verifier(Record):
    call_id: U16
    lib_site: LibSite


class Codex(Record):
    """Verification rules shared by every contract issued under a schema."""

    name: str
    developer: str
    timestamp: I64
    features: U32 = 0
    field_order: U32
    verifiers: tuple[Verifier, ...] = ()

    def strict_encode(self, writer: StrictWriter) -> None:
        writer.write_string(self.name, Confinement.TINY)
        writer.write_string(self.developer, Confinement.TINY)
        writer.write_reserved(2)
        writer.write_i64(self.timestamp)
        writer.write_u32(self.features)
        writer.write_u32(self.field_order)
        ensure_ascending((v.call_id for v in self.verifiers), "codex verifiers")
        writer.write_len(len(self.verifiers), Confinement.TINY)
        for verifier in self.verifiers:
            writer.write_u16(verifier.call_id)
            writer.write_fixed(verifier.lib_site.lib_id, ID_LEN)
            writer.write_u16(verifier.lib_site.offset)

    @classmethod
    def strict_decode(cls, reader: StrictReader) -> Self:
        name = reader.read_string(Confinement.TINY)
        developer = reader.read_string(Confinement.TINY)
        reader.read_reserved(2)
        timestamp = reader.read_i64()
        features = reader.read_u32()
        field_order = reader.read_u32()
        verifiers = []
        for _ in range(reader.read_len(Confinement.TINY)):
            call_id = reader.read_u16()
            lib_site = LibSite(lib_id=reader.read_exact(ID_LEN), offset=reader.read_u16())
            verifiers.append(Verifier(call_id=call_id, lib_site=lib_site))
        _decode_ascending([v.call_id for v in verifiers], "codex verifiers")
        return cls(
            name=name,
            developer=developer,
            timestamp=timestamp,
            features=features,
            field_order=field_order,
            verifiers=tuple(verifiers),
        )

    def codex_id(self) -> bytes:
        return tagged_hash(CODEX_ID_TAG, self.to_bytes())


class Api(Record):
    """Public interface of a codex; carries the codex id it binds to."""

    codex_id: Bytes32
    developer: str
    conforms: U16 | None = None
    default_call: str | None = None
    methods: dict[str, U16] = Field(default_factory=dict)

    def strict_encode(self, writer: StrictWriter) -> None:
        writer.write_fixed(self.codex_id, ID_LEN)
        writer.write_string(self.developer, Confinement.TINY)
        writer.write_option_tag(self.conforms is not None)
        if self.conforms is not None:
            writer.write_u16(self.conforms)
        writer.write_option_tag(self.default_call is not None)
        if self.default_call is not None:
            writer.write_string(self.default_call, Confinement.TINY)
        names = sorted(self.methods, key=lambda name: name.encode("utf-8"))
        writer.write_len(len(names), Confinement.TINY)
        for name in names:
            writer.write_string(name, Confinement.TINY)
            writer.write_u16(self.methods[name])

    @classmethod
    def strict_decode(cls, reader: StrictReader) -> Self:
        codex_id = reader.read_exact(ID_LEN)
        developer = reader.read_string(Confinement.TINY)
        conforms = reader.read_u16() if reader.read_option_tag() else None
        default_call = reader.read_string(Confinement.TINY) if reader.read_option_tag() else None
        methods: dict[str, int] = {}
        names: list[bytes] = []
        for _ in range(reader.read_len(Confinement.TINY)):
            name = reader.read_string(Confinement.TINY)
            names.append(name.encode("utf-8"))
            methods[name] = reader.read_u16()
        _decode_ascending(names, "api methods")
        return cls(codex_id=codex_id, developer=developer, conforms=conforms, default_call=default_call, methods=methods)


class Schema(Record):
    codex: Codex
    api: Api
    libs: tuple[HexBytes, ...] = ()
    types: HexBytes = b""

    def strict_encode(self, writer: StrictWriter) -> None:
        self.codex.strict_encode(writer)
        self.api.strict_encode(writer)
        writer.write_len(len(self.libs), Confinement.TINY)
        for lib in self.libs:
            writer.write_blob(lib, Confinement.SMALL)
        writer.write_blob(self.types, Confinement.MEDIUM)
        writer.write_reserved(8)

    @classmethod
    def strict_decode(cls, reader: StrictReader) -> Self:
        codex = Codex.strict_decode(reader)
        api = Api.strict_decode(reader)
        libs = tuple(reader.read_blob(Confinement.SMALL) for _ in range(reader.read_len(Confinement.TINY)))
        types = reader.read_blob(Confinement.MEDIUM)
        reader.read_reserved(8)
        return cls(codex=codex, api=api, libs=libs, types=types)


# =============================================================================
# Contract state
# =============================================================================


class StateCell(Record):
    data: StateValue
    auth: Bytes32
    lock: HexBytes | None = None

    def strict_encode(self, writer: StrictWriter) -> None:
        _write_state_value(writer, self.data)
        writer.write_fixed(self.auth, ID_LEN)
        writer.write_option_tag(self.lock is not None)
        if self.lock is not None:
            writer.write_blob(self.lock, Confinement.TINY)

    @classmethod
    def strict_decode(cls, reader: StrictReader) -> Self:
        data = _read_state_value(reader)
        auth = reader.read_exact(ID_LEN)
        lock = reader.read_blob(Confinement.TINY) if reader.read_option_tag() else None
        return cls(data=data, auth=auth, lock=lock)


class StateData(Record):
    value: StateValue
    raw: HexBytes | None = None

    def strict_encode(self, writer: StrictWriter) -> None:
        _write_state_value(writer, self.value)
        writer.write_option_tag(self.raw is not None)
        if self.raw is not None:
            writer.write_blob(self.raw, Confinement.SMALL)

    @classmethod
    def strict_decode(cls, reader: StrictReader) -> Self:
        value = _read_state_value(reader)
        raw = reader.read_blob(Confinement.SMALL) if reader.read_option_tag() else None
        return cls(value=value, raw=raw)


class CellAddr(Record):
    opid: Bytes32
    pos: U16

    def strict_encode(self, writer: StrictWriter) -> None:
        writer.write_fixed(self.opid, ID_LEN)
        writer.write_u16(self.pos)

    @classmethod
    def strict_decode(cls, reader: StrictReader) -> Self:
        return cls(opid=reader.read_exact(ID_LEN), pos=reader.read_u16())


class Input(Record):
    addr: CellAddr
    witness: StateValue = ()

    def strict_encode(self, writer: StrictWriter) -> None:
        self.addr.strict_encode(writer)
        _write_state_value(writer, self.witness)

    @classmethod
    def strict_decode(cls, reader: StrictReader) -> Self:
        addr = CellAddr.strict_decode(reader)
        return cls(addr=addr, witness=_read_state_value(reader))


def _write_vec(writer: StrictWriter, items: tuple[Record, ...], confinement: Confinement) -> None:
    writer.write_len(len(items), confinement)
    for item in items:
        item.strict_encode(writer)


RecordT = TypeVar("RecordT", bound=Record)


def _read_vec(reader: StrictReader, record_cls: type[RecordT], confinement: Confinement) -> tuple[RecordT, ...]:
    count = reader.read_len(confinement)
    return tuple(record_cls.strict_decode(reader) for _ in range(count))


class Consensus(StrEnum):
    """Consensus layer a contract is anchored to."""

    NONE = "none"
    BITCOIN = "bitcoin"
    LIQUID = "liquid"
    PRIME = "prime"

    @property
    def code(self) -> int:
        return _CONSENSUS_CODES[self]

    @classmethod
    def from_code(cls, code: int) -> Consensus:
        for consensus, value in _CONSENSUS_CODES.items():
            if value == code:
                return consensus
        raise DecodingError(f"Unknown consensus code 0x{code:02x}")


_CONSENSUS_CODES: dict[Consensus, int] = {
    Consensus.NONE: 0x00,
    Consensus.BITCOIN: 0x10,
    Consensus.LIQUID: 0x11,
    Consensus.PRIME: 0x20,
}


class ContractMeta(Record):
    testnet: bool
    consensus: Consensus
    timestamp: I64
    features: U16 = 0
    name: str
    issuer: str

    def strict_encode(self, writer: StrictWriter) -> None:
        writer.write_bool(self.testnet)
        writer.write_u8(self.consensus.code)
        writer.write_i64(self.timestamp)
        writer.write_u16(self.features)
        writer.write_string(self.name, Confinement.TINY)
        writer.write_string(self.issuer, Confinement.TINY)

    @classmethod
    def strict_decode(cls, reader: StrictReader) -> Self:
        return cls(
            testnet=reader.read_bool(),
            consensus=Consensus.from_code(reader.read_u8()),
            timestamp=reader.read_i64(),
            features=reader.read_u16(),
            name=reader.read_string(Confinement.TINY),
            issuer=reader.read_string(Confinement.TINY),
        )


class Genesis(Record):
    """Founding operation of a contract."""

    codex_id: Bytes32
    call_id: U16
    nonce: U64
    destructible: tuple[StateCell, ...] = ()
    immutable: tuple[StateData, ...] = ()

    def strict_encode(self, writer: StrictWriter) -> None:
        writer.write_fixed(self.codex_id, ID_LEN)
        writer.write_u16(self.call_id)
        writer.write_u64(self.nonce)
        _write_vec(writer, self.destructible, Confinement.SMALL)
        _write_vec(writer, self.immutable, Confinement.SMALL)

    @classmethod
    def strict_decode(cls, reader: StrictReader) -> Self:
        return cls(
            codex_id=reader.read_exact(ID_LEN),
            call_id=reader.read_u16(),
            nonce=reader.read_u64(),
            destructible=_read_vec(reader, StateCell, Confinement.SMALL),
            immutable=_read_vec(reader, StateData, Confinement.SMALL),
        )

    def opid(self) -> bytes:
        return tagged_hash(OPID_TAG, self.to_bytes())


class Contract(Record):
    meta: ContractMeta
    genesis: Genesis

    def strict_encode(self, writer: StrictWriter) -> None:
        writer.write_reserved(1)
        self.meta.strict_encode(writer)
        self.genesis.strict_encode(writer)

    @classmethod
    def strict_decode(cls, reader: StrictReader) -> Self:
        reader.read_reserved(1)
        meta = ContractMeta.strict_decode(reader)
        return cls(meta=meta, genesis=Genesis.strict_decode(reader))

    def contract_id(self) -> bytes:
        return tagged_hash(CONTRACT_ID_TAG, self.to_bytes())

    def genesis_opid(self) -> bytes:
        return self.genesis.opid()


class ContentSigs(Record):
    """Signatures over contract content, keyed by signer identity."""

    sigs: dict[str, HexBytes] = Field(default_factory=dict)

    def strict_encode(self, writer: StrictWriter) -> None:
        identities = sorted(self.sigs, key=lambda identity: identity.encode("utf-8"))
        writer.write_len(len(identities), Confinement.TINY)
        for identity in identities:
            writer.write_string(identity, Confinement.TINY)
            writer.write_blob(self.sigs[identity], Confinement.TINY)

    @classmethod
    def strict_decode(cls, reader: StrictReader) -> Self:
        sigs: dict[str, bytes] = {}
        keys: list[bytes] = []
        for _ in range(reader.read_len(Confinement.TINY)):
            identity = reader.read_string(Confinement.TINY)
            keys.append(identity.encode("utf-8"))
            sigs[identity] = reader.read_blob(Confinement.TINY)
        _decode_ascending(keys, "content signatures")
        return cls(sigs=sigs)


class Operation(Record):
    """State transition following genesis."""

    contract_id: Bytes32
    call_id: U16
    nonce: U64
    witness: StateValue = ()
    destroying: tuple[Input, ...] = ()
    reading: tuple[CellAddr, ...] = ()
    destructible: tuple[StateCell, ...] = ()
    immutable: tuple[StateData, ...] = ()

    def strict_encode(self, writer: StrictWriter) -> None:
        writer.write_reserved(1)
        writer.write_fixed(self.contract_id, ID_LEN)
        writer.write_u16(self.call_id)
        writer.write_u64(self.nonce)
        _write_state_value(writer, self.witness)
        _write_vec(writer, self.destroying, Confinement.SMALL)
        _write_vec(writer, self.reading, Confinement.SMALL)
        _write_vec(writer, self.destructible, Confinement.SMALL)
        _write_vec(writer, self.immutable, Confinement.SMALL)

    @classmethod
    def strict_decode(cls, reader: StrictReader) -> Self:
        reader.read_reserved(1)
        return cls(
            contract_id=reader.read_exact(ID_LEN),
            call_id=reader.read_u16(),
            nonce=reader.read_u64(),
            witness=_read_state_value(reader),
            destroying=_read_vec(reader, Input, Confinement.SMALL),
            reading=_read_vec(reader, CellAddr, Confinement.SMALL),
            destructible=_read_vec(reader, StateCell, Confinement.SMALL),
            immutable=_read_vec(reader, StateData, Confinement.SMALL),
        )

    def opid(self) -> bytes:
        return tagged_hash(OPID_TAG, self.to_bytes())


# =============================================================================
# Seals
# =============================================================================


class WoutPrimary(Record):
    """Seal closed by an output of the witness transaction itself."""

    kind: Literal["wout"] = "wout"
    vout: U32


class ExternPrimary(Record):
    """Seal closed by spending an existing outpoint."""

    kind: Literal["extern"] = "extern"
    txid: Bytes32
    vout: U32


class NoiseSecondary(Record):
    kind: Literal["noise"] = "noise"
    noise: Bytes32


class FallbackSecondary(Record):
    kind: Literal["fallback"] = "fallback"
    txid: Bytes32
    vout: U32


SealPrimary = Annotated[WoutPrimary | ExternPrimary, Field(discriminator="kind")]
SealSecondary = Annotated[NoiseSecondary | FallbackSecondary, Field(discriminator="kind")]


class SealDefinition(Record):
    primary: SealPrimary
    secondary: SealSecondary

    def strict_encode(self, writer: StrictWriter) -> None:
        if isinstance(self.primary, WoutPrimary):
            writer.write_u8(0)
            writer.write_u32(self.primary.vout)
        else:
            writer.write_u8(1)
            writer.write_fixed(self.primary.txid, ID_LEN)
            writer.write_u32(self.primary.vout)
        if isinstance(self.secondary, NoiseSecondary):
            writer.write_u8(0)
            writer.write_fixed(self.secondary.noise, ID_LEN)
        else:
            writer.write_u8(1)
            writer.write_fixed(self.secondary.txid, ID_LEN)
            writer.write_u32(self.secondary.vout)

    @classmethod
    def strict_decode(cls, reader: StrictReader) -> Self:
        primary: WoutPrimary | ExternPrimary
        secondary: NoiseSecondary | FallbackSecondary
        match reader.read_u8():
            case 0:
                primary = WoutPrimary(vout=reader.read_u32())
            case 1:
                primary = ExternPrimary(txid=reader.read_exact(ID_LEN), vout=reader.read_u32())
            case tag:
                raise DecodingError(f"Unknown seal primary tag 0x{tag:02x}")
        match reader.read_u8():
            case 0:
                secondary = NoiseSecondary(noise=reader.read_exact(ID_LEN))
            case 1:
                secondary = FallbackSecondary(txid=reader.read_exact(ID_LEN), vout=reader.read_u32())
            case tag:
                raise DecodingError(f"Unknown seal secondary tag 0x{tag:02x}")
        return cls(primary=primary, secondary=secondary)


def encode_seal_map(writer: StrictWriter, seals: dict[int, SealDefinition]) -> None:
    """Write a SMALL ordered map of seal index to seal definition."""
    writer.write_len(len(seals), Confinement.SMALL)
    for index in sorted(seals):
        writer.write_u16(index)
        seals[index].strict_encode(writer)


def decode_seal_map(reader: StrictReader) -> dict[int, SealDefinition]:
    seals: dict[int, SealDefinition] = {}
    indexes: list[int] = []
    for _ in range(reader.read_len(Confinement.SMALL)):
        index = reader.read_u16()
        indexes.append(index)
        seals[index] = SealDefinition.strict_decode(reader)
    _decode_ascending(indexes, "seal map")
    return seals


# =============================================================================
# Witnesses
# =============================================================================


class Outpoint(Record):
    txid: Bytes32
    vout: U32


class TxIn(Record):
    prev_output: Outpoint
    sig_script: HexBytes = b""
    sequence: U32
    witness: tuple[HexBytes, ...] = ()

    def strict_encode(self, writer: StrictWriter) -> None:
        writer.write_fixed(self.prev_output.txid, ID_LEN)
        writer.write_u32(self.prev_output.vout)
        writer.write_compact_blob(self.sig_script)
        writer.write_u32(self.sequence)
        writer.write_compact_size(len(self.witness))
        for item in self.witness:
            writer.write_compact_blob(item)

    @classmethod
    def strict_decode(cls, reader: StrictReader) -> Self:
        prev_output = Outpoint(txid=reader.read_exact(ID_LEN), vout=reader.read_u32())
        sig_script = reader.read_compact_blob()
        sequence = reader.read_u32()
        witness = tuple(reader.read_compact_blob() for _ in range(reader.read_compact_size()))
        return cls(prev_output=prev_output, sig_script=sig_script, sequence=sequence, witness=witness)


class TxOut(Record):
    value: U64
    script_pubkey: HexBytes

    def strict_encode(self, writer: StrictWriter) -> None:
        writer.write_u64(self.value)
        writer.write_compact_blob(self.script_pubkey)

    @classmethod
    def strict_decode(cls, reader: StrictReader) -> Self:
        return cls(value=reader.read_u64(), script_pubkey=reader.read_compact_blob())


class Tx(Record):
    """Published witness: the on-chain transaction closing the seals."""

    version: I32 = 2
    inputs: tuple[TxIn, ...]
    outputs: tuple[TxOut, ...]
    lock_time: U32 = 0

    def strict_encode(self, writer: StrictWriter) -> None:
        writer.write_i32(self.version)
        writer.write_compact_size(len(self.inputs))
        for tx_in in self.inputs:
            tx_in.strict_encode(writer)
        writer.write_compact_size(len(self.outputs))
        for tx_out in self.outputs:
            tx_out.strict_encode(writer)
        writer.write_u32(self.lock_time)

    @classmethod
    def strict_decode(cls, reader: StrictReader) -> Self:
        version = reader.read_i32()
        inputs = tuple(TxIn.strict_decode(reader) for _ in range(reader.read_compact_size()))
        outputs = tuple(TxOut.strict_decode(reader) for _ in range(reader.read_compact_size()))
        return cls(version=version, inputs=inputs, outputs=outputs, lock_time=reader.read_u32())


class MerkleProof(Record):
    pos: U32
    cofactor: U16
    path: tuple[Bytes32, ...] = ()


class TapretProof(Record):
    path_proof: HexBytes
    internal_pk: Bytes32


class Anchor(Record):
    """Client-side witness: commitment proofs kept off-chain."""

    mpc_protocol: Bytes32
    mpc_proof: MerkleProof
    dbc_proof: TapretProof | None = None

    def strict_encode(self, writer: StrictWriter) -> None:
        writer.write_fixed(self.mpc_protocol, ID_LEN)
        writer.write_u32(self.mpc_proof.pos)
        writer.write_u16(self.mpc_proof.cofactor)
        writer.write_len(len(self.mpc_proof.path), Confinement.TINY)
        for node in self.mpc_proof.path:
            writer.write_fixed(node, ID_LEN)
        writer.write_option_tag(self.dbc_proof is not None)
        if self.dbc_proof is not None:
            writer.write_blob(self.dbc_proof.path_proof, Confinement.TINY)
            writer.write_fixed(self.dbc_proof.internal_pk, ID_LEN)
        writer.write_reserved(1)

    @classmethod
    def strict_decode(cls, reader: StrictReader) -> Self:
        mpc_protocol = reader.read_exact(ID_LEN)
        pos = reader.read_u32()
        cofactor = reader.read_u16()
        path = tuple(reader.read_exact(ID_LEN) for _ in range(reader.read_len(Confinement.TINY)))
        dbc_proof = None
        if reader.read_option_tag():
            dbc_proof = TapretProof(path_proof=reader.read_blob(Confinement.TINY), internal_pk=reader.read_exact(ID_LEN))
        reader.read_reserved(1)
        return cls(
            mpc_protocol=mpc_protocol,
            mpc_proof=MerkleProof(pos=pos, cofactor=cofactor, path=path),
            dbc_proof=dbc_proof,
        )


class Witness(Record):
    published: Tx
    client: Anchor

    def strict_encode(self, writer: StrictWriter) -> None:
        self.published.strict_encode(writer)
        self.client.strict_encode(writer)

    @classmethod
    def strict_decode(cls, reader: StrictReader) -> Self:
        published = Tx.strict_decode(reader)
        return cls(published=published, client=Anchor.strict_decode(reader))


# =============================================================================
# Articles
# =============================================================================


@dataclass(frozen=True, slots=True)
class Articles:
    """Schema, contract and content signatures, encoded as one unit."""

    schema: Schema
    contract: Contract
    contract_sigs: ContentSigs

    def strict_encode(self, writer: StrictWriter) -> None:
        self.schema.strict_encode(writer)
        self.contract.strict_encode(writer)
        self.contract_sigs.strict_encode(writer)

    @classmethod
    def strict_decode(cls, reader: StrictReader) -> Articles:
        schema = Schema.strict_decode(reader)
        contract = Contract.strict_decode(reader)
        return cls(schema=schema, contract=contract, contract_sigs=ContentSigs.strict_decode(reader))
