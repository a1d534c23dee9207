# src/consignment_forge/contracts/collaborators.py
"""Protocols for the services that consume forged consignments.

Validation and witness resolution live outside this package. These
protocols pin down the shape the attack generator's artifacts are fed
into, so test suites can plug in real implementations or fakes.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Protocol, runtime_checkable

from consignment_forge.contracts.errors import UnknownContractError


class WitnessStatus(StrEnum):
    """Confirmation state of a witness transaction."""

    TENTATIVE = "tentative"
    MINED = "mined"
    ARCHIVED = "archived"
    OFFCHAIN = "offchain"


@runtime_checkable
class WitnessResolver(Protocol):
    """Looks up witness transactions by id."""

    def resolve_tx(self, txid: str) -> bytes:
        """Return the consensus-serialized transaction.

        Raises:
            ResolverError: If the transaction cannot be retrieved
        """
        ...

    def resolve_status(self, txid: str) -> WitnessStatus:
        """Return the confirmation status of a witness.

        Raises:
            ResolverError: If the status cannot be retrieved
        """
        ...


@dataclass(frozen=True, slots=True)
class ValidationReport:
    """Verdict returned by a validator.

    Attributes:
        failures: Codes that make the consignment invalid.
        warnings: Codes worth surfacing that do not invalidate.
        info: Informational codes.
    """

    failures: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()
    info: tuple[str, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.failures

    def has_failure(self, code: str) -> bool:
        return code in self.failures


@runtime_checkable
class ConsignmentValidator(Protocol):
    """Checks a binary consignment against its contract rules."""

    def validate(self, consignment: Path, resolver: WitnessResolver, *, testnet: bool) -> ValidationReport:
        """Validate the consignment at ``consignment``."""
        ...


def ensure_known_contract(contract_id: str, known_ids: Iterable[str]) -> None:
    """Reject a consignment whose contract was never registered.

    Raises:
        UnknownContractError: If ``contract_id`` is not in ``known_ids``
    """
    if contract_id not in set(known_ids):
        raise UnknownContractError(contract_id)
