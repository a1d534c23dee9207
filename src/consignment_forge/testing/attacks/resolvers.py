# src/consignment_forge/testing/attacks/resolvers.py
"""Witness resolvers used by resolver-level attacks."""

from __future__ import annotations

from consignment_forge.contracts.collaborators import WitnessStatus
from consignment_forge.contracts.errors import ResolverError


class UnreachableResolver:
    """Resolver whose backend is never reachable.

    Substituted for the real resolver in the ``resolver_error`` attack: the
    consignment is untouched, and validation must fail because no witness
    can be looked up.
    """

    def __init__(self, reason: str = "resolver backend unreachable") -> None:
        self.reason = reason
        self.calls: list[str] = []

    def resolve_tx(self, txid: str) -> bytes:
        self.calls.append(txid)
        raise ResolverError(txid, self.reason)

    def resolve_status(self, txid: str) -> WitnessStatus:
        self.calls.append(txid)
        raise ResolverError(txid, self.reason)
