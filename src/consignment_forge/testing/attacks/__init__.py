"""Attack generation: typed DOM edits re-encoded into attacked consignments.

- create_attack_consignment: decode, edit, re-encode in one call
- Attack catalog: register_attack / get_attack / list_attacks
- UnreachableResolver: resolver substituted for the resolver_error attack
"""

from consignment_forge.testing.attacks.catalog import (
    AttackSpec,
    get_attack,
    list_attacks,
    mutate_id,
    register_attack,
    register_verbatim_attack,
)
from consignment_forge.testing.attacks.generator import create_attack_consignment
from consignment_forge.testing.attacks.resolvers import UnreachableResolver

__all__ = [
    "AttackSpec",
    "UnreachableResolver",
    "create_attack_consignment",
    "get_attack",
    "list_attacks",
    "mutate_id",
    "register_attack",
    "register_verbatim_attack",
]
