# tests/property/conftest.py
"""Shared Hypothesis strategies for property-based tests.

Usage:
    from tests.property.conftest import seal_definitions, witness_counts

    @given(counts=witness_counts)
    def test_round_trip(counts: list[int]) -> None:
        ...
"""

from __future__ import annotations

from hypothesis import strategies as st

from consignment_forge.core.records import (
    ExternPrimary,
    FallbackSecondary,
    NoiseSecondary,
    SealDefinition,
    StateCell,
    WoutPrimary,
)
from consignment_forge.core.strict import U16_MAX, U32_MAX, U64_MAX

ids = st.binary(min_size=32, max_size=32)
u16s = st.integers(min_value=0, max_value=U16_MAX)
u32s = st.integers(min_value=0, max_value=U32_MAX)
u64s = st.integers(min_value=0, max_value=U64_MAX)

seal_primaries = st.one_of(
    st.builds(WoutPrimary, vout=u32s),
    st.builds(ExternPrimary, txid=ids, vout=u32s),
)
seal_secondaries = st.one_of(
    st.builds(NoiseSecondary, noise=ids),
    st.builds(FallbackSecondary, txid=ids, vout=u32s),
)
seal_definitions = st.builds(SealDefinition, primary=seal_primaries, secondary=seal_secondaries)
seal_maps = st.dictionaries(u16s, seal_definitions, max_size=5)

state_values = st.lists(u64s, max_size=4).map(tuple)
state_cells = st.builds(
    StateCell,
    data=state_values,
    auth=ids,
    lock=st.none() | st.binary(max_size=40),
)

# Witness counts per operation; kept small because each example hits the file system
witness_counts = st.lists(st.integers(min_value=0, max_value=4), max_size=4)
