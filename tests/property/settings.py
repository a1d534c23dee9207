# tests/property/settings.py
"""Standardized Hypothesis settings profiles for property tests.

Import these instead of using inline @settings(max_examples=...).

Usage:
    from tests.property.settings import STANDARD_SETTINGS

    @given(value=compact_sizes)
    @STANDARD_SETTINGS
    def test_something(value):
        ...

Tiers:
- STANDARD_SETTINGS: 100 examples - Regular property tests
- SLOW_SETTINGS: 25 examples - File system round trips
- QUICK_SETTINGS: 20 examples - Fast validation tests
"""

from hypothesis import settings

# Standard property tests - good balance of coverage and speed
STANDARD_SETTINGS = settings(max_examples=100)

# File system tests explode whole consignments per example
SLOW_SETTINGS = settings(max_examples=25)

# Quick validation tests - simple input rejection
QUICK_SETTINGS = settings(max_examples=20)
