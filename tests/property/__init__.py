# tests/property/__init__.py
"""Property-based tests for consignment-forge.

Property-based testing validates invariants that must hold for ALL inputs,
not just the specific examples we think of.

Test categories:
- test_strict_properties: primitive encodings and canonical forms
- test_stream_properties: framing, truncation and DOM round trips
"""
