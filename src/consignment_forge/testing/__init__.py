# src/consignment_forge/testing/__init__.py
"""Testing utilities: attack generation for validator negative-path tests."""
