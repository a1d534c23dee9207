# tests/fixtures/__init__.py
"""Shared pytest fixtures for consignment-forge tests.

Available fixtures:
- consignment: in-memory consignment built by build_consignment()
- consignment_file: the same consignment written to tmp_path
"""

from tests.fixtures.consignments import build_consignment, consignment, consignment_file, write_consignment

__all__ = [
    "build_consignment",
    "consignment",
    "consignment_file",
    "write_consignment",
]
