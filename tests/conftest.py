# tests/conftest.py
"""Shared test fixtures and configuration.

Consignment Fixtures:
- consignment: In-memory consignment with 3 operations, 1 witness each
- consignment_file: The same consignment written under tmp_path
- forge_settings: ForgeSettings rooted in tmp_path

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/property/
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from pathlib import Path

import pytest
from hypothesis import Phase, Verbosity, settings

from consignment_forge.core.config import ForgeSettings
from tests.fixtures.consignments import consignment, consignment_file  # noqa: F401

# =============================================================================
# Hypothesis Configuration
# =============================================================================

# CI profile: Fast tests for continuous integration
settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,  # Disable deadline for CI (timing varies)
)

# Nightly profile: Thorough testing for scheduled runs
settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

# Debug profile: Minimal examples with verbose output for debugging
settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

# Load profile from environment, default to "ci"
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))


# =============================================================================
# Settings
# =============================================================================


@pytest.fixture
def forge_settings(tmp_path: Path) -> ForgeSettings:
    """Settings whose scratch and output directories live under tmp_path."""
    return ForgeSettings(scratch_root=tmp_path / "scratch", output_dir=tmp_path / "out")


# =============================================================================
# Logging
# =============================================================================


@pytest.fixture(autouse=True)
def _restore_root_logger() -> Iterator[None]:
    """Undo configure_logging() calls; their handlers point at per-test capture streams."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
