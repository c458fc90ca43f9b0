"""Shared pytest setup for the flowkit suite.

The sample graphs in `tests.algorithms.sample_graphs` are registered as a
plugin rather than imported, so pytest rewrites the asserts inside them and
every test directory can request those fixtures by name.
"""

from __future__ import annotations

from dataclasses import asdict

import pytest

from flowkit.config import FLOW_CONFIG

pytest_plugins: list[str] = ["tests.algorithms.sample_graphs"]


@pytest.fixture(autouse=True)
def flow_config():
    """Undo changes a test makes to the global ``FLOW_CONFIG``."""
    saved = asdict(FLOW_CONFIG)
    yield FLOW_CONFIG
    for name, value in saved.items():
        setattr(FLOW_CONFIG, name, value)
