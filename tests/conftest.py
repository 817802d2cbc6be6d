"""
Shared pytest fixtures for the Lumen test suite.

- **Fixtures**: sample grids, a seeded RNG and a strict-IEEE toggle that
  always restores the default mode.

Notes
-----
Install the project in editable mode (`pip install -e .[test]`) or rely on
the `pythonpath` setting in pyproject.toml so the flat modules resolve.
"""

import numpy as np
import pytest

import lumen_kernels


@pytest.fixture
def unit_samples():
    """1001 evenly spaced points on [0, 1]."""
    return np.linspace(0.0, 1.0, 1001)


@pytest.fixture
def rng():
    """Seeded generator so random batches are reproducible."""
    return np.random.default_rng(7)


@pytest.fixture
def strict_ieee():
    """Enable strict IEEE array kernels for the duration of a test."""
    lumen_kernels.set_strict_ieee(True)
    yield
    lumen_kernels.set_strict_ieee(False)
