"""Pytest configuration and shared fixtures."""

import random
import sys
from pathlib import Path

import numpy as np
import pytest

# Make the package importable without installing it
root_dir = Path(__file__).parent.parent
sys.path.insert(0, str(root_dir / "src"))

from neater.genotype   import InnovationTracker
from neater.run.config import Config


@pytest.fixture(autouse=True)
def set_random_seeds():
    """Set random seeds for reproducibility."""
    random.seed(42)
    np.random.seed(42)
    yield


@pytest.fixture
def config():
    """Default configuration (fresh for each test, since populations freeze it)."""
    return Config()


@pytest.fixture
def tracker():
    """A fresh innovation tracker."""
    return InnovationTracker()
