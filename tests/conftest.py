import os
import sys

import numpy as np
import pytest

# Make 'src' importable without installing the package
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, os.path.join(project_root, 'src'))


@pytest.fixture
def rng():
    """Seeded random generator so failures are reproducible."""
    return np.random.default_rng(20220213)


@pytest.fixture
def unit_quaternions(rng):
    """Five random unit quaternions as (4, 5) array."""
    q = rng.normal(size=(4, 5))
    return q / np.linalg.norm(q, axis=0)
