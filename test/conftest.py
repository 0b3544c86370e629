import os

import numpy as np
import pytest
from scipy.spatial.transform import Rotation

from kabsch_umeyama.config import EstimatorConfig

# =============================================================================
# Config Fixtures
# =============================================================================


@pytest.fixture
def config_path() -> str:
    """Path of the shipped default config file."""
    test_dir = os.path.dirname(__file__)
    pkg_root = os.path.dirname(test_dir)
    path = os.path.join(pkg_root, "config", "kabsch_umeyama.yaml")
    if not os.path.exists(path):
        pytest.skip("config/kabsch_umeyama.yaml not found")
    return path


@pytest.fixture
def default_config() -> EstimatorConfig:
    return EstimatorConfig()


# =============================================================================
# Test Utility Fixtures
# =============================================================================


@pytest.fixture
def rng():
    """Seeded generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def cloud_3d(rng):
    """Generic 3 x 20 point cloud (full-rank covariance)."""
    return rng.normal(size=(3, 20)) * np.array([[3.0], [2.0], [1.0]]) + np.array([[1.0], [-2.0], [0.5]])


@pytest.fixture
def cloud_2d(rng):
    """Generic 2 x 12 point cloud (full-rank covariance)."""
    return rng.normal(size=(2, 12)) * np.array([[2.0], [1.0]]) + np.array([[4.0], [-1.0]])


@pytest.fixture
def rotation_3d():
    """Proper 3D rotation, roughly 70 degrees about a skewed axis."""
    return Rotation.from_rotvec([0.4, -0.9, 0.6]).as_matrix()


@pytest.fixture
def rotation_2d():
    theta = 0.7
    return np.array([
        [np.cos(theta), -np.sin(theta)],
        [np.sin(theta), np.cos(theta)],
    ])
