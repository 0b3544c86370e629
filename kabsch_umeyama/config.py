"""
Configuration for the Kabsch-Umeyama estimator.

Parameters live in one Pydantic model whose defaults come from
``kabsch_umeyama.constants``. Values are validated when the model is built
(and on assignment), so an invalid config never reaches the estimator.

Usage:
    from kabsch_umeyama.config import EstimatorConfig

    config = EstimatorConfig.from_yaml("config/kabsch_umeyama.yaml")
    solver = config.make_solver()
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Literal, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field

from kabsch_umeyama import constants
from kabsch_umeyama.svd import SVDSolver, get_solver

# Optional top-level key wrapping the parameters in a YAML file
YAML_SECTION = "kabsch_umeyama"


class EstimatorConfig(BaseModel):
    """Estimator parameters."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    svd_backend: Literal["numpy", "scipy", "jacobi"] = constants.SVD_BACKEND_DEFAULT
    scipy_lapack_driver: Literal["gesdd", "gesvd"] = constants.SCIPY_LAPACK_DRIVER_DEFAULT

    # Degeneracy thresholds (relative)
    rank_tolerance: float = Field(default=constants.RANK_TOLERANCE, ge=0.0, lt=1.0)
    variance_tolerance: float = Field(default=constants.VARIANCE_TOLERANCE, ge=0.0)

    # Accept N < D instead of rejecting it
    allow_underdetermined: bool = False

    # JacobiSVD only
    jacobi_max_sweeps: int = Field(default=constants.JACOBI_MAX_SWEEPS, ge=1)
    jacobi_tolerance: float = Field(default=constants.JACOBI_TOLERANCE, gt=0.0)

    def make_solver(self) -> SVDSolver:
        """Instantiate the configured SVD backend."""
        if self.svd_backend == "scipy":
            return get_solver("scipy", lapack_driver=self.scipy_lapack_driver)
        if self.svd_backend == "jacobi":
            return get_solver(
                "jacobi",
                max_sweeps=self.jacobi_max_sweeps,
                tolerance=self.jacobi_tolerance,
            )
        return get_solver(self.svd_backend)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EstimatorConfig":
        """
        Create a validated config from a dict.

        Raises:
            ValidationError: unknown keys, wrong types or out-of-range values
        """
        return cls(**data)

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "EstimatorConfig":
        """Load a config from a YAML file, handling the ``kabsch_umeyama:`` wrapper."""
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Expected a mapping in {path}, got {type(data).__name__}")
        if YAML_SECTION in data:
            data = data[YAML_SECTION] or {}
        return cls.from_dict(data)
