import pytest
from pydantic import ValidationError

from kabsch_umeyama import constants
from kabsch_umeyama.config import EstimatorConfig
from kabsch_umeyama.svd import JacobiSVD, NumpySVD, ScipySVD


def test_defaults_come_from_constants(default_config):
    assert default_config.svd_backend == constants.SVD_BACKEND_DEFAULT
    assert default_config.rank_tolerance == constants.RANK_TOLERANCE
    assert default_config.variance_tolerance == constants.VARIANCE_TOLERANCE
    assert default_config.allow_underdetermined is False


def test_shipped_yaml_matches_defaults(config_path):
    config = EstimatorConfig.from_yaml(config_path)
    assert config == EstimatorConfig()


def test_from_yaml_without_wrapper(tmp_path):
    path = tmp_path / "flat.yaml"
    path.write_text("svd_backend: jacobi\njacobi_max_sweeps: 12\n", encoding="utf-8")
    config = EstimatorConfig.from_yaml(path)
    assert config.svd_backend == "jacobi"
    assert config.jacobi_max_sweeps == 12


def test_from_yaml_empty_file(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert EstimatorConfig.from_yaml(path) == EstimatorConfig()


def test_from_dict_coerces_types():
    config = EstimatorConfig.from_dict({"rank_tolerance": "1e-6", "allow_underdetermined": 1})
    assert config.rank_tolerance == pytest.approx(1e-6)
    assert config.allow_underdetermined is True


def test_unknown_key_rejected():
    with pytest.raises(ValidationError, match="svd"):
        EstimatorConfig.from_dict({"svd": "numpy"})


@pytest.mark.parametrize(
    "overrides",
    [
        {"svd_backend": "eigen"},
        {"scipy_lapack_driver": "gesvdx"},
        {"rank_tolerance": -1.0},
        {"rank_tolerance": 1.0},
        {"variance_tolerance": -1e-3},
        {"jacobi_max_sweeps": 0},
        {"jacobi_tolerance": 0.0},
    ],
)
def test_construction_rejects(overrides):
    with pytest.raises(ValidationError):
        EstimatorConfig(**overrides)


def test_assignment_is_validated(default_config):
    with pytest.raises(ValidationError):
        default_config.rank_tolerance = 5.0
    default_config.svd_backend = "jacobi"
    assert isinstance(default_config.make_solver(), JacobiSVD)


def test_make_solver():
    assert isinstance(EstimatorConfig().make_solver(), NumpySVD)

    scipy_solver = EstimatorConfig(svd_backend="scipy", scipy_lapack_driver="gesvd").make_solver()
    assert isinstance(scipy_solver, ScipySVD)
    assert scipy_solver.lapack_driver == "gesvd"

    jacobi = EstimatorConfig(svd_backend="jacobi", jacobi_max_sweeps=7).make_solver()
    assert isinstance(jacobi, JacobiSVD)
    assert jacobi.max_sweeps == 7


def test_from_yaml_quoted_boolean(tmp_path):
    path = tmp_path / "quoted.yaml"
    path.write_text('kabsch_umeyama:\n  allow_underdetermined: "false"\n', encoding="utf-8")
    assert EstimatorConfig.from_yaml(path).allow_underdetermined is False

    path.write_text('kabsch_umeyama:\n  allow_underdetermined: "true"\n', encoding="utf-8")
    assert EstimatorConfig.from_yaml(path).allow_underdetermined is True


def test_from_yaml_null_value(tmp_path):
    path = tmp_path / "null.yaml"
    path.write_text("kabsch_umeyama:\n  jacobi_max_sweeps:\n", encoding="utf-8")
    with pytest.raises(ValidationError):
        EstimatorConfig.from_yaml(path)


def test_from_yaml_non_mapping(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- numpy\n", encoding="utf-8")
    with pytest.raises(ValueError, match="Expected a mapping"):
        EstimatorConfig.from_yaml(path)
