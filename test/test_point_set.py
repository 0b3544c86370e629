import numpy as np
import pytest

from kabsch_umeyama.errors import DimensionMismatchError, KabschUmeyamaError
from kabsch_umeyama.point_set import PointSet


class TestConstruction:
    """PointSet validates its shape once, at construction."""

    def test_from_rows(self):
        p = PointSet.from_rows([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])
        assert p.shape == (2, 3)
        assert p.nrows == p.dim == 2
        assert p.ncols == p.n_points == len(p) == 3

    def test_flat_literal_is_row_major(self):
        nested = PointSet([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])
        flat = PointSet.from_flat([1.0, 2.0, 3.0, 4.0, 5.0, 6.0], nrows=2, ncols=3)
        assert flat == nested

    def test_flat_length_mismatch(self):
        with pytest.raises(DimensionMismatchError, match="lengths do not match"):
            PointSet.from_flat([1.0, 2.0, 3.0, 4.0, 5.0], nrows=2, ncols=3)

    def test_from_points_transposes(self):
        p = PointSet.from_points([(1, 4), (2, 5), (3, 6)])
        np.testing.assert_array_equal(p.values, [[1, 2, 3], [4, 5, 6]])
        np.testing.assert_array_equal(p.points(), [[1, 4], [2, 5], [3, 6]])

    def test_rejects_non_matrix(self):
        with pytest.raises(DimensionMismatchError):
            PointSet([1.0, 2.0, 3.0])
        with pytest.raises(DimensionMismatchError):
            PointSet(np.zeros((2, 2, 2)))

    def test_rejects_ragged_rows(self):
        with pytest.raises(ValueError):
            PointSet([[1.0, 2.0], [3.0]])

    def test_rejects_non_finite(self):
        with pytest.raises(KabschUmeyamaError):
            PointSet([[1.0, np.nan], [0.0, 1.0]])
        with pytest.raises(KabschUmeyamaError):
            PointSet([[1.0, np.inf], [0.0, 1.0]])

    def test_values_are_read_only_copy(self):
        source = np.array([[1.0, 2.0], [3.0, 4.0]])
        p = PointSet(source)
        source[0, 0] = 100.0
        assert p[0, 0] == 1.0
        with pytest.raises(ValueError):
            p.values[0, 0] = 5.0

    def test_wrapping_point_set(self):
        p = PointSet([[1.0, 2.0], [3.0, 4.0]])
        assert PointSet(p) == p
        np.testing.assert_array_equal(np.asarray(p), p.values)


class TestStatistics:

    def test_centroid(self):
        p = PointSet([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])
        np.testing.assert_allclose(p.centroid(), [2.0, 5.0])

    def test_centered_has_zero_mean(self, cloud_3d):
        centered = PointSet(cloud_3d).centered()
        np.testing.assert_allclose(centered.mean(axis=1), 0.0, atol=1e-12)

    def test_variance_is_mean_squared_norm(self):
        # centered rows are [-1, 0, 1] twice: squared norms 2, 0, 2
        p = PointSet([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])
        assert p.variance() == pytest.approx(4.0 / 3.0)

    def test_variance_of_coincident_points(self):
        p = PointSet([[2.0, 2.0, 2.0], [-1.0, -1.0, -1.0]])
        assert p.variance() == 0.0


class TestCompatibility:

    def test_same_shape_passes(self):
        PointSet(np.zeros((3, 4))).check_compatible(PointSet(np.ones((3, 4))))

    @pytest.mark.parametrize("shape", [(2, 4), (3, 5)])
    def test_shape_mismatch(self, shape):
        with pytest.raises(DimensionMismatchError):
            PointSet(np.zeros((3, 4))).check_compatible(PointSet(np.zeros(shape)))
