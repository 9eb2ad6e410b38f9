import numpy as np
import pandas as pd
import pytest

from gaussrff.data.features import DenseFeatures, FeatureClass, FeatureType
from gaussrff.preproc.errors import InvalidArgumentError
from gaussrff.preproc.kernel import rff_transform


def test_from_samples_is_column_major():
    X = np.arange(6, dtype=float).reshape(3, 2)
    f = DenseFeatures.from_samples(X)
    assert f.get_num_features() == 2
    assert f.get_num_vectors() == 3
    np.testing.assert_array_equal(f.get_feature_vector(1), [2.0, 3.0])
    np.testing.assert_array_equal(f.to_samples(), X)
    assert f.feature_type is FeatureType.DENSE
    assert f.feature_class is FeatureClass.REAL


def test_from_samples_1d():
    f = DenseFeatures.from_samples([1.0, 2.0, 3.0])
    assert f.get_feature_matrix().shape == (1, 3)


def test_matrix_is_copied():
    M = np.zeros((2, 2))
    f = DenseFeatures(M)
    M[0, 0] = 1.0
    assert f.get_feature_matrix()[0, 0] == 0.0

    v = f.get_feature_vector(0)
    v[:] = 9.0
    assert f.get_feature_matrix()[0, 0] == 0.0


def test_feature_vector_out_of_range():
    f = DenseFeatures(np.zeros((2, 3)))
    with pytest.raises(IndexError):
        f.get_feature_vector(3)
    with pytest.raises(IndexError):
        f.get_feature_vector(-1)


def test_rejects_non_2d():
    with pytest.raises(InvalidArgumentError):
        DenseFeatures(np.zeros(3))
    f = DenseFeatures(np.zeros((2, 2)))
    with pytest.raises(InvalidArgumentError):
        f.set_feature_matrix(np.zeros((2, 2, 2)))


def test_from_frame():
    df = pd.DataFrame({"a": [1.0, 2.0], "b": [3, 4], "name": ["x", "y"]})
    f = DenseFeatures.from_frame(df, columns=["a", "b"])
    np.testing.assert_array_equal(f.get_feature_matrix(), [[1.0, 2.0], [3.0, 4.0]])

    with pytest.raises(InvalidArgumentError):
        DenseFeatures.from_frame(df)


def test_rff_transform_rows():
    X = np.random.default_rng(0).normal(size=(6, 3))
    Z = rff_transform(X, D=40, kernel_width=1.0, seed=5)
    assert Z.shape == (6, 40)
    np.testing.assert_array_equal(Z, rff_transform(X, D=40, kernel_width=1.0, seed=5))
    assert not np.array_equal(Z, rff_transform(X, D=40, kernel_width=1.0, seed=6))

    z1 = rff_transform(np.array([0.5, 1.5]), D=10, kernel_width=2.0, seed=0)
    assert z1.shape == (2, 10)


def test_rff_transform_rejects_3d():
    with pytest.raises(InvalidArgumentError):
        rff_transform(np.zeros((2, 2, 2)), D=4, kernel_width=1.0, seed=0)


def test_equality_is_identity():
    a = DenseFeatures(np.zeros((2, 2)))
    b = DenseFeatures(np.zeros((2, 2)))
    assert a == a
    assert a != b
