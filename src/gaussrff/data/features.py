# src/gaussrff/data/features.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence

import numpy as np
import pandas as pd

from gaussrff.preproc.errors import InvalidArgumentError


class FeatureType(Enum):
    DENSE = "dense"
    SPARSE = "sparse"
    STRING = "string"


class FeatureClass(Enum):
    REAL = "real"
    INTEGER = "integer"
    CATEGORICAL = "categorical"


def _check_matrix(M) -> np.ndarray:
    M = np.array(M, dtype=np.float64, copy=True)
    if M.ndim != 2:
        raise InvalidArgumentError(f"feature matrix must be 2D. Got shape {M.shape}.")
    return M


@dataclass(eq=False)
class DenseFeatures:
    """
    Dense real-valued feature matrix, one column per vector.

    matrix: shape (num_features, num_vectors)
    """
    matrix: np.ndarray
    feature_type: FeatureType = field(default=FeatureType.DENSE, init=False)
    feature_class: FeatureClass = field(default=FeatureClass.REAL, init=False)

    def __post_init__(self) -> None:
        self.matrix = _check_matrix(self.matrix)

    @classmethod
    def from_samples(cls, X) -> "DenseFeatures":
        """
        X: (n, d) sample rows, or (n,) scalars -> features of shape (d, n)
        """
        X = np.asarray(X, dtype=np.float64)
        if X.ndim == 1:
            X = X.reshape(-1, 1)
        if X.ndim != 2:
            raise InvalidArgumentError(f"X must be 1D or 2D. Got shape {X.shape}.")
        return cls(X.T)

    @classmethod
    def from_frame(cls, df: pd.DataFrame, columns: Optional[Sequence[str]] = None) -> "DenseFeatures":
        if columns is not None:
            df = df.loc[:, list(columns)]
        try:
            X = df.to_numpy(dtype=np.float64)
        except (TypeError, ValueError) as exc:
            raise InvalidArgumentError(f"non-numeric columns in frame: {list(df.columns)}") from exc
        return cls.from_samples(X)

    def get_num_features(self) -> int:
        return int(self.matrix.shape[0])

    def get_num_vectors(self) -> int:
        return int(self.matrix.shape[1])

    def get_feature_vector(self, idx: int) -> np.ndarray:
        n = self.get_num_vectors()
        if not 0 <= idx < n:
            raise IndexError(f"vector index {idx} out of range for {n} vectors")
        return self.matrix[:, idx].copy()

    def get_feature_matrix(self) -> np.ndarray:
        return self.matrix

    def set_feature_matrix(self, M) -> None:
        self.matrix = _check_matrix(M)

    def to_samples(self) -> np.ndarray:
        # (d, n) -> (n, d)
        return self.matrix.T.copy()
