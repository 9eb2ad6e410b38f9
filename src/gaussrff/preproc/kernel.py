# src/gaussrff/preproc/kernel.py
from __future__ import annotations

from typing import Optional

import numpy as np

from gaussrff.preproc.errors import InvalidArgumentError
from gaussrff.preproc.rff import RandomFourierGaussTransform


def _make_rff(d_in: int, D: int, kernel_width: float, seed: Optional[int]) -> RandomFourierGaussTransform:
    rff = RandomFourierGaussTransform(
        kernel_width=kernel_width,
        input_dim=d_in,
        output_dim=D,
        random_state=seed,
    )
    rff.ensure_coefficients()
    return rff


def rff_transform(X: np.ndarray, *, D: int, kernel_width: float, seed: Optional[int] = None) -> np.ndarray:
    """
    Random Fourier features for sample rows.
    X: (n, d) or (n,) -> returns Z: (n, D) float64

    The same seed and input dimension always give the same coefficients, so
    two calls with equal (D, kernel_width, seed) produce comparable features.
    """
    X = np.asarray(X, dtype=np.float64)
    if X.ndim == 1:
        X = X.reshape(-1, 1)
    if X.ndim != 2:
        raise InvalidArgumentError(f"X must be 1D or 2D. Got shape {X.shape}.")

    rff = _make_rff(X.shape[1], D, kernel_width, seed)
    # (D, n) -> (n, D)
    return rff.transform_matrix(X.T).T
