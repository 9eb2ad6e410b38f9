# src/gaussrff/preproc/rff.py
from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from typing import NamedTuple, Optional, Union

import numpy as np

from gaussrff.data.features import DenseFeatures, FeatureClass, FeatureType
from gaussrff.preproc.errors import (
    DimensionMismatchError,
    InvalidArgumentError,
    InvalidStateError,
    NotConfiguredError,
    NotReadyError,
)

logger = logging.getLogger(__name__)

RandomState = Optional[Union[int, np.random.Generator]]


def _rng(random_state: RandomState) -> np.random.Generator:
    if random_state is None:
        return np.random.default_rng()
    if isinstance(random_state, np.random.Generator):
        return random_state
    return np.random.default_rng(int(random_state))


def _positive_int(value, name: str) -> int:
    msg = f"{name} must be a positive integer. Got {value!r}."
    if isinstance(value, (bool, np.bool_)):
        raise InvalidArgumentError(msg)
    try:
        as_int = int(value)
    except (TypeError, ValueError, OverflowError) as exc:
        # None, strings, nan, inf
        raise InvalidArgumentError(msg) from exc
    if as_int != value or as_int <= 0:
        raise InvalidArgumentError(msg)
    return as_int


@dataclass(frozen=True)
class RFFConfig:
    kernel_width: float = 1.0
    output_dim: int = 256
    seed: Optional[int] = None
    # fit a StandardScaler on the reference split before projecting
    standardize: bool = False


class CoefficientSet(NamedTuple):
    """
    Random coefficients shared by compatible transforms.

    Field order matches set_coefficients(), so
      other.set_coefficients(*rff.get_coefficients())
    makes `other` produce identical features.
    """
    additive: np.ndarray        # (output_dim,)
    multiplicative: np.ndarray  # (output_dim, input_dim)
    output_dim: int
    input_dim: int


class RandomFourierGaussTransform:
    """
    Random Fourier Features for the Gaussian kernel (Rahimi & Recht, 2007).

    Approximates:
      k(x, y) = exp(-||x - y||^2 / (2 * kernel_width^2))

    Feature map:
      z(x) = sqrt(2/D) * cos(W x + b)
    with:
      b ~ Uniform(0, 2pi)
      W_ij ~ N(0, 1/kernel_width^2)

    Approximation quality depends on D (output_dim), not on the number of
    vectors. Features from two instances can only be compared when both hold
    the same coefficients, either because they were generated by the same
    instance or because one received them via set_coefficients().

    Two ways to get ready:
      (1) reuse: set_coefficients(*other.get_coefficients())
      (2) fresh: set_kernel_width, set_output_dimension, then init(features)
          or set_input_dimension + ensure_coefficients()
    """

    feature_type = FeatureType.DENSE
    feature_class = FeatureClass.REAL

    def __init__(
        self,
        kernel_width: Optional[float] = None,
        input_dim: Optional[int] = None,
        output_dim: Optional[int] = None,
        random_state: RandomState = None,
    ) -> None:
        self._kernel_width: Optional[float] = None
        self._input_dim: Optional[int] = None
        self._output_dim: Optional[int] = None
        # input dimension baked into the active multiplicative table
        self._cur_input_dim: Optional[int] = None
        self._additive: Optional[np.ndarray] = None
        self._multiplicative: Optional[np.ndarray] = None
        self._generator = _rng(random_state)

        if kernel_width is not None:
            self.set_kernel_width(kernel_width)
        if input_dim is not None:
            self.set_input_dimension(input_dim)
        if output_dim is not None:
            self.set_output_dimension(output_dim)

    @classmethod
    def from_config(cls, cfg: RFFConfig, input_dim: Optional[int] = None) -> "RandomFourierGaussTransform":
        return cls(
            kernel_width=cfg.kernel_width,
            input_dim=input_dim,
            output_dim=cfg.output_dim,
            random_state=cfg.seed,
        )

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(kernel_width={self._kernel_width}, "
            f"input_dim={self._input_dim}, output_dim={self._output_dim}, "
            f"ready={self.is_ready()})"
        )

    # ---- configuration ----

    def set_kernel_width(self, width: float) -> None:
        try:
            width = float(width)
        except (TypeError, ValueError) as exc:
            raise InvalidArgumentError(f"kernel width must be a number. Got {width!r}.") from exc
        if not 0 < width < np.inf:
            raise InvalidArgumentError(f"kernel width must be > 0 and finite. Got {width}.")
        self._kernel_width = width

    def get_kernel_width(self) -> float:
        if self._kernel_width is None:
            raise NotConfiguredError("kernel width has not been set.")
        return self._kernel_width

    def set_input_dimension(self, dim: int) -> None:
        self._input_dim = _positive_int(dim, "input dimension")

    def get_input_dimension(self) -> Optional[int]:
        return self._input_dim

    def set_output_dimension(self, dim: int) -> None:
        self._output_dim = _positive_int(dim, "output dimension")

    def get_output_dimension(self) -> Optional[int]:
        return self._output_dim

    # ---- coefficients ----

    def is_ready(self) -> bool:
        if self._multiplicative is None or self._input_dim is None:
            return False
        return (
            self._cur_input_dim == self._input_dim
            and self._multiplicative.shape[0] == self._output_dim
        )

    def ensure_coefficients(self) -> bool:
        """
        Draw new coefficients unless the current ones match the configured
        dimensions.

        Returns True if new coefficients were generated, False if the
        existing ones (e.g. from set_coefficients) were kept.
        """
        if self.is_ready():
            logger.debug("keeping existing coefficients (%d x %d)", self._output_dim, self._input_dim)
            return False

        if self._output_dim is None or self._input_dim is None:
            raise InvalidStateError(
                f"cannot generate coefficients with output_dim={self._output_dim}, "
                f"input_dim={self._input_dim}; both must be > 0."
            )
        sigma = self.get_kernel_width()

        D, d = self._output_dim, self._input_dim
        # Fourier transform of a Gaussian with width sigma has width 1/sigma
        self._multiplicative = self._generator.normal(0.0, 1.0 / sigma, size=(D, d))
        self._additive = self._generator.uniform(0.0, 2.0 * np.pi, size=(D,))
        self._cur_input_dim = d
        logger.debug("generated coefficients (%d x %d), kernel_width=%g", D, d, sigma)
        return True

    def get_coefficients(self) -> CoefficientSet:
        if not self.is_ready():
            raise NotReadyError("no coefficients consistent with the configured dimensions.")
        return CoefficientSet(
            additive=self._additive.copy(),
            multiplicative=self._multiplicative.copy(),
            output_dim=int(self._output_dim),
            input_dim=int(self._cur_input_dim),
        )

    def set_coefficients(self, additive, multiplicative, output_dim: int, input_dim: int) -> None:
        output_dim = _positive_int(output_dim, "output dimension")
        input_dim = _positive_int(input_dim, "input dimension")

        try:
            b = np.array(additive, dtype=np.float64, copy=True)
            W = np.array(multiplicative, dtype=np.float64, copy=True)
        except (TypeError, ValueError) as exc:
            # ragged rows or non-numeric entries
            raise InvalidArgumentError("coefficient tables must be rectangular numeric arrays.") from exc
        if b.shape != (output_dim,):
            raise InvalidArgumentError(
                f"additive table must have shape ({output_dim},). Got {b.shape}."
            )
        if W.ndim == 1 and W.size == output_dim * input_dim:
            # flat row-major buffer
            W = W.reshape(output_dim, input_dim)
        if W.shape != (output_dim, input_dim):
            raise InvalidArgumentError(
                f"multiplicative table must have shape ({output_dim}, {input_dim}). Got {W.shape}."
            )

        self._additive = b
        self._multiplicative = W
        self._output_dim = output_dim
        self._input_dim = input_dim
        self._cur_input_dim = input_dim
        logger.debug("coefficients set (%d x %d)", output_dim, input_dim)

    # ---- transforms ----

    def _require_ready(self) -> None:
        if not self.is_ready():
            raise NotReadyError(
                "coefficients missing or stale; call ensure_coefficients() or set_coefficients() first."
            )

    def transform_vector(self, x) -> np.ndarray:
        """
        x: shape (input_dim,) -> returns z: shape (output_dim,)
        """
        if self._input_dim is None:
            self._require_ready()
        x = np.asarray(x, dtype=np.float64)
        if x.ndim != 1 or x.shape[0] != self._input_dim:
            raise DimensionMismatchError(
                f"vector has shape {x.shape}, expected ({self._input_dim},)."
            )
        self._require_ready()

        projection = self._multiplicative @ x
        projection += self._additive

        z = np.cos(projection)
        z *= np.sqrt(2.0 / self._output_dim)
        return z

    def transform_matrix(self, X) -> np.ndarray:
        """
        X: shape (input_dim, n), one vector per column -> returns Z: shape (output_dim, n)
        """
        if self._input_dim is None:
            self._require_ready()
        X = np.asarray(X, dtype=np.float64)
        if X.ndim != 2 or X.shape[0] != self._input_dim:
            raise DimensionMismatchError(
                f"matrix has shape {X.shape}, expected ({self._input_dim}, n)."
            )
        self._require_ready()

        # (D, d) @ (d, n) -> (D, n); columns are independent
        projection = self._multiplicative @ X
        projection += self._additive[:, None]

        Z = np.cos(projection)
        Z *= np.sqrt(2.0 / self._output_dim)
        return Z

    # ---- preprocessor lifecycle ----

    def init(self, features: DenseFeatures) -> bool:
        """
        Take the input dimension from `features` and make sure coefficients
        exist for it.

        Returns False when previously set coefficients are kept, i.e. output
        from this call stays comparable to the earlier dataset.
        """
        self.set_input_dimension(features.get_num_features())
        return self.ensure_coefficients()

    def apply_to_feature_matrix(self, features: DenseFeatures) -> np.ndarray:
        """
        Transform all vectors of `features` and replace its matrix with the result.

        Needs a ready transform; init(features) configures one from the data.
        """
        Z = self.transform_matrix(features.get_feature_matrix())
        features.set_feature_matrix(Z)
        return features.get_feature_matrix()

    def apply_to_feature_vector(self, x) -> np.ndarray:
        return self.transform_vector(x)

    def cleanup(self) -> None:
        pass

    # ---- copying ----

    def clone(self) -> "RandomFourierGaussTransform":
        other = type(self).__new__(type(self))
        other._kernel_width = self._kernel_width
        other._input_dim = self._input_dim
        other._output_dim = self._output_dim
        other._cur_input_dim = self._cur_input_dim
        other._additive = None if self._additive is None else self._additive.copy()
        other._multiplicative = None if self._multiplicative is None else self._multiplicative.copy()
        other._generator = copy.deepcopy(self._generator)
        return other

    def __copy__(self) -> "RandomFourierGaussTransform":
        return self.clone()

    def __deepcopy__(self, memo) -> "RandomFourierGaussTransform":
        return self.clone()
