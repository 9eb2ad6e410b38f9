# src/gaussrff/pipeline/preprocessor.py
from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

import numpy as np

from gaussrff.data.features import DenseFeatures, FeatureClass, FeatureType
from gaussrff.preproc.errors import InvalidArgumentError

logger = logging.getLogger(__name__)


@runtime_checkable
class Preprocessor(Protocol):
    """What the pipeline needs from a feature preprocessor."""

    feature_type: FeatureType
    feature_class: FeatureClass

    def init(self, features: DenseFeatures) -> bool: ...

    def apply_to_feature_matrix(self, features: DenseFeatures) -> np.ndarray: ...

    def apply_to_feature_vector(self, x) -> np.ndarray: ...

    def cleanup(self) -> None: ...


def check_accepts(pre: Preprocessor, features: DenseFeatures) -> None:
    if features.feature_type != pre.feature_type or features.feature_class != pre.feature_class:
        raise InvalidArgumentError(
            f"{type(pre).__name__} accepts {pre.feature_type.value}/{pre.feature_class.value} features, "
            f"got {features.feature_type.value}/{features.feature_class.value}."
        )


def preprocess(features: DenseFeatures, pre: Preprocessor) -> bool:
    """
    Run the full lifecycle on `features` (in place):
      check -> init -> apply_to_feature_matrix -> cleanup

    Returns the flag from init(): True if new random state was generated.
    """
    check_accepts(pre, features)
    n_in = features.get_num_features()
    generated = pre.init(features)
    try:
        pre.apply_to_feature_matrix(features)
    finally:
        pre.cleanup()
    logger.info(
        "%s: %d x %d -> %d x %d (%s)",
        type(pre).__name__,
        n_in,
        features.get_num_vectors(),
        features.get_num_features(),
        features.get_num_vectors(),
        "generated" if generated else "kept",
    )
    return generated
