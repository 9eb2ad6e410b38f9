# src/gaussrff/pipeline/splits.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from sklearn.preprocessing import StandardScaler

from gaussrff.data.features import DenseFeatures
from gaussrff.pipeline.preprocessor import preprocess
from gaussrff.preproc.errors import DimensionMismatchError
from gaussrff.preproc.rff import CoefficientSet, RandomFourierGaussTransform, RFFConfig

logger = logging.getLogger(__name__)


@dataclass
class CompatibleSplits:
    train: DenseFeatures
    test: DenseFeatures
    coefficients: CoefficientSet
    scaler: Optional[StandardScaler] = None


def _standardize(train: DenseFeatures, test: DenseFeatures) -> StandardScaler:
    # fit on train only; features are (d, n) so scale the sample rows
    scaler = StandardScaler()
    train.set_feature_matrix(scaler.fit_transform(train.to_samples()).T)
    test.set_feature_matrix(scaler.transform(test.to_samples()).T)
    return scaler


def transform_splits(
    train: DenseFeatures,
    test: DenseFeatures,
    cfg: RFFConfig = RFFConfig(),
) -> CompatibleSplits:
    """
    Transform a train/test pair into one random feature space (in place).

    Coefficients are generated on `train` and handed verbatim to a second
    transform for `test`, so dot products across the splits approximate the
    Gaussian kernel.
    """
    if train.get_num_features() != test.get_num_features():
        raise DimensionMismatchError(
            f"train has {train.get_num_features()} features, test has {test.get_num_features()}."
        )
    scaler = _standardize(train, test) if cfg.standardize else None

    train_rff = RandomFourierGaussTransform.from_config(cfg)
    preprocess(train, train_rff)
    coefficients = train_rff.get_coefficients()

    test_rff = RandomFourierGaussTransform(random_state=cfg.seed)
    test_rff.set_coefficients(*coefficients)
    preprocess(test, test_rff)

    logger.info(
        "transformed splits: train=%d test=%d vectors into %d features",
        train.get_num_vectors(),
        test.get_num_vectors(),
        coefficients.output_dim,
    )
    return CompatibleSplits(train=train, test=test, coefficients=coefficients, scaler=scaler)
