# src/gaussrff/pipeline/loader.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np
import torch
from torch.utils.data import DataLoader

from gaussrff.data.features import DenseFeatures
from gaussrff.preproc.errors import NotReadyError
from gaussrff.preproc.rff import RandomFourierGaussTransform

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoaderConfig:
    # If set, only transform up to this many examples
    max_examples: Optional[int] = None


def _batch_inputs(batch) -> torch.Tensor:
    # Support x, (x, ...) and {"x": ...}
    if isinstance(batch, torch.Tensor):
        return batch
    if isinstance(batch, (tuple, list)):
        return batch[0]
    return batch["x"]


def transform_loader(
    rff: RandomFourierGaussTransform,
    loader: DataLoader,
    *,
    cfg: LoaderConfig = LoaderConfig(),
) -> DenseFeatures:
    """
    Stream a DataLoader through a ready transform.

    Each batch holds sample rows (n, d) (or (n,) for scalar inputs).
    Returns features of shape (output_dim, N).

    The transform must already hold coefficients (from ensure_coefficients()
    or set_coefficients()); nothing is generated here, so the output stays
    comparable to whatever dataset those coefficients came from.
    """
    if not rff.is_ready():
        raise NotReadyError("transform_loader needs a ready transform.")

    z_chunks: list[np.ndarray] = []
    seen = 0
    with torch.no_grad():
        for batch in loader:
            x = _batch_inputs(batch)
            x_np = x.detach().cpu().numpy().astype(np.float64, copy=False)
            if x_np.ndim == 1:
                x_np = x_np.reshape(-1, 1)
            # (n, d, ...) -> (n, d)
            x_np = x_np.reshape(x_np.shape[0], -1)

            if cfg.max_examples is not None:
                remaining = cfg.max_examples - seen
                if remaining <= 0:
                    break
                if x_np.shape[0] > remaining:
                    x_np = x_np[:remaining]

            z_chunks.append(rff.transform_matrix(x_np.T))
            seen += x_np.shape[0]

            if cfg.max_examples is not None and seen >= cfg.max_examples:
                break

    logger.debug("transformed %d examples in %d batches", seen, len(z_chunks))
    if not z_chunks:
        return DenseFeatures(np.zeros((rff.get_output_dimension(), 0), dtype=np.float64))
    return DenseFeatures(np.concatenate(z_chunks, axis=1))
