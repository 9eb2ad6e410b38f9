# src/gaussrff/preproc/errors.py
from __future__ import annotations


class RFFError(Exception):
    """Base class for random Fourier feature preprocessing errors."""


class InvalidArgumentError(RFFError, ValueError):
    """Bad scalar or shape input (non-positive width/dimension, ragged tables)."""


class DimensionMismatchError(RFFError, ValueError):
    """Caller-supplied vector/matrix disagrees with the configured input dimension."""


class NotConfiguredError(RFFError, RuntimeError):
    pass


class NotReadyError(RFFError, RuntimeError):
    """Coefficients are missing or stale; call ensure_coefficients() or set_coefficients() first."""


class InvalidStateError(RFFError, RuntimeError):
    pass
