"""
Utility functions and error types.
"""

import numpy as np


class MultifitError(ValueError):
    """Base class for invalid fit inputs."""


class BadLengthError(MultifitError):
    """Array dimensions do not agree with each other or the workspace."""


class NotSquareError(MultifitError):
    """Covariance matrix is not square."""


class InvalidToleranceError(MultifitError):
    """Singular value tolerance is not positive."""


class SingularPenaltyError(MultifitError):
    """Diagonal regularization matrix has a zero entry."""


def check_array(X, name='X', dtype=np.float64):
    """Validate array input."""
    X = np.asarray(X, dtype=dtype)
    if X.ndim != 2:
        raise ValueError(f"{name} must be 2-dimensional")
    if not np.all(np.isfinite(X)):
        raise ValueError(f"{name} contains NaN or Inf")
    return X


def check_vector(y, name='y', dtype=np.float64):
    """Validate vector input."""
    y = np.asarray(y, dtype=dtype)
    if y.ndim != 1:
        raise ValueError(f"{name} must be 1-dimensional")
    if not np.all(np.isfinite(y)):
        raise ValueError(f"{name} contains NaN or Inf")
    return y


def check_output(out, shape, name):
    """
    Validate or allocate an output buffer.

    Returns a new zero array when ``out`` is None. A supplied buffer must
    be a float64 ndarray; only its shape is checked here, the caller
    compares it against the inputs.
    """
    if out is None:
        return np.zeros(shape, dtype=np.float64)
    if not isinstance(out, np.ndarray) or out.dtype != np.float64:
        raise TypeError(f"{name} must be a float64 ndarray")
    if out.ndim != len(shape):
        raise BadLengthError(f"{name} must be {len(shape)}-dimensional")
    return out
