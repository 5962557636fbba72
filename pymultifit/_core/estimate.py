"""
Prediction and residuals for a fitted coefficient vector.
"""

import numpy as np
from typing import Optional, Tuple

from .._utils import (
    check_array,
    check_vector,
    check_output,
    BadLengthError,
    NotSquareError,
)


def linear_est(
    x: np.ndarray,
    c: np.ndarray,
    cov: np.ndarray
) -> Tuple[float, float]:
    """
    Predicted value and its standard error at a new observation x.

    Parameters
    ----------
    x : ndarray, shape (p,)
        Predictor values for one observation
    c : ndarray, shape (p,)
        Fitted coefficients
    cov : ndarray, shape (p, p)
        Covariance matrix of c

    Returns
    -------
    (y, y_err)
        y = x . c and y_err = sqrt(x^T cov x)
    """
    x = check_vector(x, name='x')
    c = check_vector(c, name='c')
    cov = np.asarray(cov, dtype=np.float64)

    if x.shape[0] != c.shape[0]:
        raise BadLengthError(
            "number of parameters c does not match number of observations x"
        )
    if cov.ndim != 2 or cov.shape[0] != cov.shape[1]:
        raise NotSquareError("covariance matrix is not square")
    if c.shape[0] != cov.shape[0]:
        raise BadLengthError(
            "number of parameters c does not match size of covariance matrix cov"
        )

    y = float(x @ c)

    # x^T cov x from the diagonal and lower triangle of the symmetric cov
    lower = np.tril(cov, -1)
    var = float(np.sum(x * x * np.diag(cov)) + 2.0 * (x @ lower @ x))

    return y, float(np.sqrt(var))


def linear_residuals(
    X: np.ndarray,
    y: np.ndarray,
    c: np.ndarray,
    r: Optional[np.ndarray] = None
) -> np.ndarray:
    """
    Residuals r = y - X c.

    Works for any c, not only a fitted one. ``r`` is an optional output
    buffer of length n; it is returned.
    """
    X = check_array(X)
    y = check_vector(y)
    c = check_vector(c, name='c')
    r = check_output(r, y.shape, 'r')

    if X.shape[0] != y.shape[0]:
        raise BadLengthError(
            "number of observations in y does not match rows of matrix X"
        )
    if X.shape[1] != c.shape[0]:
        raise BadLengthError(
            "number of parameters c does not match columns of matrix X"
        )
    if y.shape[0] != r.shape[0]:
        raise BadLengthError(
            "number of observations in y does not match number of residuals"
        )

    np.subtract(y, X @ c, out=r)
    return r
