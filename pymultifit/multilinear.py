"""
Linear least-squares fitting entry points.

Each function fills optional caller-owned ``c``/``cov`` buffers (new
arrays are allocated when they are omitted) and returns a
``LinearFitResult``. All inputs are validated before anything is
written.
"""

import numpy as np
from typing import Optional

from ._utils import check_array, check_vector, BadLengthError, SingularPenaltyError
from ._core.workspace import Workspace
from ._core.svd_solver import linear_svd_solve, wlinear_svd_solve, LinearFitResult
from ._core.estimate import linear_est, linear_residuals


DEFAULT_TOL = float(np.finfo(np.float64).eps)


def linear(X, y, work: Workspace, c=None, cov=None) -> LinearFitResult:
    """
    Ordinary least squares with column balancing.

    Examples
    --------
    >>> X = np.array([[1.0, 0.0], [1.0, 1.0], [1.0, 2.0]])
    >>> work = Workspace(3, 2)
    >>> fit = linear(X, [1.0, 2.0, 2.0], work)
    >>> np.round(fit.coef, 6)
    array([1.166667, 0.5     ])
    """
    return linear_svd_solve(X, y, DEFAULT_TOL, True, 0.0, work, c=c, cov=cov)


def linear_svd(X, y, tol: float, work: Workspace, c=None, cov=None) -> LinearFitResult:
    """Least squares with a caller-chosen singular value tolerance."""
    return linear_svd_solve(X, y, tol, True, 0.0, work, c=c, cov=cov)


def linear_usvd(X, y, tol: float, work: Workspace, c=None, cov=None) -> LinearFitResult:
    """As ``linear_svd`` but without column balancing."""
    return linear_svd_solve(X, y, tol, False, 0.0, work, c=c, cov=cov)


def wlinear(X, w, y, work: Workspace, c=None, cov=None) -> LinearFitResult:
    """Weighted least squares with column balancing."""
    return wlinear_svd_solve(X, w, y, DEFAULT_TOL, True, work, c=c, cov=cov)


def wlinear_svd(X, w, y, tol: float, work: Workspace, c=None, cov=None) -> LinearFitResult:
    """Weighted least squares with a caller-chosen tolerance."""
    return wlinear_svd_solve(X, w, y, tol, True, work, c=c, cov=cov)


def wlinear_usvd(X, w, y, tol: float, work: Workspace, c=None, cov=None) -> LinearFitResult:
    """As ``wlinear_svd`` but without column balancing."""
    return wlinear_svd_solve(X, w, y, tol, False, work, c=c, cov=cov)


def ridge(lam: float, X, y, work: Workspace, c=None, cov=None) -> LinearFitResult:
    """
    Ridge regression with scalar parameter lambda.

    Minimizes ||y - X c||^2 + lambda^2 ||c||^2. Columns are never
    balanced, since balancing would change the meaning of the penalty.
    """
    return linear_svd_solve(X, y, DEFAULT_TOL, False, lam, work, c=c, cov=cov)


def ridge2(
    lam: np.ndarray,
    X,
    y,
    work: Workspace,
    c: Optional[np.ndarray] = None,
    cov: Optional[np.ndarray] = None,
) -> LinearFitResult:
    """
    Ridge regression with a diagonal matrix L = diag(lambda_1, ..., lambda_p).

    Minimizes ||y - X c||^2 + ||L c||^2 through the change of variables

        X~ = X L^{-1},  c~ = L c

    and a standard ridge fit of X~ c~ = y with lambda = 1. X~ is built in
    ``work.A``.

    Parameters
    ----------
    lam : ndarray, shape (p,)
        Diagonal of L; every entry must be non-zero
    X : ndarray, shape (n, p)
        Design matrix
    y : ndarray, shape (n,)
        Response vector
    work : Workspace
        Scratch buffers sized for (n, p)
    c, cov : ndarray, optional
        Output buffers

    Returns
    -------
    LinearFitResult
        ``coef`` is the solution in the original variables. ``cov`` is
        left in the transformed variables c~ and is not rescaled by
        L^{-1} cov L^{-1}.

    Raises
    ------
    BadLengthError
        lam, X, c or the workspace disagree in size
    SingularPenaltyError
        Some lambda_j is zero
    """
    X = check_array(X)
    lam = check_vector(lam, name='lambda')
    n, p = X.shape

    if p != lam.shape[0] or (c is not None and np.shape(c)[0] != lam.shape[0]):
        raise BadLengthError("lambda vector has incorrect length")
    if not work.fits(n, p):
        raise BadLengthError(
            "size of workspace does not match size of observation matrix"
        )
    if np.any(lam == 0.0):
        raise SingularPenaltyError("lambda matrix is singular")

    # Validate the remaining arguments before X~ is written
    y = check_vector(y)
    if n != y.shape[0]:
        raise BadLengthError(
            "number of observations in y does not match rows of matrix X"
        )

    np.divide(X, lam, out=work.A)

    result = linear_svd_solve(
        None, y, DEFAULT_TOL, False, 1.0, work, c=c, cov=cov, in_place=True
    )

    # c = L^{-1} c~
    np.divide(result.coef, lam, out=result.coef)

    return result


__all__ = [
    'DEFAULT_TOL',
    'linear',
    'linear_svd',
    'linear_usvd',
    'wlinear',
    'wlinear_svd',
    'wlinear_usvd',
    'ridge',
    'ridge2',
    'linear_est',
    'linear_residuals',
]
