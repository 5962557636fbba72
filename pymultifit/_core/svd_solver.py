"""
Linear least squares via the singular value decomposition.

Solves y = X c, optionally with observation weights and a standard
form Tikhonov term:

    c = (X^T X + lambda^2 I)^{-1} X^T y

The design matrix is factored as X D^{-1} = U S Q^T, with D the column
balancing factors, and the solution is built from a regularized
pseudo-inverse of S. Singular values at or below tol * s_0 are treated
as zero and do not count towards the effective rank.
"""

import warnings
import numpy as np
from typing import Optional
from dataclasses import dataclass

from .._utils import (
    check_array,
    check_vector,
    check_output,
    BadLengthError,
    NotSquareError,
    InvalidToleranceError,
)
from .balance import balance_columns, unit_balance
from .workspace import Workspace


@dataclass(frozen=True)
class LinearFitResult:
    """Results from an SVD least-squares fit."""
    coef: np.ndarray     # Coefficients (the caller's c buffer)
    cov: np.ndarray      # Covariance of coef (the caller's cov buffer)
    chisq: float         # Residual chi^2, plus the ridge term if any
    rank: int            # Effective rank


def _validate(n, p, y, c, cov, work, tol, w=None):
    """Shape and tolerance checks shared by both solvers."""
    if n != y.shape[0]:
        raise BadLengthError(
            "number of observations in y does not match rows of matrix X"
        )
    if p != c.shape[0]:
        raise BadLengthError(
            "number of parameters c does not match columns of matrix X"
        )
    if w is not None and w.shape[0] != y.shape[0]:
        raise BadLengthError(
            "number of weights does not match number of observations"
        )
    if cov.shape[0] != cov.shape[1]:
        raise NotSquareError("covariance matrix is not square")
    if c.shape[0] != cov.shape[0]:
        raise BadLengthError(
            "number of parameters does not match size of covariance matrix"
        )
    if not work.fits(n, p):
        raise BadLengthError(
            "size of workspace does not match size of observation matrix"
        )
    if not tol > 0:
        raise InvalidToleranceError("tolerance must be positive")


def _regularized_inverse(work: Workspace, tol: float, lam_sq: float) -> int:
    """
    Form QSI = Q diag(s_j / (s_j^2 + lambda^2)) and return the rank.

    For lambda = 0 this is the truncated inverse Q S^-1.
    """
    S = work.S
    keep = S > tol * S[0]

    alpha = np.zeros_like(S)
    np.divide(S, S * S + lam_sq, out=alpha, where=keep)

    np.multiply(work.Q, alpha, out=work.QSI)

    return int(np.count_nonzero(keep))


def _noise_variance(r2: float, dof: int) -> float:
    """Residual variance r2 / (n - rank)."""
    if dof <= 0:
        warnings.warn(
            "Effective rank equals the number of observations; "
            "zero residual degrees of freedom, covariance is not finite.",
            RuntimeWarning,
            stacklevel=3
        )
        with np.errstate(divide='ignore', invalid='ignore'):
            return np.float64(r2) / np.float64(0.0)
    return r2 / dof


def _covariance(QSI: np.ndarray, D: np.ndarray, scale: float) -> np.ndarray:
    """cov[i, j] = scale * (QSI row i . QSI row j) / (d_i d_j)."""
    M = QSI / D[:, np.newaxis]
    with np.errstate(invalid='ignore'):
        cov = scale * (M @ M.T)

    # Mirror the upper triangle so the result is exactly symmetric
    lower = np.tril_indices(cov.shape[0], -1)
    cov[lower] = cov.T[lower]
    return cov


def linear_svd_solve(
    X: Optional[np.ndarray],
    y: np.ndarray,
    tol: float,
    balance: bool,
    lam: float,
    work: Workspace,
    c: Optional[np.ndarray] = None,
    cov: Optional[np.ndarray] = None,
    in_place: bool = False,
) -> LinearFitResult:
    """
    Regularized least squares fit of y = X c.

    Parameters
    ----------
    X : ndarray, shape (n, p) or None
        Design matrix. Ignored (pass None) when ``in_place`` is set.
    y : ndarray, shape (n,)
        Response vector
    tol : float
        Relative singular value cutoff, must be positive
    balance : bool
        Balance the columns of X before factoring
    lam : float
        Tikhonov parameter lambda (0 for ordinary least squares)
    work : Workspace
        Scratch buffers sized for (n, p)
    c : ndarray, shape (p,), optional
        Output buffer for the coefficients
    cov : ndarray, shape (p, p), optional
        Output buffer for the covariance matrix
    in_place : bool
        Use ``work.A`` as the design matrix instead of copying X into it

    Returns
    -------
    LinearFitResult
        Coefficients, covariance, chi^2 and effective rank

    Raises
    ------
    BadLengthError
        Inconsistent dimensions between X, y, c, cov and the workspace
    NotSquareError
        cov is not square
    InvalidToleranceError
        tol <= 0

    Notes
    -----
    chi^2 = ||y - X c||^2 + lambda^2 ||c||^2 and the covariance is scaled
    by the residual variance ||y - X c||^2 / (n - rank). Nothing is written
    to ``c`` or ``cov`` when validation fails.
    """
    if X is work.A:
        in_place = True

    if in_place:
        if X is not None and X is not work.A:
            raise ValueError("X must be None or work.A when in_place is set")
        X = work.A
    else:
        X = check_array(X)
    y = check_vector(y)
    n, p = X.shape

    c = check_output(c, (p,), 'c')
    cov = check_output(cov, (p, p), 'cov')
    _validate(n, p, y, c, cov, work, tol)

    lam_sq = float(lam) * float(lam)
    A, Q, S, D, xt = work.A, work.Q, work.S, work.D, work.xt

    if not in_place:
        np.copyto(A, X)

    if balance:
        balance_columns(A, D)
    else:
        unit_balance(D)

    # A <- U, A = U S Q^T
    work.backend.svd_decomp(A, Q, S)

    xt[:] = A.T @ y

    rank = _regularized_inverse(work, tol, lam_sq)

    coef = work.QSI @ xt
    coef /= D

    # U overwrote A, so rebuild X c from the factors
    if in_place:
        fitted = A @ (S * (Q.T @ (D * coef)))
    else:
        fitted = X @ coef

    r = y - fitted
    r2 = float(r @ r)
    ridge = lam_sq * float(coef @ coef)

    s2 = _noise_variance(r2, n - rank)

    c[:] = coef
    cov[:, :] = _covariance(work.QSI, D, s2)

    return LinearFitResult(coef=c, cov=cov, chisq=r2 + ridge, rank=rank)


def wlinear_svd_solve(
    X: np.ndarray,
    w: np.ndarray,
    y: np.ndarray,
    tol: float,
    balance: bool,
    work: Workspace,
    lam: float = 0.0,
    c: Optional[np.ndarray] = None,
    cov: Optional[np.ndarray] = None,
) -> LinearFitResult:
    """
    Weighted least squares fit of y = X c.

    Rows are scaled by sqrt(w_i) before factoring. Weights are inverse
    variances of the observations; negative weights are clamped to zero,
    which drops the observation.

    Parameters
    ----------
    X : ndarray, shape (n, p)
        Design matrix
    w : ndarray, shape (n,)
        Observation weights
    y : ndarray, shape (n,)
        Response vector
    tol : float
        Relative singular value cutoff, must be positive
    balance : bool
        Balance the columns of sqrt(W) X before factoring
    work : Workspace
        Scratch buffers sized for (n, p)
    lam : float, default=0.0
        Tikhonov parameter lambda
    c, cov : ndarray, optional
        Output buffers

    Returns
    -------
    LinearFitResult
        chi^2 = sum w_i r_i^2 (+ lambda^2 ||c||^2). The covariance is
        (X^T W X)^-1 without residual variance scaling, since the
        weights already carry the observation variances.
    """
    X = check_array(X)
    w = check_vector(w, name='w')
    y = check_vector(y)
    n, p = X.shape

    c = check_output(c, (p,), 'c')
    cov = check_output(cov, (p, p), 'cov')
    _validate(n, p, y, c, cov, work, tol, w=w)

    n_negative = int(np.count_nonzero(w < 0))
    if n_negative:
        warnings.warn(
            f"{n_negative} negative weight(s) set to zero; "
            f"those observations are excluded from the fit.",
            UserWarning,
            stacklevel=3
        )
    w = np.clip(w, 0.0, None)
    sqrt_w = np.sqrt(w)

    lam_sq = float(lam) * float(lam)
    A, Q, S, D, xt, t = work.A, work.Q, work.S, work.D, work.xt, work.t

    # A = sqrt(W) X
    np.multiply(X, sqrt_w[:, np.newaxis], out=A)

    if balance:
        balance_columns(A, D)
    else:
        unit_balance(D)

    work.backend.svd_decomp(A, Q, S)

    # t = sqrt(W) y
    np.multiply(sqrt_w, y, out=t)
    xt[:] = A.T @ t

    rank = _regularized_inverse(work, tol, lam_sq)

    coef = work.QSI @ xt
    coef /= D

    r = y - X @ coef
    r2 = float(np.sum(w * r * r))
    ridge = lam_sq * float(coef @ coef)

    c[:] = coef
    cov[:, :] = _covariance(work.QSI, D, 1.0)

    return LinearFitResult(coef=c, cov=cov, chisq=r2 + ridge, rank=rank)
