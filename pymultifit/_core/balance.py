"""
Column balancing of the design matrix.
"""

import numpy as np


def balance_columns(A: np.ndarray, D: np.ndarray) -> None:
    """
    Scale the columns of A in place to norms in [0.5, 1].

    Each factor is a power of two, so scaling introduces no rounding.
    Columns whose norm is already in [0.5, 1], and zero or non-finite
    columns, keep a factor of 1.

    Parameters
    ----------
    A : ndarray, shape (n, p)
        Matrix to balance (modified in place)
    D : ndarray, shape (p,)
        Receives the factors; the balanced matrix is A diag(D)^-1
    """
    norms = np.linalg.norm(A, axis=0)
    mantissa, exponent = np.frexp(norms)

    # Exact powers of two above 1/2 scale to norm 1, not 1/2
    exponent -= (mantissa == 0.5) & (exponent > 0)

    usable = (norms > 0.0) & np.isfinite(norms)
    D[:] = np.where(usable, np.ldexp(1.0, exponent), 1.0)

    for j in range(A.shape[1]):
        column = A[:, j]
        column /= D[j]


def unit_balance(D: np.ndarray) -> None:
    """No balancing: all factors equal to one."""
    D.fill(1.0)
