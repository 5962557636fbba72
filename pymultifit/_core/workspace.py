"""
Scratch workspace for the SVD least-squares solvers.
"""

import numpy as np
from dataclasses import dataclass, field
from typing import Union

from .._backends import get_backend, BackendBase


@dataclass(eq=False)
class Workspace:
    """
    Pre-sized scratch buffers for fits of an (n, p) design matrix.

    Every solve overwrites the buffers; nothing carries over between
    calls. One workspace must not serve two fits at the same time.

    Attributes
    ----------
    A : ndarray, shape (n, p)
        Working copy of the design matrix, holds U after factoring
    Q : ndarray, shape (p, p)
        Orthogonal factor
    QSI : ndarray, shape (p, p)
        Q with columns scaled by the regularized inverse singular values
    S : ndarray, shape (p,)
        Singular values
    D : ndarray, shape (p,)
        Column balancing factors
    xt : ndarray, shape (p,)
        Response projected onto U
    t : ndarray, shape (n,)
        Weighted response (weighted fits only)
    """
    n: int
    p: int
    backend: Union[str, BackendBase] = 'cpu'
    A: np.ndarray = field(init=False, repr=False)
    Q: np.ndarray = field(init=False, repr=False)
    QSI: np.ndarray = field(init=False, repr=False)
    S: np.ndarray = field(init=False, repr=False)
    D: np.ndarray = field(init=False, repr=False)
    xt: np.ndarray = field(init=False, repr=False)
    t: np.ndarray = field(init=False, repr=False)

    def __post_init__(self):
        if self.n <= 0:
            raise ValueError("matrix dimension n must be positive integer")
        if self.p <= 0:
            raise ValueError("matrix dimension p must be positive integer")

        self.n = int(self.n)
        self.p = int(self.p)
        self.backend = get_backend(self.backend)

        n, p = self.n, self.p
        self.A = np.zeros((n, p), dtype=np.float64)
        self.Q = np.zeros((p, p), dtype=np.float64)
        self.QSI = np.zeros((p, p), dtype=np.float64)
        self.S = np.zeros(p, dtype=np.float64)
        self.D = np.zeros(p, dtype=np.float64)
        self.xt = np.zeros(p, dtype=np.float64)
        self.t = np.zeros(n, dtype=np.float64)

    def fits(self, n: int, p: int) -> bool:
        """True if this workspace was sized for an (n, p) design matrix."""
        return self.n == n and self.p == p
