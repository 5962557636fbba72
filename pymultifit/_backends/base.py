"""
Abstract base classes for backends.

Defines the SVD interface all backends must implement.
"""

from abc import ABC, abstractmethod
import numpy as np


class BackendBase(ABC):
    """Abstract base class for all SVD backends."""

    @abstractmethod
    def svd_decomp(
        self,
        A: np.ndarray,
        Q: np.ndarray,
        S: np.ndarray
    ) -> None:
        """
        Factor A = U S Q^T in place.

        Backends compute in their native types and only convert at
        entry/exit.

        Parameters
        ----------
        A : ndarray, shape (n, p)
            Matrix to factor. Overwritten with U. When n < p the
            trailing p - n columns are set to zero.
        Q : ndarray, shape (p, p)
            Receives the orthogonal factor (right singular vectors
            as columns).
        S : ndarray, shape (p,)
            Receives the singular values in descending order, padded
            with zeros when n < p.
        """
        pass

    @abstractmethod
    def get_device_info(self) -> dict:
        """Get backend information."""
        pass

    @staticmethod
    def _store_factors(A, Q, S, U, s, Vt):
        """Copy (U, s, Vt) from a full or thin SVD into the buffers."""
        k = s.shape[0]
        A[:, :k] = U[:, :k]
        A[:, k:] = 0.0
        S[:k] = s
        S[k:] = 0.0
        Q[:, :] = Vt.T


class CPUBackend(BackendBase):
    """CPU backend base class (always FP64)."""
    pass


class GPUBackendFP64(BackendBase):
    """GPU backend base class for FP64."""
    pass
