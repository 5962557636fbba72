"""
CPU backend using NumPy + SciPy.

This is the reference SVD provider.
"""

import numpy as np
from scipy.linalg import svd

from .base import CPUBackend


class CPUBackendFP64(CPUBackend):
    """
    CPU backend using SciPy's LAPACK SVD.

    Always uses FP64 precision.
    """

    def __init__(self, lapack_driver: str = 'gesdd'):
        self.name = "cpu_fp64"
        self.precision = "fp64"
        self.lapack_driver = lapack_driver

    def svd_decomp(self, A: np.ndarray, Q: np.ndarray, S: np.ndarray) -> None:
        """
        Factor A = U S Q^T using LAPACK.

        A thin SVD is enough when n >= p. For n < p the full V is
        needed to fill the p x p factor Q.
        """
        n, p = A.shape
        U, s, Vt = svd(
            A,
            full_matrices=n < p,
            check_finite=False,
            lapack_driver=self.lapack_driver
        )
        self._store_factors(A, Q, S, U, s, Vt)

    def get_device_info(self) -> dict:
        """Get backend information."""
        import scipy
        return {
            'backend': 'cpu',
            'precision': 'fp64',
            'driver': self.lapack_driver,
            'library': f'NumPy {np.__version__}, SciPy {scipy.__version__}',
        }
