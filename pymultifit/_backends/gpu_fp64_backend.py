"""
GPU backend using PyTorch with FP64 precision.

Singular value thresholding needs double precision, so there is no
FP32 variant.
"""

import numpy as np
import warnings
from typing import Optional

from .base import GPUBackendFP64


class PyTorchBackendFP64(GPUBackendFP64):
    """
    PyTorch SVD backend with FP64 precision.

    Runs on CUDA when available and falls back to the torch CPU
    kernels otherwise.
    """

    def __init__(self, device: Optional[str] = None):
        """Initialize PyTorch FP64 backend."""
        self.name = "pytorch_fp64"
        self.precision = "fp64"

        try:
            import torch
            self.torch = torch
        except ImportError:
            raise ImportError(
                "PyTorch required for GPU backend. "
                "Install: pip install torch"
            )

        # No FP64 on Metal
        if device == 'mps':
            raise RuntimeError(
                "FP64 not supported on Apple Metal. "
                "Use backend='cpu'."
            )

        if device is None:
            if torch.cuda.is_available():
                device = 'cuda'
            else:
                warnings.warn("No CUDA GPU available, using CPU")
                device = 'cpu'

        self.device = torch.device(device)

    def svd_decomp(self, A: np.ndarray, Q: np.ndarray, S: np.ndarray) -> None:
        """Factor A = U S Q^T on the torch device."""
        torch = self.torch
        n, p = A.shape

        A_gpu = torch.from_numpy(A).double().to(self.device)
        U, s, Vt = torch.linalg.svd(A_gpu, full_matrices=n < p)

        self._store_factors(
            A, Q, S,
            U.cpu().numpy(),
            s.cpu().numpy(),
            Vt.cpu().numpy()
        )

    def get_device_info(self) -> dict:
        """Get backend information."""
        return {
            'backend': 'gpu' if self.device.type == 'cuda' else 'cpu',
            'precision': 'fp64',
            'device': str(self.device),
            'library': f'PyTorch {self.torch.__version__}',
        }
