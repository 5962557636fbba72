"""
Backend selection and management.

Provides a unified SVD interface for CPU (SciPy) and PyTorch (CUDA or CPU).
"""

import warnings

from .base import BackendBase

# Try importing CPU backend (always available)
try:
    from .cpu_fp64_backend import CPUBackendFP64
    CPU_AVAILABLE = True
except ImportError:
    CPU_AVAILABLE = False
    warnings.warn("CPU backend unavailable - installation error!")

# Try importing PyTorch backend
try:
    import torch
    from .gpu_fp64_backend import PyTorchBackendFP64
    PYTORCH_AVAILABLE = True
    CUDA_AVAILABLE = torch.cuda.is_available()
except ImportError:
    PYTORCH_AVAILABLE = False
    CUDA_AVAILABLE = False


def get_backend(backend='cpu') -> BackendBase:
    """
    Get SVD backend.

    Parameters
    ----------
    backend : str or BackendBase
        Backend selection:
        - 'cpu': SciPy LAPACK (FP64)
        - 'pytorch': torch.linalg.svd (FP64, CUDA if present)
        - 'auto': PyTorch on a CUDA device, otherwise CPU
        An existing backend instance is returned unchanged.

    Returns
    -------
    BackendBase
        Backend instance

    Examples
    --------
    >>> backend = get_backend('cpu')
    >>> backend = get_backend('auto')
    """
    if isinstance(backend, BackendBase):
        return backend

    if backend == 'auto':
        if PYTORCH_AVAILABLE and CUDA_AVAILABLE:
            return PyTorchBackendFP64(device='cuda')
        if not CPU_AVAILABLE:
            raise RuntimeError("No backends available!")
        return CPUBackendFP64()

    elif backend == 'cpu':
        if not CPU_AVAILABLE:
            raise RuntimeError("CPU backend unavailable!")
        return CPUBackendFP64()

    elif backend == 'pytorch':
        if not PYTORCH_AVAILABLE:
            raise RuntimeError(
                "PyTorch backend unavailable.\n"
                "Install: pip install torch"
            )
        return PyTorchBackendFP64()

    else:
        raise ValueError(
            f"Unknown backend: '{backend}'\n"
            f"Valid options: 'auto', 'cpu', 'pytorch'"
        )


def list_available_backends() -> list:
    """List names of available backends."""
    backends = []
    if CPU_AVAILABLE:
        backends.append('cpu')
    if PYTORCH_AVAILABLE:
        backends.append('pytorch')
    return backends


def print_backend_info():
    """Print detailed backend information (diagnostic)."""
    print("PyMultifit Backend Status")
    print("=" * 50)
    print(f"\nAvailable Backends:")
    print(f"  CPU (FP64):     {'✓' if CPU_AVAILABLE else '✗'} - SciPy LAPACK SVD")
    print(f"  PyTorch (FP64): {'✓' if PYTORCH_AVAILABLE else '✗'} - torch.linalg.svd")
    print(f"  CUDA device:    {'✓' if CUDA_AVAILABLE else '✗'}")

    print(f"\nRecommended Backend:")
    try:
        backend = get_backend('auto')
        print(f"  {backend.name}")
    except Exception as e:
        print(f"  Error: {e}")


__all__ = [
    'get_backend',
    'list_available_backends',
    'print_backend_info',
    'BackendBase',
    'CPU_AVAILABLE',
    'PYTORCH_AVAILABLE',
    'CUDA_AVAILABLE',
]


if __name__ == "__main__":
    print_backend_info()
