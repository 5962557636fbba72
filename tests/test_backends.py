"""
Test SVD backend implementations.

Tests appropriate backends based on available libraries:
- CPU: Always tested
- PyTorch: Tested if torch is installed (CUDA used when present)
"""

import pytest
import numpy as np

from pymultifit import Workspace, linear, ridge2
from pymultifit._backends import (
    get_backend,
    list_available_backends,
    print_backend_info,
    BackendBase,
    PYTORCH_AVAILABLE,
    CUDA_AVAILABLE,
)


def check_factorization(backend, X):
    """Run svd_decomp on a copy of X and check U S Q^T == X."""
    n, p = X.shape
    A = X.copy()
    Q = np.empty((p, p))
    S = np.empty(p)

    backend.svd_decomp(A, Q, S)

    np.testing.assert_allclose(A @ np.diag(S) @ Q.T, X, atol=1e-12)
    np.testing.assert_allclose(Q.T @ Q, np.eye(p), atol=1e-12)
    assert np.all(np.diff(S) <= 0)
    return A, Q, S


class TestBackendSelection:
    """Test backend availability and selection."""

    def test_list_backends(self):
        backends = list_available_backends()
        assert isinstance(backends, list)
        assert 'cpu' in backends  # CPU always available
        if PYTORCH_AVAILABLE:
            assert 'pytorch' in backends

    def test_print_backend_info(self, capsys):
        print_backend_info()
        captured = capsys.readouterr()
        assert 'Backend Status' in captured.out
        assert 'CPU' in captured.out

    def test_invalid_backend_name(self):
        with pytest.raises(ValueError, match="Unknown backend"):
            get_backend('invalid_backend')

    def test_instance_passthrough(self):
        backend = get_backend('cpu')
        assert get_backend(backend) is backend

    def test_auto_backend(self):
        backend = get_backend('auto')
        assert isinstance(backend, BackendBase)
        if not CUDA_AVAILABLE:
            assert backend.name == 'cpu_fp64'

    @pytest.mark.skipif(PYTORCH_AVAILABLE, reason="Test requires torch to be absent")
    def test_pytorch_without_torch(self):
        with pytest.raises(RuntimeError, match="PyTorch backend unavailable"):
            get_backend('pytorch')


class TestCPUBackend:
    """Test CPU backend (always available)."""

    def test_cpu_backend_creation(self):
        backend = get_backend('cpu')
        assert backend.name == 'cpu_fp64'
        assert backend.precision == 'fp64'

    def test_cpu_device_info(self):
        info = get_backend('cpu').get_device_info()
        assert info['backend'] == 'cpu'
        assert info['precision'] == 'fp64'
        assert 'SciPy' in info['library']

    def test_tall_factorization(self):
        rng = np.random.default_rng(42)
        check_factorization(get_backend('cpu'), rng.standard_normal((10, 4)))

    def test_wide_factorization(self):
        """n < p pads S with zeros and zeroes the extra columns of U."""
        rng = np.random.default_rng(42)
        A, Q, S = check_factorization(get_backend('cpu'), rng.standard_normal((3, 5)))

        np.testing.assert_array_equal(S[3:], 0.0)
        np.testing.assert_array_equal(A[:, 3:], 0.0)

    def test_gesvd_driver(self):
        from pymultifit._backends.cpu_fp64_backend import CPUBackendFP64

        rng = np.random.default_rng(1)
        X = rng.standard_normal((12, 4))
        y = rng.standard_normal(12)

        default = linear(X, y, Workspace(12, 4))
        gesvd = linear(X, y, Workspace(12, 4, backend=CPUBackendFP64('gesvd')))

        np.testing.assert_allclose(gesvd.coef, default.coef, rtol=1e-10)


@pytest.mark.skipif(not PYTORCH_AVAILABLE, reason="PyTorch not available")
@pytest.mark.filterwarnings("ignore:No CUDA GPU available")
class TestPyTorchBackend:
    """Test PyTorch backend (runs on CPU when no CUDA device exists)."""

    def test_pytorch_backend_creation(self):
        backend = get_backend('pytorch')
        assert backend.name == 'pytorch_fp64'
        assert backend.precision == 'fp64'

    def test_pytorch_device_info(self):
        info = get_backend('pytorch').get_device_info()
        assert info['precision'] == 'fp64'
        assert 'PyTorch' in info['library']

    def test_pytorch_rejects_mps(self):
        from pymultifit._backends.gpu_fp64_backend import PyTorchBackendFP64
        with pytest.raises(RuntimeError, match="Apple Metal"):
            PyTorchBackendFP64(device='mps')

    def test_factorization(self):
        rng = np.random.default_rng(42)
        backend = get_backend('pytorch')
        check_factorization(backend, rng.standard_normal((10, 4)))
        check_factorization(backend, rng.standard_normal((3, 5)))

    def test_pytorch_vs_cpu_consistency(self):
        rng = np.random.default_rng(42)
        X = rng.standard_normal((100, 3))
        y = rng.standard_normal(100)
        lam = np.array([0.5, 1.0, 2.0])

        cpu = ridge2(lam, X, y, Workspace(100, 3, backend='cpu'))
        gpu = ridge2(lam, X, y, Workspace(100, 3, backend='pytorch'))

        np.testing.assert_allclose(gpu.coef, cpu.coef, rtol=1e-10)
        np.testing.assert_allclose(gpu.cov, cpu.cov, rtol=1e-9)
        assert gpu.rank == cpu.rank
