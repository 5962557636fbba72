"""
PyMultifit: SVD-based linear least squares with ridge regularization.

Copyright (C) 2024 SGCX
Licensed under GPL-3.0
"""

__version__ = "1.0.0"

# Import main user-facing API
from .fit import multifit, MultiFit
from .multilinear import (
    DEFAULT_TOL,
    linear,
    linear_svd,
    linear_usvd,
    wlinear,
    wlinear_svd,
    wlinear_usvd,
    ridge,
    ridge2,
    linear_est,
    linear_residuals,
)
from ._core import Workspace, LinearFitResult
from ._utils import (
    MultifitError,
    BadLengthError,
    NotSquareError,
    InvalidToleranceError,
    SingularPenaltyError,
)

# Import backend utilities (for advanced users)
from ._backends import get_backend, list_available_backends

__all__ = [
    'multifit',
    'MultiFit',
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
    'Workspace',
    'LinearFitResult',
    'MultifitError',
    'BadLengthError',
    'NotSquareError',
    'InvalidToleranceError',
    'SingularPenaltyError',
    'get_backend',
    'list_available_backends',
]
