"""
Core algorithms (backend-agnostic).
"""

from .workspace import Workspace
from .balance import balance_columns, unit_balance
from .svd_solver import linear_svd_solve, wlinear_svd_solve, LinearFitResult
from .estimate import linear_est, linear_residuals

__all__ = [
    "Workspace",
    "balance_columns",
    "unit_balance",
    "linear_svd_solve",
    "wlinear_svd_solve",
    "LinearFitResult",
    "linear_est",
    "linear_residuals",
]
