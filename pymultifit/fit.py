"""
Multi-parameter linear fits with an R-style interface and output.

This is the user-facing API built on the SVD solvers.
"""

import numpy as np
import pandas as pd
from typing import Optional, Union, List
from scipy import stats

from ._core.workspace import Workspace
from ._core.estimate import linear_est, linear_residuals
from .multilinear import (
    DEFAULT_TOL,
    linear_svd,
    linear_usvd,
    wlinear_svd,
    wlinear_usvd,
    ridge,
    ridge2,
)


class MultiFit:
    """
    Fit y = X c by SVD least squares.

    The design matrix is used as given: add a column of ones yourself if
    the model needs an intercept.

    Examples
    --------
    >>> import pandas as pd
    >>> from pymultifit import multifit
    >>>
    >>> data = pd.DataFrame({'one': 1.0, 't': [0.0, 1.0, 2.0],
    ...                      'signal': [1.0, 2.0, 2.0]})
    >>> model = multifit(y='signal', X=['one', 't'], data=data)
    >>>
    >>> model.summary()      # Coefficient table
    >>> model.coef           # Named coefficients
    >>> model.conf_int()     # Confidence intervals
    >>> model.predict(data, return_std=True)
    """

    def __init__(
        self,
        y: Union[str, np.ndarray],
        X: Union[List[str], np.ndarray],
        data: Optional[pd.DataFrame] = None,
        weights: Optional[Union[str, np.ndarray]] = None,
        lam: Optional[Union[float, np.ndarray]] = None,
        tol: Optional[float] = None,
        balance: bool = True,
        backend: str = 'cpu'
    ):
        """
        Fit the model.

        Parameters
        ----------
        y : str or array
            Response variable
            - If string: column name in data
            - If array: numeric values
        X : list of str or array
            Design matrix columns
            - If list of strings: column names in data
            - If array: numeric matrix (n × p)
        data : DataFrame, optional
            Dataset containing y and X variables
        weights : str or array, optional
            Observation weights, taken as known inverse variances. The
            weighted covariance is therefore not rescaled by the residual
            variance; t statistics and p-values still use df_residual.
        lam : float or array, optional
            Ridge parameter: a scalar for ridge(), a length-p vector
            for ridge2(). Cannot be combined with weights. With a vector,
            ``vcov`` stays in the scaled variables lam * c as the solver
            returns it; standard errors, confidence intervals and
            prediction errors use diag(1/lam) vcov diag(1/lam).
        tol : float, optional
            Relative singular value cutoff (default: machine epsilon)
        balance : bool
            Balance columns before factoring (ignored for ridge fits)
        backend : str
            SVD backend: 'cpu', 'pytorch' or 'auto'
        """
        # Parse inputs
        if isinstance(y, str):
            if data is None:
                raise ValueError("Must provide data when y is a string")
            self.y_values = np.asarray(data[y].values, dtype=np.float64)
            self.y_name = y
        else:
            self.y_values = np.asarray(y, dtype=np.float64)
            self.y_name = 'y'

        if isinstance(X, list) and all(isinstance(x, str) for x in X):
            if data is None:
                raise ValueError("Must provide data when X is list of strings")
            self.X_values = np.asarray(data[X].values, dtype=np.float64)
            self.X_names = X
        else:
            self.X_values = np.asarray(X, dtype=np.float64)
            if self.X_values.ndim == 1:
                self.X_values = self.X_values[:, np.newaxis]
            self.X_names = [f'x{i}' for i in range(self.X_values.shape[1])]

        if weights is not None:
            if isinstance(weights, str):
                if data is None:
                    raise ValueError("Must provide data when weights is a string")
                self.weights_values = np.asarray(data[weights].values, dtype=np.float64)
            else:
                self.weights_values = np.asarray(weights, dtype=np.float64)
        else:
            self.weights_values = None

        if lam is not None and self.weights_values is not None:
            raise ValueError("Ridge penalty cannot be combined with weights")

        # Store metadata
        self.n_obs, self.n_coef = self.X_values.shape
        self.lam = lam
        self.tol = DEFAULT_TOL if tol is None else tol
        self.balance = balance

        self.workspace = Workspace(self.n_obs, self.n_coef, backend=backend)
        self.backend = self.workspace.backend
        self._result = self._solve()

        self._compute_statistics()

    def _solve(self):
        """Dispatch to the matching solver entry point."""
        X, y, w, work = self.X_values, self.y_values, self.weights_values, self.workspace

        if self.lam is not None:
            if np.ndim(self.lam) == 0:
                self.method = 'ridge'
                return ridge(float(self.lam), X, y, work)
            self.method = 'ridge2'
            return ridge2(np.asarray(self.lam, dtype=np.float64), X, y, work)

        if w is not None:
            self.method = 'wlinear'
            solver = wlinear_svd if self.balance else wlinear_usvd
            return solver(X, w, y, self.tol, work)

        self.method = 'linear'
        solver = linear_svd if self.balance else linear_usvd
        return solver(X, y, self.tol, work)

    def _compute_statistics(self):
        """Compute residuals, standard errors, t-stats, p-values."""
        result = self._result

        self.coefficients = result.coef
        self.vcov = result.cov
        self.chisq = result.chisq
        self.rank = result.rank
        self.df_residual = self.n_obs - self.rank

        self.residuals = linear_residuals(self.X_values, self.y_values, self.coefficients)
        self.fitted_values = self.y_values - self.residuals

        # Covariance of the coefficients in the original variables
        if self.method == 'ridge2':
            lam = np.asarray(self.lam, dtype=np.float64)
            self._coef_cov = self.vcov / np.outer(lam, lam)
        else:
            self._coef_cov = self.vcov

        with np.errstate(invalid='ignore', divide='ignore'):
            self.std_errors = np.sqrt(np.diag(self._coef_cov))
            self.t_values = self.coefficients / self.std_errors

        # p-values (two-tailed)
        if self.df_residual > 0:
            self.pvalues = 2 * stats.t.sf(np.abs(self.t_values), self.df_residual)
        else:
            self.pvalues = np.full(self.n_coef, np.nan)

    @property
    def coef(self):
        """Named coefficients (pandas Series)."""
        return pd.Series(self.coefficients, index=self.X_names)

    def conf_int(self, alpha: float = 0.05):
        """
        Confidence intervals for coefficients.

        Parameters
        ----------
        alpha : float
            Significance level (default: 0.05 for 95% CI)

        Returns
        -------
        DataFrame
            Confidence intervals with columns 'lower' and 'upper'
        """
        if self.df_residual > 0:
            t_crit = stats.t.ppf(1 - alpha/2, self.df_residual)
        else:
            t_crit = np.nan
        lower = self.coefficients - t_crit * self.std_errors
        upper = self.coefficients + t_crit * self.std_errors

        return pd.DataFrame({
            'lower': lower,
            'upper': upper
        }, index=self.X_names)

    def summary(self):
        """Print summary of fit results (like R's summary.lm)."""
        print()
        print("="*80)
        print("LINEAR LEAST-SQUARES FIT")
        print("="*80)
        print()

        print(f"Dependent variable: {self.y_name}")
        print(f"Method: {self.method}")
        print(f"Number of observations: {self.n_obs}")
        print(f"Effective rank: {self.rank} of {self.n_coef}")
        print(f"Degrees of freedom: {self.df_residual} (residual)")
        print()

        print("Coefficients:")
        print("-"*80)
        print(f"{'Variable':<20} {'Estimate':>12} {'Std. Error':>12} {'t value':>10} {'Pr(>|t|)':>12}")
        print("-"*80)

        for i, name in enumerate(self.X_names):
            p = self.pvalues[i]
            if np.isnan(p):
                sig = ''
                p_str = 'NA'
            else:
                if p < 0.001:
                    sig = ' ***'
                elif p < 0.01:
                    sig = ' **'
                elif p < 0.05:
                    sig = ' *'
                elif p < 0.1:
                    sig = ' .'
                else:
                    sig = ''

                p_str = f"{p:.4f}" if p >= 0.0001 else "<.0001"

            print(f"{name:<20} {self.coefficients[i]:>12.4f} {self.std_errors[i]:>12.4f} "
                  f"{self.t_values[i]:>10.3f} {p_str:>12}{sig}")

        print("-"*80)
        print("Signif. codes:  0 '***' 0.001 '**' 0.01 '*' 0.05 '.' 0.1 ' ' 1")
        print()

        print(f"Chi-square: {self.chisq:.6g}")
        print(f"Backend: {self.backend.name}")
        print("="*80)
        print()

    def predict(
        self,
        newdata: Union[pd.DataFrame, np.ndarray],
        return_std: bool = False
    ):
        """
        Predict response for new data.

        Parameters
        ----------
        newdata : DataFrame or array
            New predictor values
            - If DataFrame: must have columns matching self.X_names
            - If array: must have the same number of columns as X
        return_std : bool
            Also return the standard error of each prediction

        Returns
        -------
        array or DataFrame
            Predicted values, or a DataFrame with columns 'fit' and 'se'
        """
        if isinstance(newdata, pd.DataFrame):
            X_new = newdata[self.X_names].values
        else:
            X_new = np.asarray(newdata, dtype=np.float64)
            if X_new.ndim == 1:
                X_new = X_new[np.newaxis, :]

        estimates = [linear_est(x, self.coefficients, self._coef_cov) for x in X_new]
        fit = np.array([e[0] for e in estimates])

        if not return_std:
            return fit

        index = newdata.index if isinstance(newdata, pd.DataFrame) else None
        return pd.DataFrame({
            'fit': fit,
            'se': np.array([e[1] for e in estimates])
        }, index=index)

    def __repr__(self):
        return f"MultiFit(n={self.n_obs}, p={self.n_coef}, rank={self.rank}, chisq={self.chisq:.4g})"


def multifit(y, X, data=None, **kwargs):
    """
    Fit a linear least-squares model (convenience function).

    Parameters
    ----------
    y : str or array
        Response variable
    X : list of str or array
        Design matrix columns
    data : DataFrame, optional
        Dataset
    **kwargs
        Additional arguments passed to MultiFit

    Returns
    -------
    MultiFit
        Fitted model object

    Examples
    --------
    >>> model = multifit(y='signal', X=['one', 't'], data=data)
    >>> model.coef
    >>> model = multifit(y='signal', X=['one', 't'], data=data, lam=0.5)
    """
    return MultiFit(y=y, X=X, data=data, **kwargs)
