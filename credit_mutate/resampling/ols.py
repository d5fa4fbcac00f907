"""
OLS Fitting

Thin statsmodels wrappers used by the resampling loop (one fit per
iteration on the training rows) and by the single full-data reference fit.
"""

from dataclasses import dataclass
from typing import Optional, Sequence
import logging

import numpy as np
import pandas as pd
import statsmodels.api as sm

from credit_mutate.core.exceptions import DegenerateHoldoutError, FitError
from credit_mutate.resampling.model_spec import Design, design_rank


logger = logging.getLogger(__name__)

# Relative spread below which a series counts as constant
CONSTANT_RTOL = 1e-12


def is_constant(values: np.ndarray) -> bool:
    """True when the spread of values is rounding noise around their scale."""
    values = np.asarray(values, dtype=float)
    if len(values) == 0:
        return True
    scale = max(1.0, float(np.abs(values).max()))
    return float(np.std(values)) <= CONSTANT_RTOL * scale


@dataclass(frozen=True, eq=False)
class FullDataFit:
    """Reference OLS fit on every row of the dataset."""
    coefficients: pd.Series
    std_errors: pd.Series
    t_values: pd.Series
    p_values: pd.Series
    rsquared: float
    rsquared_adj: float
    n_obs: int

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame({
            'Coefficient': self.coefficients,
            'Std_Error': self.std_errors,
            't_Value': self.t_values,
            'p_Value': self.p_values,
        })


def fit_ols(
    X: np.ndarray,
    y: np.ndarray,
    column_names: Sequence[str],
    iteration: Optional[int] = None,
):
    """
    Fit OLS of y on X (X already carries the intercept column).

    Args:
        X: Design matrix, intercept first.
        y: Target vector.
        column_names: Names of the X columns, used in error details.
        iteration: Resampling iteration, reported on failure.

    Returns:
        statsmodels RegressionResults.

    Raises:
        FitError: If X is rank-deficient (statsmodels would silently fall
            back to a pseudo-inverse solution here), or if y is constant,
            which leaves R-squared undefined.
    """
    n_rows, n_cols = X.shape
    rank = design_rank(X)
    if rank < n_cols:
        constant_cols = [
            name for j, name in enumerate(column_names)
            if j > 0 and n_rows > 0 and np.ptp(X[:, j]) == 0
        ]
        raise FitError(
            f"Rank-deficient design: rank {rank} < {n_cols} columns on {n_rows} rows",
            iteration=iteration,
            details={
                "rank": rank,
                "n_columns": n_cols,
                "n_rows": n_rows,
                "constant_columns": constant_cols,
            },
        )
    if is_constant(y):
        raise FitError(
            f"Zero variance in the target over {n_rows} training rows",
            iteration=iteration,
            details={"n_rows": n_rows, "target_value": float(y[0])},
        )
    return sm.OLS(y, X).fit()


def squared_correlation(
    actual: np.ndarray,
    predicted: np.ndarray,
    iteration: Optional[int] = None,
) -> float:
    """
    Holdout R-squared: squared Pearson correlation of actual vs predicted.

    This is not 1 - SSres/SStot; it ignores bias and scale of the
    predictions.

    Raises:
        DegenerateHoldoutError: Fewer than two values, or zero variance
            in either series.
    """
    actual = np.asarray(actual, dtype=float)
    predicted = np.asarray(predicted, dtype=float)

    if len(actual) < 2:
        raise DegenerateHoldoutError(
            f"Holdout has {len(actual)} row(s); correlation needs at least 2",
            iteration=iteration,
            details={"n_holdout": len(actual)},
        )
    if is_constant(actual) or is_constant(predicted):
        raise DegenerateHoldoutError(
            "Zero variance in holdout actual or predicted values",
            iteration=iteration,
            details={
                "actual_sd": float(np.std(actual)),
                "predicted_sd": float(np.std(predicted)),
            },
        )

    r = np.corrcoef(actual, predicted)[0, 1]
    return float(r ** 2)


def fit_full_data(design: Design) -> FullDataFit:
    """
    Single OLS fit of the model on the entire dataset.

    Raises:
        FitError: If the full design is rank-deficient.
    """
    results = fit_ols(design.X, design.y, design.column_names)
    index = list(design.column_names)

    fit = FullDataFit(
        coefficients=pd.Series(results.params, index=index, name='Coefficient'),
        std_errors=pd.Series(results.bse, index=index, name='Std_Error'),
        t_values=pd.Series(results.tvalues, index=index, name='t_Value'),
        p_values=pd.Series(results.pvalues, index=index, name='p_Value'),
        rsquared=float(results.rsquared),
        rsquared_adj=float(results.rsquared_adj),
        n_obs=int(results.nobs),
    )
    logger.info(
        f"FIT | Full data {design.spec.formula()}: n={fit.n_obs}, "
        f"R2={fit.rsquared:.4f}, adj R2={fit.rsquared_adj:.4f}"
    )
    for name in index:
        logger.debug(
            f"FIT | {name}: {fit.coefficients[name]:.4f} "
            f"(SE {fit.std_errors[name]:.4f})"
        )
    return fit
