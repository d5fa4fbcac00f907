"""
Resampling Summary

Aggregates a completed ResultTable into per-coefficient and per-R-squared
means and sample standard deviations, and lines the resampled coefficient
distribution up against the single full-data fit.
"""

from dataclasses import dataclass
import logging

import numpy as np
import pandas as pd

from credit_mutate.resampling.evaluator import ResultTable
from credit_mutate.resampling.ols import FullDataFit


logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class SummaryStats:
    """Means and sample SDs (ddof=1) over all iterations."""
    n_iterations: int
    coefficients: pd.DataFrame
    r2_train_mean: float
    r2_train_sd: float
    r2_holdout_mean: float
    r2_holdout_sd: float
    r2_diff_mean: float

    def to_frame(self) -> pd.DataFrame:
        """Coefficient rows followed by the two R-squared rows."""
        r2 = pd.DataFrame(
            {
                'Mean': [self.r2_train_mean, self.r2_holdout_mean],
                'SD': [self.r2_train_sd, self.r2_holdout_sd],
            },
            index=['R2_Train', 'R2_Holdout'],
        )
        out = pd.concat([self.coefficients, r2])
        out.index.name = 'Statistic'
        return out


def _mean(values: np.ndarray) -> float:
    # Constant series: return the value itself, free of summation rounding
    if np.ptp(values) == 0:
        return float(values[0])
    return float(np.mean(values))


def _sample_sd(values: np.ndarray) -> float:
    # Sample SD is undefined for a single iteration
    if len(values) < 2:
        return float('nan')
    if np.ptp(values) == 0:
        return 0.0
    return float(np.std(values, ddof=1))


def summarize(table: ResultTable) -> SummaryStats:
    """
    Mean and sample standard deviation of every coefficient and of both
    R-squared series, plus mean(holdout R2) - mean(train R2).
    """
    coef = table.coefficient_matrix()
    r2_train = table.r2_train()
    r2_holdout = table.r2_holdout()

    coefficients = pd.DataFrame(
        {
            'Mean': [_mean(coef[:, j]) for j in range(coef.shape[1])],
            'SD': [_sample_sd(coef[:, j]) for j in range(coef.shape[1])],
        },
        index=list(table.coefficient_names),
    )

    stats = SummaryStats(
        n_iterations=len(table),
        coefficients=coefficients,
        r2_train_mean=_mean(r2_train),
        r2_train_sd=_sample_sd(r2_train),
        r2_holdout_mean=_mean(r2_holdout),
        r2_holdout_sd=_sample_sd(r2_holdout),
        r2_diff_mean=_mean(r2_holdout) - _mean(r2_train),
    )

    for name, row in coefficients.iterrows():
        logger.info(f"SUMMARY | {name}: mean={row['Mean']:.4f}, sd={row['SD']:.4f}")
    logger.info(
        f"SUMMARY | R2 train: mean={stats.r2_train_mean:.4f}, sd={stats.r2_train_sd:.4f}"
    )
    logger.info(
        f"SUMMARY | R2 holdout: mean={stats.r2_holdout_mean:.4f}, "
        f"sd={stats.r2_holdout_sd:.4f}"
    )
    logger.info(f"SUMMARY | Mean R2 difference (holdout - train): {stats.r2_diff_mean:+.4f}")
    return stats


def compare_with_full_fit(summary: SummaryStats, full_fit: FullDataFit) -> pd.DataFrame:
    """
    Resampled coefficient distribution next to the full-data estimate.

    Columns: Full_Coefficient, Full_Std_Error, Resampled_Mean,
    Resampled_SD, Difference (resampled mean - full), SD_to_SE_Ratio.
    """
    resampled = summary.coefficients
    if list(resampled.index) != list(full_fit.coefficients.index):
        raise ValueError(
            "Coefficient names differ between resampled summary and full fit: "
            f"{list(resampled.index)} vs {list(full_fit.coefficients.index)}"
        )

    comparison = pd.DataFrame({
        'Full_Coefficient': full_fit.coefficients,
        'Full_Std_Error': full_fit.std_errors,
        'Resampled_Mean': resampled['Mean'],
        'Resampled_SD': resampled['SD'],
    })
    comparison['Difference'] = comparison['Resampled_Mean'] - comparison['Full_Coefficient']
    comparison['SD_to_SE_Ratio'] = comparison['Resampled_SD'] / comparison['Full_Std_Error']
    comparison.index.name = 'Coefficient'

    for name, row in comparison.iterrows():
        logger.info(
            f"COMPARE | {name}: full={row['Full_Coefficient']:.4f} "
            f"(SE {row['Full_Std_Error']:.4f}), resampled={row['Resampled_Mean']:.4f} "
            f"(SD {row['Resampled_SD']:.4f})"
        )
    logger.info(
        f"COMPARE | R2 full data={full_fit.rsquared:.4f}, "
        f"resampled train={summary.r2_train_mean:.4f}, "
        f"holdout={summary.r2_holdout_mean:.4f}"
    )
    return comparison
