"""
MUTATE Charts

Histograms of the resampled coefficient distributions (full-data estimate
marked) and of training vs holdout R-squared.
"""

from pathlib import Path
from typing import List, Optional
import logging
import math

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt

from credit_mutate.resampling.evaluator import ResultTable
from credit_mutate.resampling.ols import FullDataFit


logger = logging.getLogger(__name__)


def plot_coefficient_distributions(
    table: ResultTable,
    output_dir: Path,
    full_fit: Optional[FullDataFit] = None,
    bins: int = 30,
) -> str:
    """
    One histogram panel per coefficient.

    Returns the path to the saved PNG.
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    chart_path = str(output_dir / "coefficient_distributions.png")

    coef = table.coefficient_matrix()
    names = list(table.coefficient_names)
    n_cols = min(3, len(names))
    n_rows = math.ceil(len(names) / n_cols)

    fig, axes = plt.subplots(n_rows, n_cols, figsize=(5 * n_cols, 4 * n_rows), squeeze=False)

    for j, name in enumerate(names):
        ax = axes[j // n_cols][j % n_cols]
        values = coef[:, j]
        ax.hist(values, bins=bins, color="#2563eb", alpha=0.7, edgecolor="white")
        ax.axvline(values.mean(), color="#1e3a8a", linewidth=1.5, label="Resampled mean")
        if full_fit is not None:
            ax.axvline(
                full_fit.coefficients[name],
                color="#dc2626",
                linestyle="--",
                linewidth=1.5,
                label="Full-data fit",
            )
        ax.set_title(name, fontsize=12)
        ax.grid(True, alpha=0.3)
        if j == 0:
            ax.legend(fontsize=8)

    for j in range(len(names), n_rows * n_cols):
        axes[j // n_cols][j % n_cols].axis("off")

    fig.suptitle(f"Coefficient distributions over {len(table)} splits", fontsize=14)
    plt.savefig(chart_path, dpi=150, bbox_inches="tight")
    plt.close(fig)

    logger.info(f"REPORT | Coefficient chart saved to {chart_path}")
    return chart_path


def plot_r2_distributions(
    table: ResultTable,
    output_dir: Path,
    bins: int = 30,
) -> str:
    """Overlaid histograms of training and holdout R-squared."""
    output_dir.mkdir(parents=True, exist_ok=True)
    chart_path = str(output_dir / "r2_distributions.png")

    fig, ax = plt.subplots(figsize=(10, 6))
    ax.hist(table.r2_train(), bins=bins, alpha=0.6, color="#2563eb", label="Train R²")
    ax.hist(table.r2_holdout(), bins=bins, alpha=0.6, color="#f59e0b", label="Holdout R²")

    ax.set_xlabel("R²", fontsize=12)
    ax.set_ylabel("Iterations", fontsize=12)
    ax.set_title("Training vs Holdout R²", fontsize=14)
    ax.legend(loc="upper right", fontsize=10)
    ax.grid(True, alpha=0.3)

    plt.savefig(chart_path, dpi=150, bbox_inches="tight")
    plt.close(fig)

    logger.info(f"REPORT | R2 chart saved to {chart_path}")
    return chart_path


def save_all_charts(
    table: ResultTable,
    output_dir: Path,
    full_fit: Optional[FullDataFit] = None,
) -> List[str]:
    return [
        plot_coefficient_distributions(table, output_dir, full_fit=full_fit),
        plot_r2_distributions(table, output_dir),
    ]
