"""
Reporting Module

Charts for the MUTATE study.
"""

from credit_mutate.reporting.plots import (
    plot_coefficient_distributions,
    plot_r2_distributions,
    save_all_charts,
)

__all__ = [
    "plot_coefficient_distributions",
    "plot_r2_distributions",
    "save_all_charts",
]
