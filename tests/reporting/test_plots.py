"""Tests for MUTATE charts."""

from pathlib import Path

import pytest

from credit_mutate.reporting.plots import (
    plot_coefficient_distributions,
    plot_r2_distributions,
    save_all_charts,
)
from credit_mutate.resampling.evaluator import MutateEvaluator
from credit_mutate.resampling.model_spec import ModelSpec, resolve_design
from credit_mutate.resampling.ols import fit_full_data


@pytest.fixture
def design(regression_data):
    return resolve_design(regression_data, ModelSpec("y", ("x1", "x2", "grp")))


@pytest.fixture
def table(design):
    return MutateEvaluator(0.9, 15).run_design(design)


class TestPlots:

    def test_coefficient_chart(self, tmp_path, table, design):
        path = plot_coefficient_distributions(
            table, tmp_path / "plots", full_fit=fit_full_data(design)
        )
        assert Path(path).name == "coefficient_distributions.png"
        assert Path(path).stat().st_size > 0

    def test_coefficient_chart_without_full_fit(self, tmp_path, table):
        path = plot_coefficient_distributions(table, tmp_path)
        assert Path(path).exists()

    def test_r2_chart(self, tmp_path, table):
        path = plot_r2_distributions(table, tmp_path)
        assert Path(path).name == "r2_distributions.png"
        assert Path(path).exists()

    def test_save_all(self, tmp_path, table, design):
        paths = save_all_charts(table, tmp_path, full_fit=fit_full_data(design))
        assert [Path(p).name for p in paths] == [
            "coefficient_distributions.png",
            "r2_distributions.png",
        ]
