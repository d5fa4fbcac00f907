"""Tests for model specification validation and design resolution."""

import numpy as np
import pandas as pd
import pytest

from credit_mutate.core.exceptions import InvalidSpecError
from credit_mutate.resampling.model_spec import (
    INTERCEPT,
    ModelSpec,
    design_rank,
    resolve_design,
    validate_spec,
)


class TestModelSpec:

    def test_predictors_stored_as_tuple(self):
        spec = ModelSpec(target="y", predictors=["x1", "x2"])
        assert spec.predictors == ("x1", "x2")
        assert spec.fields == ["y", "x1", "x2"]

    def test_formula(self):
        spec = ModelSpec("Amount", ("Duration", "Age"))
        assert spec.formula() == "Amount ~ Duration + Age"

    def test_hashable_and_equal(self):
        assert ModelSpec("y", ["x"]) == ModelSpec("y", ("x",))
        assert len({ModelSpec("y", ["x"]), ModelSpec("y", ("x",))}) == 1

    def test_from_config(self, sample_config):
        spec = ModelSpec.from_config(sample_config.model)
        assert spec.target == "Amount"
        assert spec.predictors[0] == "Duration"


class TestValidateSpec:

    def test_valid(self, linear_data):
        validate_spec(linear_data, ModelSpec("y", ("x",)))

    def test_absent_predictor(self, linear_data):
        with pytest.raises(InvalidSpecError) as exc_info:
            validate_spec(linear_data, ModelSpec("y", ("x", "missing")))
        assert exc_info.value.fields == ["missing"]

    def test_absent_target(self, linear_data):
        with pytest.raises(InvalidSpecError) as exc_info:
            validate_spec(linear_data, ModelSpec("Amount", ("x",)))
        assert exc_info.value.fields == ["Amount"]

    def test_empty_dataset(self):
        empty = pd.DataFrame({"x": pd.Series([], dtype=float), "y": pd.Series([], dtype=float)})
        with pytest.raises(InvalidSpecError, match="empty"):
            validate_spec(empty, ModelSpec("y", ("x",)))

    def test_no_predictors(self, linear_data):
        with pytest.raises(InvalidSpecError, match="no predictors"):
            validate_spec(linear_data, ModelSpec("y", ()))

    def test_duplicate_predictor(self, linear_data):
        with pytest.raises(InvalidSpecError) as exc_info:
            validate_spec(linear_data, ModelSpec("y", ("x", "x")))
        assert exc_info.value.fields == ["x"]

    def test_target_as_predictor(self, linear_data):
        with pytest.raises(InvalidSpecError):
            validate_spec(linear_data, ModelSpec("y", ("x", "y")))

    def test_missing_values(self, linear_data):
        data = linear_data.copy()
        data.loc[3, "x"] = np.nan
        with pytest.raises(InvalidSpecError) as exc_info:
            validate_spec(data, ModelSpec("y", ("x",)))
        assert exc_info.value.fields == ["x"]
        assert exc_info.value.details["missing_counts"] == {"x": 1}

    def test_non_numeric_target(self, linear_data):
        data = linear_data.assign(label=["a", "b"] * 5)
        with pytest.raises(InvalidSpecError, match="numeric"):
            validate_spec(data, ModelSpec("label", ("x",)))

    def test_boolean_target(self, linear_data):
        data = linear_data.assign(flag=[True, False] * 5)
        with pytest.raises(InvalidSpecError, match="numeric"):
            validate_spec(data, ModelSpec("flag", ("x",)))


class TestResolveDesign:

    def test_numeric_columns(self, linear_data):
        design = resolve_design(linear_data, ModelSpec("y", ("x",)))
        assert design.column_names == (INTERCEPT, "x")
        assert design.n_rows == 10
        assert design.n_params == 2
        np.testing.assert_array_equal(design.X[:, 0], np.ones(10))
        np.testing.assert_array_equal(design.X[:, 1], linear_data["x"].to_numpy())
        np.testing.assert_array_equal(design.y, linear_data["y"].to_numpy())

    def test_predictor_order_kept(self, regression_data):
        design = resolve_design(regression_data, ModelSpec("y", ("x2", "x1")))
        assert design.column_names == (INTERCEPT, "x2", "x1")

    def test_categorical_treatment_coding(self, regression_data):
        design = resolve_design(regression_data, ModelSpec("y", ("x1", "grp")))
        assert design.column_names == (INTERCEPT, "x1", "grp[T.b]", "grp[T.c]")
        is_b = (regression_data["grp"] == "b").to_numpy(dtype=float)
        np.testing.assert_array_equal(design.X[:, 2], is_b)

    def test_string_column_treated_as_categorical(self, linear_data):
        data = linear_data.assign(band=["hi", "lo"] * 5)
        design = resolve_design(data, ModelSpec("y", ("band",)))
        assert design.column_names == (INTERCEPT, "band[T.lo]")

    def test_single_level_categorical(self, linear_data):
        data = linear_data.assign(band=["only"] * 10)
        with pytest.raises(InvalidSpecError, match="single level") as exc_info:
            resolve_design(data, ModelSpec("y", ("band",)))
        assert exc_info.value.fields == ["band"]

    def test_unused_categories_ignored(self, linear_data):
        band = pd.Categorical(["hi", "lo"] * 5, categories=["hi", "lo", "unused"])
        design = resolve_design(linear_data.assign(band=band), ModelSpec("y", ("band",)))
        assert design.column_names == (INTERCEPT, "band[T.lo]")


class TestDesignRank:

    def test_full_rank(self, linear_data):
        design = resolve_design(linear_data, ModelSpec("y", ("x",)))
        assert design_rank(design.X) == 2

    def test_collinear(self, collinear_data):
        design = resolve_design(collinear_data, ModelSpec("y", ("x1", "x2")))
        assert design_rank(design.X) == 2

    def test_empty(self):
        assert design_rank(np.empty((0, 3))) == 0
