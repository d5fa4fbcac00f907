"""Tests for decision tree / LASSO predictor exploration."""

import pandas as pd
import pytest

from credit_mutate.config.schema import SelectionConfig
from credit_mutate.core.exceptions import FeatureSelectionError
from credit_mutate.selection.encoding import candidate_fields, encode_candidates
from credit_mutate.selection.lasso_selector import LassoExploration, explore_lasso
from credit_mutate.selection.selector import (
    PredictorSelection,
    run_selection,
    select_predictors,
)
from credit_mutate.selection.tree_selector import TreeExploration, explore_tree


def _tree(importances):
    df = pd.DataFrame(
        {"Feature": list(importances), "Importance": list(importances.values())}
    ).sort_values("Importance", ascending=False).reset_index(drop=True)
    df["Rank"] = range(1, len(df) + 1)
    return TreeExploration(importance_df=df, rules="", r2_in_sample=0.5)


def _lasso(coefs):
    df = pd.DataFrame(
        {"Feature": list(coefs), "Abs_Coefficient": list(coefs.values())}
    ).sort_values("Abs_Coefficient", ascending=False).reset_index(drop=True)
    df["Selected"] = df["Abs_Coefficient"] > 0
    df["Rank"] = range(1, len(df) + 1)
    return LassoExploration(coefficient_df=df, alpha=1.0, r2_in_sample=0.4)


# ===================================================================
# Encoding
# ===================================================================

class TestEncoding:

    def test_all_non_target_fields(self, credit_data):
        fields = candidate_fields(credit_data, "Amount")
        assert "Amount" not in fields
        assert len(fields) == len(credit_data.columns) - 1

    def test_explicit_candidates(self, credit_data):
        assert candidate_fields(credit_data, "Amount", ["Age", "Amount"]) == ["Age"]

    def test_absent_candidates(self, credit_data):
        with pytest.raises(FeatureSelectionError) as exc_info:
            candidate_fields(credit_data, "Amount", ["Age", "Salary"])
        assert exc_info.value.details["absent"] == ["Salary"]

    def test_no_candidates(self, credit_data):
        with pytest.raises(FeatureSelectionError):
            candidate_fields(credit_data[["Amount"]], "Amount")

    def test_one_hot_source_map(self, credit_data):
        encoded, source = encode_candidates(credit_data, ["Age", "Housing"])
        assert "Age" in encoded.columns
        assert {c for c in encoded.columns if source[c] == "Housing"} == {
            "Housing=Rent", "Housing=Own", "Housing=ForFree",
        }


# ===================================================================
# Explorations
# ===================================================================

class TestExploreTree:

    def test_duration_most_important(self, credit_data):
        result = explore_tree(credit_data, "Amount", max_depth=3, min_samples_leaf=10)
        assert result.importance_df["Feature"].iloc[0] == "Duration"
        assert result.importance_df["Importance"].sum() == pytest.approx(1.0)
        assert "Duration" in result.rules
        assert result.used_fields[0] == "Duration"

    def test_field_level_rows(self, credit_data):
        result = explore_tree(credit_data, "Amount", candidates=["Duration", "Job"])
        assert set(result.importance_df["Feature"]) == {"Duration", "Job"}


class TestExploreLasso:

    def test_keeps_duration(self, credit_data):
        result = explore_lasso(credit_data, "Amount", cv=5)
        assert "Duration" in result.selected_fields
        assert result.alpha > 0
        assert list(result.coefficient_df.columns) == [
            "Feature", "Abs_Coefficient", "Selected", "Rank",
        ]
        assert set(result.coefficient_df["Feature"]) == set(credit_data.columns) - {"Amount"}


# ===================================================================
# Combination
# ===================================================================

class TestSelectPredictors:

    def test_orders_by_tree_importance(self):
        tree = _tree({"Duration": 0.6, "Age": 0.1, "Job": 0.3})
        lasso = _lasso({"Duration": 5.0, "Age": 2.0, "Job": 1.0})
        assert select_predictors(tree, lasso, 4) == ["Duration", "Job", "Age"]

    def test_only_lasso_survivors(self):
        tree = _tree({"Duration": 0.6, "Job": 0.4})
        lasso = _lasso({"Duration": 5.0, "Job": 0.0})
        assert select_predictors(tree, lasso, 4) == ["Duration"]

    def test_lasso_rank_breaks_ties(self):
        tree = _tree({"Duration": 1.0, "Age": 0.0, "Telephone": 0.0})
        lasso = _lasso({"Duration": 5.0, "Age": 1.0, "Telephone": 3.0})
        assert select_predictors(tree, lasso, 4) == ["Duration", "Telephone", "Age"]

    def test_cap(self):
        tree = _tree({"a": 0.4, "b": 0.3, "c": 0.2, "d": 0.1})
        lasso = _lasso({"a": 1.0, "b": 1.5, "c": 2.0, "d": 2.5})
        assert select_predictors(tree, lasso, 2) == ["a", "b"]

    def test_nothing_kept(self):
        tree = _tree({"a": 1.0})
        lasso = _lasso({"a": 0.0})
        with pytest.raises(FeatureSelectionError, match="kept no predictor"):
            select_predictors(tree, lasso)


class TestRunSelection:

    def test_end_to_end(self, credit_data):
        config = SelectionConfig(
            max_predictors=3,
            tree={"max_depth": 3, "min_samples_leaf": 10},
            lasso={"cv": 5},
        )
        selection = run_selection(credit_data, "Amount", config)

        assert isinstance(selection, PredictorSelection)
        assert 1 <= len(selection.selected) <= 3
        assert "Duration" in selection.selected
        assert "Amount" not in selection.selected

        frame = selection.to_frame()
        assert list(frame.columns) == [
            "Feature", "Importance", "Abs_Coefficient", "Lasso_Selected", "Chosen",
        ]
        assert frame["Chosen"].sum() == len(selection.selected)

    def test_restricted_candidates(self, credit_data):
        config = SelectionConfig(
            candidates=["Duration", "Age"],
            tree={"max_depth": 2, "min_samples_leaf": 10},
            lasso={"cv": 5},
        )
        selection = run_selection(credit_data, "Amount", config)
        assert set(selection.selected) <= {"Duration", "Age"}
