"""Tests for the Pydantic config schema and the YAML loader."""

import json

import pytest
import yaml
from pydantic import ValidationError

from credit_mutate.config.loader import load_config, save_config
from credit_mutate.config.schema import (
    DEFAULT_PREDICTORS,
    ModelSpecConfig,
    PipelineConfig,
    ResamplingConfig,
)
from credit_mutate.core.exceptions import ConfigurationError


# ===================================================================
# Schema
# ===================================================================

class TestDefaults:

    def test_reference_study_defaults(self):
        config = PipelineConfig()
        assert config.model.target == "Amount"
        assert config.model.predictors == DEFAULT_PREDICTORS
        assert config.resampling.split_ratio == 0.90
        assert config.resampling.iterations == 1000
        assert config.resampling.seed_offset == 0
        assert config.resampling.n_jobs == 1
        assert config.selection.enabled is True

    def test_frozen(self):
        config = PipelineConfig()
        with pytest.raises(ValidationError):
            config.resampling = ResamplingConfig(iterations=5)

    def test_sample_config(self, sample_config):
        assert sample_config.resampling.iterations == 20
        assert sample_config.selection.tree.max_depth == 3
        assert sample_config.selection.lasso.cv == 5


class TestResamplingConfig:

    @pytest.mark.parametrize("ratio", [0.0, 1.0, -0.1, 1.5])
    def test_split_ratio_bounds(self, ratio):
        with pytest.raises(ValidationError):
            ResamplingConfig(split_ratio=ratio)

    def test_iterations_positive(self):
        with pytest.raises(ValidationError):
            ResamplingConfig(iterations=0)

    def test_seed_offset_non_negative(self):
        with pytest.raises(ValidationError):
            ResamplingConfig(seed_offset=-1)


class TestModelSpecConfig:

    def test_duplicate_predictors_rejected(self):
        with pytest.raises(ValidationError, match="Duplicate predictors"):
            ModelSpecConfig(predictors=["Age", "Age"])

    def test_target_as_predictor_rejected(self):
        with pytest.raises(ValidationError, match="cannot also be a predictor"):
            ModelSpecConfig(target="Amount", predictors=["Amount", "Age"])

    def test_empty_predictors_allowed(self):
        assert ModelSpecConfig(predictors=[]).predictors == []


# ===================================================================
# Loader
# ===================================================================

class TestLoadConfig:

    def test_defaults_without_yaml(self):
        config = load_config()
        assert config == PipelineConfig()

    def test_from_yaml(self, tmp_path, sample_config_dict):
        path = tmp_path / "study.yaml"
        path.write_text(yaml.dump(sample_config_dict))
        config = load_config(str(path))
        assert config.resampling.iterations == 20
        assert config.model.predictors == sample_config_dict["model"]["predictors"]

    def test_missing_yaml(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "nope.yaml"))

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("resampling: [unclosed")
        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            load_config(str(path))

    def test_invalid_values_wrapped(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text(yaml.dump({"resampling": {"split_ratio": 1.5}}))
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(str(path))
        assert exc_info.value.details["errors"]

    def test_cli_overrides(self):
        config = load_config(cli_overrides={
            "resampling.iterations": 50,
            "resampling.split_ratio": 0.8,
            "model.predictors": ["Duration"],
            "output.base_dir": None,
        })
        assert config.resampling.iterations == 50
        assert config.resampling.split_ratio == 0.8
        assert config.model.predictors == ["Duration"]
        assert config.output.base_dir == "outputs/mutate"

    def test_nested_overrides_merge(self, tmp_path, sample_config_dict):
        path = tmp_path / "study.yaml"
        path.write_text(yaml.dump(sample_config_dict))
        config = load_config(
            str(path), overrides={"selection": {"tree": {"max_depth": 6}}}
        )
        assert config.selection.tree.max_depth == 6
        assert config.selection.tree.min_samples_leaf == 10

    def test_input_path_resolved_next_to_yaml(self, tmp_path):
        cfg_dir = tmp_path / "cfg"
        cfg_dir.mkdir()
        (cfg_dir / "credit.csv").write_text("Amount\n1\n")
        path = cfg_dir / "study.yaml"
        path.write_text(yaml.dump({"data": {"input_path": "credit.csv"}}))
        config = load_config(str(path))
        assert config.data.input_path == str((cfg_dir / "credit.csv").resolve())

    def test_unresolvable_input_path_kept(self, tmp_path):
        path = tmp_path / "study.yaml"
        path.write_text(yaml.dump({"data": {"input_path": "elsewhere/credit.csv"}}))
        config = load_config(str(path))
        assert config.data.input_path == "elsewhere/credit.csv"


class TestSaveConfig:

    def test_yaml_roundtrip(self, tmp_path, sample_config):
        path = tmp_path / "out" / "config.yaml"
        save_config(sample_config, str(path))
        assert load_config(str(path)) == sample_config

    def test_json(self, tmp_path, sample_config):
        path = tmp_path / "config.json"
        save_config(sample_config, str(path))
        data = json.loads(path.read_text())
        assert data["resampling"]["iterations"] == 20
