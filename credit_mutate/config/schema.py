"""
Pydantic Configuration Schema

Defines all configuration models for the MUTATE study.
All fields have defaults matching the reference credit analysis:
loan Amount regressed on four predictors, 1000 splits at 90/10.
"""

from typing import List, Literal, Optional
from pydantic import BaseModel, Field, field_validator, model_validator


DEFAULT_PREDICTORS = [
    "Duration",
    "InstallmentRatePercentage",
    "Age",
    "Telephone",
]


class DataConfig(BaseModel):
    """Data source configuration."""

    model_config = {"frozen": True}

    input_path: str = "data/sample/german_credit.csv"
    drop_columns: List[str] = Field(default_factory=list)


class ModelSpecConfig(BaseModel):
    """Fixed OLS model form: target and ordered predictors.

    An empty predictor list means predictors come from the
    selection step.
    """

    model_config = {"frozen": True}

    target: str = "Amount"
    predictors: List[str] = Field(default_factory=lambda: list(DEFAULT_PREDICTORS))

    @field_validator("predictors")
    @classmethod
    def predictors_unique(cls, value: List[str]) -> List[str]:
        duplicates = sorted({p for p in value if value.count(p) > 1})
        if duplicates:
            raise ValueError(f"Duplicate predictors: {duplicates}")
        return value

    @model_validator(mode="after")
    def target_not_predictor(self) -> "ModelSpecConfig":
        if self.target in self.predictors:
            raise ValueError(
                f"Target '{self.target}' cannot also be a predictor"
            )
        return self


class ResamplingConfig(BaseModel):
    """MUTATE loop configuration."""

    model_config = {"frozen": True}

    split_ratio: float = Field(default=0.90, gt=0.0, lt=1.0)
    iterations: int = Field(default=1000, ge=1)
    seed_offset: int = Field(default=0, ge=0)
    n_jobs: int = 1


class TreeSelectionConfig(BaseModel):
    """Decision tree exploration configuration."""

    model_config = {"frozen": True}

    max_depth: int = Field(default=4, ge=1)
    min_samples_leaf: int = Field(default=20, ge=1)


class LassoSelectionConfig(BaseModel):
    """LASSO exploration configuration."""

    model_config = {"frozen": True}

    cv: int = Field(default=10, ge=2)
    max_iter: int = Field(default=10000, ge=1)


class SelectionConfig(BaseModel):
    """Predictor selection configuration."""

    model_config = {"frozen": True}

    enabled: bool = True
    candidates: List[str] = Field(default_factory=list)
    max_predictors: int = Field(default=4, ge=1)
    random_state: int = 42
    tree: TreeSelectionConfig = Field(default_factory=TreeSelectionConfig)
    lasso: LassoSelectionConfig = Field(default_factory=LassoSelectionConfig)


class OutputConfig(BaseModel):
    """Output configuration."""

    model_config = {"frozen": True}

    base_dir: str = "outputs/mutate"
    save_iterations: bool = True
    save_selection: bool = True
    save_plots: bool = True


class ReproducibilityConfig(BaseModel):
    """Reproducibility and logging configuration."""

    model_config = {"frozen": True}

    save_config: bool = True
    save_metadata: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_file: Optional[str] = None


class PipelineConfig(BaseModel):
    """Top-level study configuration combining all sections."""

    model_config = {"frozen": True}

    data: DataConfig = Field(default_factory=DataConfig)
    model: ModelSpecConfig = Field(default_factory=ModelSpecConfig)
    resampling: ResamplingConfig = Field(default_factory=ResamplingConfig)
    selection: SelectionConfig = Field(default_factory=SelectionConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    reproducibility: ReproducibilityConfig = Field(default_factory=ReproducibilityConfig)
