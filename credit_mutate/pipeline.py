"""
MUTATE Study Pipeline

Orchestrates the study end to end:
1. Load the credit dataset
2. Explore predictors (decision tree + LASSO)
3. Resolve the fixed OLS model against the dataset
4. Fit the model once on the full dataset
5. MUTATE: repeated train/holdout splits and refits
6. Summarize coefficient and R-squared distributions
7. Compare resampled statistics to the full-data fit
8. Save tables, charts and run metadata
"""

from typing import Any, Dict, List, Optional
import time

import pandas as pd

from credit_mutate.config.schema import PipelineConfig
from credit_mutate.core.exceptions import ConfigurationError
from credit_mutate.core.logger import PipelineLogger
from credit_mutate.data.loader import load_dataset, prepare_dataset
from credit_mutate.io.output_manager import OutputManager
from credit_mutate.reporting.plots import save_all_charts
from credit_mutate.resampling.evaluator import MutateEvaluator, make_seed_fn, training_size
from credit_mutate.resampling.model_spec import ModelSpec, resolve_design
from credit_mutate.resampling.ols import fit_full_data
from credit_mutate.resampling.summary import compare_with_full_fit, summarize
from credit_mutate.selection.selector import PredictorSelection, run_selection


class MutateStudy:
    """
    End-to-end MUTATE study for one configuration.

    Args:
        config: Frozen study configuration.
        output_manager: Where artifacts go; nothing is written without one.
        dataset: In-memory table to use instead of reading
            config.data.input_path.
    """

    def __init__(
        self,
        config: PipelineConfig,
        output_manager: Optional[OutputManager] = None,
        dataset: Optional[pd.DataFrame] = None,
    ):
        self.config = config
        self.output_manager = output_manager
        self._dataset = dataset
        self.plog = PipelineLogger(__name__)
        if output_manager is not None:
            self.plog.set_context(run_id=output_manager.run_id)

    def _load(self) -> pd.DataFrame:
        target = self.config.model.target
        if self._dataset is not None:
            return prepare_dataset(self._dataset, target)
        return load_dataset(
            self.config.data.input_path,
            target_column=target,
            drop_columns=list(self.config.data.drop_columns),
        )

    def _choose_predictors(
        self, selection: Optional[PredictorSelection]
    ) -> List[str]:
        if self.config.model.predictors:
            self.plog.debug(f"Predictors from config: {list(self.config.model.predictors)}")
            return list(self.config.model.predictors)
        if selection is None:
            raise ConfigurationError(
                "model.predictors is empty and selection is disabled"
            )
        self.plog.info(f"Predictors from selection: {selection.selected}")
        return list(selection.selected)

    def run(self) -> Dict[str, Any]:
        """Execute the full study.

        Returns:
            Dict with the dataset shape, selection, model spec, full-data
            fit, result table, summary and comparison table.
        """
        start = time.time()
        try:
            results = self._run()
        except Exception as e:
            self.plog.error(f"Study failed: {type(e).__name__}: {e}")
            if self.output_manager is not None:
                self.output_manager.mark_failed()
            raise

        results['duration_seconds'] = round(time.time() - start, 2)
        if self.output_manager is not None:
            self.output_manager.mark_complete()
            results['run_dir'] = str(self.output_manager.run_dir)
        results['status'] = 'success'
        self.plog.step_complete("MUTATE study", results['duration_seconds'])
        return results

    def _run(self) -> Dict[str, Any]:
        results: Dict[str, Any] = {}

        step = time.time()
        self.plog.step_start("Load data")
        dataset = self._load()
        self.plog.data_stats("dataset", len(dataset), len(dataset.columns))
        results['n_rows'] = len(dataset)
        results['n_columns'] = len(dataset.columns)
        self.plog.step_complete("Load data", time.time() - step)

        selection = None
        if self.config.selection.enabled:
            step = time.time()
            self.plog.step_start("Predictor exploration")
            selection = run_selection(
                dataset, self.config.model.target, self.config.selection
            )
            results['selection'] = selection
            self.plog.step_complete("Predictor exploration", time.time() - step)

        predictors = self._choose_predictors(selection)
        spec = ModelSpec(target=self.config.model.target, predictors=tuple(predictors))
        results['model_spec'] = spec
        design = resolve_design(dataset, spec)

        # Resampling parameters are checked before any fit is made
        resampling = self.config.resampling
        evaluator = MutateEvaluator(
            split_ratio=resampling.split_ratio,
            iterations=resampling.iterations,
            seed_fn=make_seed_fn(resampling.seed_offset),
            n_jobs=resampling.n_jobs,
        )
        evaluator.check_run(design.n_rows)
        self.plog.data_stats(
            "training split", training_size(design.n_rows, resampling.split_ratio)
        )

        step = time.time()
        self.plog.step_start("Full-data fit")
        full_fit = fit_full_data(design)
        results['full_fit'] = full_fit
        self.plog.metric("full_data_r2", round(full_fit.rsquared, 4))
        self.plog.step_complete("Full-data fit", time.time() - step)

        step = time.time()
        self.plog.step_start("MUTATE")
        table = evaluator.run_design(design)
        results['result_table'] = table
        self.plog.step_complete("MUTATE", time.time() - step)

        self.plog.step_start("Summary")
        summary = summarize(table)
        comparison = compare_with_full_fit(summary, full_fit)
        results['summary'] = summary
        results['comparison'] = comparison
        self.plog.metric("mean_r2_train", round(summary.r2_train_mean, 4))
        self.plog.metric("mean_r2_holdout", round(summary.r2_holdout_mean, 4))
        self.plog.metric("mean_r2_diff", round(summary.r2_diff_mean, 4))

        if self.output_manager is not None:
            self._save(results)

        return results

    def _save(self, results: Dict[str, Any]) -> None:
        om = self.output_manager
        out_cfg = self.config.output

        if self.config.reproducibility.save_config:
            om.save_config_snapshot(self.config)

        selection = results.get('selection')
        if selection is not None and out_cfg.save_selection:
            om.save_artifact('selection', selection.to_frame(), subdir='reports')
            om.save_artifact('tree_rules', selection.tree.rules, fmt='txt', subdir='reports')

        table = results['result_table']
        if out_cfg.save_iterations:
            om.save_artifact('mutate_iterations', table.to_frame())

        om.save_artifact('summary', results['summary'].to_frame(), subdir='reports', index=True)
        om.save_artifact('full_data_fit', results['full_fit'].to_frame(), subdir='reports', index=True)
        om.save_artifact('comparison', results['comparison'], subdir='reports', index=True)

        if out_cfg.save_plots:
            try:
                results['charts'] = save_all_charts(
                    table, om.subdir('plots'), full_fit=results['full_fit']
                )
            except (OSError, ValueError) as e:
                self.plog.warning(f"REPORT | Chart generation failed: {e}")

        spec = results['model_spec']
        summary = results['summary']
        om.add_metadata(
            model=spec.formula(),
            iterations=len(table),
            split_ratio=self.config.resampling.split_ratio,
            mean_r2_train=summary.r2_train_mean,
            mean_r2_holdout=summary.r2_holdout_mean,
        )
