"""
MUTATE Resampling Evaluator

Multiple Train and Test: repeatedly split the dataset into training and
holdout rows, refit one fixed OLS model on the training rows, and record
coefficients, training R-squared and holdout R-squared per iteration.

Each iteration i draws its partition from its own generator seeded with
seed_fn(i); no global random state is touched. Records are written into
a pre-sized ResultTable slot by iteration index, so sequential and
parallel runs produce identical tables.
"""

from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Sequence, Tuple
import logging
import numbers
import time

import numpy as np
import pandas as pd
from joblib import Parallel, delayed

from credit_mutate.core.exceptions import FitError, InvalidSpecError
from credit_mutate.resampling.model_spec import Design, ModelSpec, resolve_design
from credit_mutate.resampling.ols import fit_ols, squared_correlation


logger = logging.getLogger(__name__)

SeedFn = Callable[[int], int]

MAX_SEED = 2 ** 32 - 1


def default_seed_fn(iteration: int) -> int:
    """Seed for an iteration: the iteration index itself."""
    return iteration


def make_seed_fn(offset: int = 0) -> SeedFn:
    """Seed function ``i -> offset + i``."""
    def seed_fn(iteration: int) -> int:
        return offset + iteration
    return seed_fn


# ---------------------------------------------------------------------------
# Partitioning
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class Partition:
    """Disjoint train/holdout row positions covering 0..N-1."""
    seed: int
    train_rows: np.ndarray
    holdout_rows: np.ndarray

    @property
    def n_train(self) -> int:
        return len(self.train_rows)

    @property
    def n_holdout(self) -> int:
        return len(self.holdout_rows)


def training_size(n_rows: int, split_ratio: float) -> int:
    """Rows assigned to training: round(split_ratio * n_rows)."""
    return int(round(split_ratio * n_rows))


def partition_rows(n_rows: int, split_ratio: float, seed: int) -> Partition:
    """
    Random partition of row positions, reproducible from the seed alone.

    The first round(split_ratio * n_rows) positions of a seeded permutation
    are training rows; the remainder are holdout rows.
    """
    permutation = np.random.RandomState(seed).permutation(n_rows)
    n_train = training_size(n_rows, split_ratio)
    return Partition(
        seed=seed,
        train_rows=permutation[:n_train],
        holdout_rows=permutation[n_train:],
    )


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class IterationRecord:
    """Outcome of one MUTATE iteration."""
    iteration: int
    seed: int
    coefficients: Tuple[float, ...]
    r2_train: float
    r2_holdout: float
    n_train: int
    n_holdout: int

    @property
    def r2_diff(self) -> float:
        """Holdout minus training R-squared."""
        return self.r2_holdout - self.r2_train


class ResultTable:
    """
    Pre-sized, write-once table of iteration records.

    Slot k holds iteration k + 1. Slots are filled during a run and the
    table is sealed read-only once every slot is set.
    """

    def __init__(self, coefficient_names: Sequence[str], size: int):
        if size < 1:
            raise ValueError(f"ResultTable size must be positive, got {size}")
        self.coefficient_names: Tuple[str, ...] = tuple(coefficient_names)
        self._slots: List[Optional[IterationRecord]] = [None] * size
        self._sealed = False

    @classmethod
    def from_records(
        cls,
        coefficient_names: Sequence[str],
        records: Sequence[IterationRecord],
    ) -> "ResultTable":
        """Build and seal a table from records numbered 1..len(records)."""
        table = cls(coefficient_names, len(records))
        for record in records:
            table.put(record)
        table.seal()
        return table

    def put(self, record: IterationRecord) -> None:
        """Write a record into the slot of its iteration index."""
        if self._sealed:
            raise ValueError("ResultTable is sealed")
        if not 1 <= record.iteration <= len(self._slots):
            raise IndexError(
                f"Iteration {record.iteration} outside 1..{len(self._slots)}"
            )
        if len(record.coefficients) != len(self.coefficient_names):
            raise ValueError(
                f"Record has {len(record.coefficients)} coefficients, "
                f"table expects {len(self.coefficient_names)}"
            )
        slot = record.iteration - 1
        if self._slots[slot] is not None:
            raise ValueError(f"Iteration {record.iteration} already recorded")
        self._slots[slot] = record

    def seal(self) -> None:
        if not self.is_complete:
            missing = [i + 1 for i, r in enumerate(self._slots) if r is None]
            raise ValueError(f"Cannot seal incomplete table, missing {missing[:10]}")
        self._sealed = True

    @property
    def is_complete(self) -> bool:
        return all(r is not None for r in self._slots)

    @property
    def is_sealed(self) -> bool:
        return self._sealed

    @property
    def records(self) -> Tuple[IterationRecord, ...]:
        if not self.is_complete:
            raise ValueError("ResultTable is incomplete")
        return tuple(self._slots)

    def __len__(self) -> int:
        return len(self._slots)

    def __iter__(self) -> Iterator[IterationRecord]:
        return iter(self.records)

    def __getitem__(self, iteration: int) -> IterationRecord:
        """Record of a 1-based iteration index."""
        record = self._slots[iteration - 1] if 1 <= iteration <= len(self) else None
        if record is None:
            raise KeyError(iteration)
        return record

    def coefficient_matrix(self) -> np.ndarray:
        """(iterations x parameters) array of fitted coefficients."""
        return np.array([r.coefficients for r in self.records], dtype=float)

    def r2_train(self) -> np.ndarray:
        return np.array([r.r2_train for r in self.records], dtype=float)

    def r2_holdout(self) -> np.ndarray:
        return np.array([r.r2_holdout for r in self.records], dtype=float)

    def to_frame(self) -> pd.DataFrame:
        """One row per iteration, in iteration order."""
        records = self.records
        df = pd.DataFrame(self.coefficient_matrix(), columns=list(self.coefficient_names))
        df.insert(0, 'Iteration', [r.iteration for r in records])
        df.insert(1, 'Seed', [r.seed for r in records])
        df.insert(2, 'N_Train', [r.n_train for r in records])
        df.insert(3, 'N_Holdout', [r.n_holdout for r in records])
        df['R2_Train'] = self.r2_train()
        df['R2_Holdout'] = self.r2_holdout()
        df['R2_Diff'] = df['R2_Holdout'] - df['R2_Train']
        return df


# ---------------------------------------------------------------------------
# Single iteration (module-level so joblib can pickle it)
# ---------------------------------------------------------------------------

def _run_iteration(
    X: np.ndarray,
    y: np.ndarray,
    column_names: Sequence[str],
    split_ratio: float,
    iteration: int,
    seed: int,
) -> IterationRecord:
    partition = partition_rows(len(y), split_ratio, seed)
    train, holdout = partition.train_rows, partition.holdout_rows

    results = fit_ols(X[train], y[train], column_names, iteration=iteration)
    params = np.asarray(results.params, dtype=float)
    r2_train = float(results.rsquared)
    if not np.isfinite(r2_train) or not np.isfinite(params).all():
        raise FitError(
            "Training fit produced non-finite R-squared or coefficients",
            iteration=iteration,
            details={"r2_train": r2_train, "n_train": partition.n_train},
        )

    predicted = X[holdout] @ params
    r2_holdout = squared_correlation(y[holdout], predicted, iteration=iteration)

    return IterationRecord(
        iteration=iteration,
        seed=seed,
        coefficients=tuple(float(b) for b in params),
        r2_train=r2_train,
        r2_holdout=r2_holdout,
        n_train=partition.n_train,
        n_holdout=partition.n_holdout,
    )


# ---------------------------------------------------------------------------
# Evaluator
# ---------------------------------------------------------------------------

class MutateEvaluator:
    """
    Runs the MUTATE loop for one model specification.

    Args:
        split_ratio: Fraction of rows used for training, in (0, 1).
        iterations: Number of resampling rounds.
        seed_fn: Maps a 1-based iteration index to a random seed.
        n_jobs: joblib workers; 1 runs in-process.
    """

    def __init__(
        self,
        split_ratio: float = 0.90,
        iterations: int = 1000,
        seed_fn: SeedFn = default_seed_fn,
        n_jobs: int = 1,
    ):
        self.split_ratio = split_ratio
        self.iterations = iterations
        self.seed_fn = seed_fn
        self.n_jobs = n_jobs

    def check_run(self, n_rows: int) -> List[int]:
        """Check run parameters and derive every seed up front."""
        if isinstance(self.iterations, bool) or \
                not isinstance(self.iterations, numbers.Integral) or self.iterations < 1:
            raise InvalidSpecError(
                f"iterations must be a positive integer, got {self.iterations!r}"
            )
        if isinstance(self.split_ratio, bool) or \
                not isinstance(self.split_ratio, numbers.Real) or \
                not 0.0 < self.split_ratio < 1.0:
            raise InvalidSpecError(
                f"split_ratio must be in (0, 1), got {self.split_ratio!r}"
            )
        if not callable(self.seed_fn):
            raise InvalidSpecError("seed_fn must be callable")

        n_train = training_size(n_rows, self.split_ratio)
        n_holdout = n_rows - n_train
        if n_train < 1 or n_holdout < 1:
            raise InvalidSpecError(
                f"split_ratio {self.split_ratio} on {n_rows} rows leaves an "
                f"empty partition (train={n_train}, holdout={n_holdout})",
                details={"n_rows": n_rows, "n_train": n_train, "n_holdout": n_holdout},
            )

        seeds = []
        for i in range(1, int(self.iterations) + 1):
            seed = self.seed_fn(i)
            if isinstance(seed, bool) or not isinstance(seed, numbers.Integral) \
                    or not 0 <= seed <= MAX_SEED:
                raise InvalidSpecError(
                    f"seed_fn({i}) returned {seed!r}; seeds must be integers "
                    f"in 0..{MAX_SEED}"
                )
            seeds.append(int(seed))
        return seeds

    def run(self, dataset: pd.DataFrame, model_spec: ModelSpec) -> ResultTable:
        """
        Resolve the model against the dataset and run every iteration.

        Raises:
            InvalidSpecError: Before any fitting, for an unusable spec or
                run parameters.
            FitError: A training design is rank-deficient.
            DegenerateHoldoutError: A holdout correlation is undefined.
        """
        design = resolve_design(dataset, model_spec)
        return self.run_design(design)

    def run_design(self, design: Design) -> ResultTable:
        """Run every iteration on an already resolved design."""
        seeds = self.check_run(design.n_rows)
        n_train = training_size(design.n_rows, self.split_ratio)

        logger.info(
            f"MUTATE | {design.spec.formula()}: {len(seeds)} iterations, "
            f"split {self.split_ratio:.2f} "
            f"(train={n_train}, holdout={design.n_rows - n_train}), "
            f"n_jobs={self.n_jobs}"
        )
        start = time.time()

        records = Parallel(n_jobs=self.n_jobs)(
            delayed(_run_iteration)(
                design.X, design.y, design.column_names,
                self.split_ratio, i, seed,
            )
            for i, seed in enumerate(seeds, start=1)
        )

        table = ResultTable(design.column_names, len(seeds))
        for record in records:
            table.put(record)
        table.seal()

        r2_holdout = table.r2_holdout()
        logger.info(
            f"MUTATE | Completed {len(table)} iterations in {time.time() - start:.2f}s: "
            f"mean R2 train={table.r2_train().mean():.4f}, "
            f"holdout={r2_holdout.mean():.4f}"
        )
        return table


def run(
    dataset: pd.DataFrame,
    model_spec: ModelSpec,
    split_ratio: float,
    iterations: int,
    seed_fn: SeedFn = default_seed_fn,
    n_jobs: int = 1,
) -> ResultTable:
    """Run the MUTATE loop; see MutateEvaluator.run."""
    evaluator = MutateEvaluator(
        split_ratio=split_ratio,
        iterations=iterations,
        seed_fn=seed_fn,
        n_jobs=n_jobs,
    )
    return evaluator.run(dataset, model_spec)
