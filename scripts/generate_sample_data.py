#!/usr/bin/env python3
"""
Sample Data Generator

Generates a synthetic credit table shaped like the German credit data
(1000 applicants) so the MUTATE study can run without the original file.
Loan Amount depends mainly on Duration and InstallmentRatePercentage.
"""

from pathlib import Path
import argparse

import numpy as np
import pandas as pd


# Seed for reproducibility
RANDOM_SEED = 42

PURPOSES = {
    'NewCar': 0.23,
    'UsedCar': 0.10,
    'Furniture.Equipment': 0.18,
    'Radio.Television': 0.28,
    'Education': 0.05,
    'Business': 0.10,
    'Repairs': 0.06,
}

JOBS = {
    'UnskilledResident': 0.22,
    'SkilledEmployee': 0.63,
    'Management.SelfEmp.HighlyQualified': 0.15,
}

HOUSING = {
    'Rent': 0.18,
    'Own': 0.71,
    'ForFree': 0.11,
}

# Mean loan uplift per job level
JOB_AMOUNT_EFFECT = {
    'UnskilledResident': -400.0,
    'SkilledEmployee': 0.0,
    'Management.SelfEmp.HighlyQualified': 1500.0,
}


def _choice(rng: np.random.RandomState, weights: dict, n: int) -> np.ndarray:
    labels = list(weights)
    probs = np.array(list(weights.values()))
    return rng.choice(labels, size=n, p=probs / probs.sum())


def generate_credit_data(n: int = 1000, seed: int = RANDOM_SEED) -> pd.DataFrame:
    """Synthetic credit applications with a numeric loan Amount."""
    rng = np.random.RandomState(seed)

    duration = np.clip(np.round(rng.gamma(shape=3.5, scale=6.0, size=n)), 4, 72).astype(int)
    installment_rate = rng.choice([1, 2, 3, 4], size=n, p=[0.14, 0.23, 0.16, 0.47])
    residence = rng.choice([1, 2, 3, 4], size=n, p=[0.13, 0.31, 0.15, 0.41])
    age = np.clip(np.round(19 + rng.gamma(shape=2.2, scale=7.5, size=n)), 19, 75).astype(int)
    existing_credits = rng.choice([1, 2, 3, 4], size=n, p=[0.63, 0.33, 0.03, 0.01])
    people_maintenance = rng.choice([1, 2], size=n, p=[0.85, 0.15])
    telephone = rng.binomial(1, 0.40, size=n)
    foreign_worker = rng.binomial(1, 0.96, size=n)
    purpose = _choice(rng, PURPOSES, n)
    job = _choice(rng, JOBS, n)
    housing = _choice(rng, HOUSING, n)

    job_effect = np.array([JOB_AMOUNT_EFFECT[j] for j in job])
    amount = (
        400.0
        + 130.0 * duration
        - 550.0 * installment_rate
        + 6.0 * age
        + 700.0 * telephone
        + job_effect
        + rng.normal(0.0, 1600.0, size=n)
    )
    amount = np.clip(np.round(amount), 250, 18500).astype(int)

    risk = 0.02 * duration + 0.3 * installment_rate - 0.02 * age
    p_bad = 1.0 / (1.0 + np.exp(-(risk - 0.6)))
    credit_class = np.where(rng.uniform(size=n) < p_bad, 'Bad', 'Good')

    return pd.DataFrame({
        'Duration': duration,
        'Amount': amount,
        'InstallmentRatePercentage': installment_rate,
        'ResidenceDuration': residence,
        'Age': age,
        'NumberExistingCredits': existing_credits,
        'NumberPeopleMaintenance': people_maintenance,
        'Telephone': telephone,
        'ForeignWorker': foreign_worker,
        'Class': credit_class,
        'Purpose': purpose,
        'Job': job,
        'Housing': housing,
    })


def main():
    parser = argparse.ArgumentParser(description='Generate synthetic credit data')
    parser.add_argument('--output', default='data/sample/german_credit.csv')
    parser.add_argument('--rows', type=int, default=1000)
    parser.add_argument('--seed', type=int, default=RANDOM_SEED)
    args = parser.parse_args()

    df = generate_credit_data(n=args.rows, seed=args.seed)
    out_path = Path(args.output)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(out_path, index=False)
    print(f"Wrote {len(df):,} rows to {out_path}")


if __name__ == '__main__':
    main()
