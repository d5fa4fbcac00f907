"""
Data Module

Dataset loading for the MUTATE study.
"""

from credit_mutate.data.loader import load_dataset, prepare_dataset

__all__ = [
    "load_dataset",
    "prepare_dataset",
]
