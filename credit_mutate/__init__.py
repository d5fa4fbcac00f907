"""
Credit MUTATE Study

Resampling study of a fixed OLS loan-amount model: repeated random
train/holdout splits, coefficient and R-squared sampling distributions,
and comparison against a single full-data fit.
"""

__version__ = "1.0.0"
__author__ = "Credit Analytics Team"
