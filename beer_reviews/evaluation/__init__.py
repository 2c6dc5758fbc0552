"""
Evaluation and analysis utilities.

This subpackage offers:
- regression metrics (RMSE, MAE, R^2, correlation)
- permutation-based importance ranking
- exploratory summaries and PCA over the aspect ratings
- plotting functions for all of the above.
"""
