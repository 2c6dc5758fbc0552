"""
Top-level package for the beer review analysis project.

This package contains modules for:
- loading and cleaning the beer review dataset
- turning free-text reviews into a weighted document-term matrix
- exploratory analysis and PCA over the aspect ratings
- support vector regression on tabular and text-derived features
- evaluation, importance ranking, and plotting utilities

Every stage takes its parameters explicitly; only the pipelines under
beer_reviews.training read the YAML configuration files.
"""
