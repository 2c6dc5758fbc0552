"""
Data loading and splitting utilities.

This subpackage provides:
- functions to load and clean the beer review CSV
- the metadata table keyed by review index
- stratified train/test splitting on a continuous target.
"""
