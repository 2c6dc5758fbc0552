"""
Model definitions: support vector regression and its cross-validated search.
"""
