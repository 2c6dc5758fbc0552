"""
Shared utility functions.

This subpackage includes:
- config loading
- seeding and reproducibility helpers
- path management
- logging helpers used across the project.
"""
