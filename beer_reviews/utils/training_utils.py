"""
Training and utility helpers.

This module centralizes common functionality used across the project:

- loading YAML configuration files (config/*.yaml)
- ensuring directories exist before writing files
- setting random seeds for reproducibility
- constructing loggers that respect config/logging settings

The data, feature, and training pipelines all rely on these utilities.
"""

from __future__ import annotations

import logging
import os
import random
from typing import Any, Dict, Iterable, Optional

import numpy as np
import yaml


DEFAULT_TRAIN_CONFIG_PATH = "config/train.yaml"


# ---------------------------------------------------------------------------
# Config loading
# ---------------------------------------------------------------------------


def load_yaml_config(
    path: str,
    required_sections: Iterable[str] = (),
    kind: str = "Config",
) -> Dict[str, Any]:
    """
    Load a YAML configuration file and check that it has the given sections.

    Parameters
    ----------
    path : str
        Path to the YAML file.
    required_sections : Iterable[str]
        Top-level keys that must be present.
    kind : str
        Label used in error messages (e.g., "Data config").

    Returns
    -------
    Dict[str, Any]
        Parsed YAML content.

    Raises
    ------
    FileNotFoundError
        If the YAML file does not exist.
    ValueError
        If the YAML file is empty or cannot be parsed.
    KeyError
        If a required section is missing.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"{kind} file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f)

    if cfg is None:
        raise ValueError(f"{kind} file is empty or invalid: {path}")

    for section in required_sections:
        if section not in cfg:
            raise KeyError(f'Missing "{section}" section in {kind.lower()}: {path}')

    return cfg


def load_train_config(
    config_path: str = DEFAULT_TRAIN_CONFIG_PATH,
) -> Dict[str, Any]:
    """
    Load and return the global training configuration dictionary.

    Parameters
    ----------
    config_path : str
        Path to the train YAML configuration file.

    Returns
    -------
    Dict[str, Any]
        Parsed configuration with sections "general", "paths",
        "logging", and "save".
    """
    return load_yaml_config(
        config_path,
        required_sections=("general", "paths"),
        kind="Train config",
    )


# ---------------------------------------------------------------------------
# Filesystem utilities
# ---------------------------------------------------------------------------


def ensure_dir_exists(path: str) -> None:
    """
    Ensure that a directory exists (create it if necessary).
    """
    if path and not os.path.exists(path):
        os.makedirs(path, exist_ok=True)


# ---------------------------------------------------------------------------
# Reproducibility utilities
# ---------------------------------------------------------------------------


def seed_everything(seed: int = 42) -> None:
    """
    Seed the Python and NumPy RNGs.

    Stage functions still take their own ``random_state`` arguments; this
    only covers library code that draws from the global generators.
    """
    random.seed(seed)
    np.random.seed(seed)


# ---------------------------------------------------------------------------
# Logging utilities
# ---------------------------------------------------------------------------


def _parse_log_level(level_str: str) -> int:
    """
    Convert a string log level into a logging module constant.
    """
    level_str = (level_str or "INFO").upper()
    return {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }.get(level_str, logging.INFO)


def _log_file_path(config: Dict[str, Any], log_file_suffix: Optional[str]) -> Optional[str]:
    """
    Path of the log file configured in ``config``, or None if file
    logging is disabled.
    """
    logging_cfg = config.get("logging", {}) or {}
    if not bool(logging_cfg.get("to_file", True)):
        return None

    paths_cfg = config.get("paths", {}) or {}
    logs_dir = paths_cfg.get("logs_dir", "experiments/logs")
    file_prefix = logging_cfg.get("file_prefix", "beer_reviews")
    if log_file_suffix:
        filename = f"{file_prefix}_{log_file_suffix}.log"
    else:
        filename = f"{file_prefix}.log"
    return os.path.join(logs_dir, filename)


def get_logger(
    name: str,
    config: Dict[str, Any],
    log_file_suffix: Optional[str] = None,
) -> logging.Logger:
    """
    Construct and return a logger that respects the logging section of
    the global training config.

    Calling it again for an already configured logger keeps the console
    handler; the file handler is replaced when the log file changes (for
    example when the EDA and SVR pipelines run in one process).

    Parameters
    ----------
    name : str
        Logger name.
    config : Dict[str, Any]
        Global training configuration.
    log_file_suffix : Optional[str]
        Optional suffix appended to the log file name (e.g., "eda", "svm").

    Returns
    -------
    logging.Logger
        Configured logger instance.
    """
    logger = logging.getLogger(name)

    logging_cfg = config.get("logging", {}) or {}
    level = _parse_log_level(logging_cfg.get("level", "INFO"))

    formatter = logging.Formatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if not logger.handlers:
        logger.setLevel(level)

        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    log_path = _log_file_path(config, log_file_suffix)
    file_handlers = [h for h in logger.handlers if isinstance(h, logging.FileHandler)]

    if log_path is not None and not any(
        h.baseFilename == os.path.abspath(log_path) for h in file_handlers
    ):
        for handler in file_handlers:
            logger.removeHandler(handler)
            handler.close()

        ensure_dir_exists(os.path.dirname(log_path))
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger
