"""
Configuration loading and validation.

This module handles loading of YAML configuration files and
validates the orchestration settings used by the batch matcher.
Scoring weights are not read from here; they are fixed constants
in matching.configs.scoring.
"""

import logging
from pathlib import Path
from typing import Dict, Any, List

import yaml

logger = logging.getLogger(__name__)

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def load_config(filepath: str) -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Args:
        filepath: Path to the YAML configuration file

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If the file is empty
        yaml.YAMLError: If YAML is invalid
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {filepath}")

    logger.info(f"Loading configuration from {filepath}")
    with open(filepath, "r", encoding="utf-8") as f:
        config = yaml.safe_load(f)

    if config is None:
        raise ValueError(f"Configuration file is empty: {filepath}")

    return config


def validate_config(config: Dict[str, Any]) -> List[str]:
    """
    Validate configuration and return list of warnings/errors.

    Args:
        config: Configuration dictionary

    Returns:
        List of warning/error messages (empty if valid)
    """
    issues = []

    for section in ["global", "matching"]:
        if section not in config:
            issues.append(f"Missing required section: {section}")

    if "global" in config:
        log_level = str(config["global"].get("log_level", "INFO")).upper()
        if log_level not in VALID_LOG_LEVELS:
            issues.append(f"Unknown global.log_level: {log_level}")

    if "matching" in config:
        matching = config["matching"] or {}

        max_workers = matching.get("max_workers", 4)
        if not isinstance(max_workers, int) or max_workers < 1:
            issues.append(f"matching.max_workers must be a positive integer, got {max_workers}")

        success = matching.get("success_threshold", 60)
        if not isinstance(success, (int, float)) or not 0 <= success <= 100:
            issues.append(f"matching.success_threshold must be in [0, 100], got {success}")

        minimum = matching.get("min_compatibility_threshold")
        if minimum is not None and (not isinstance(minimum, (int, float)) or not 0 <= minimum <= 100):
            issues.append(f"matching.min_compatibility_threshold must be in [0, 100], got {minimum}")

        cap = matching.get("max_students_per_teacher")
        if cap is not None and (not isinstance(cap, int) or cap < 1):
            issues.append(f"matching.max_students_per_teacher must be a positive integer, got {cap}")

        # Kept in the file for signature stability; the load formula ignores it
        average_load = matching.get("average_load", 15)
        if not isinstance(average_load, (int, float)) or average_load < 0:
            issues.append(f"matching.average_load must be non-negative, got {average_load}")

    return issues


def get_config_value(config: Dict[str, Any], path: str, default: Any = None) -> Any:
    """
    Get a nested configuration value using dot notation.

    Args:
        config: Configuration dictionary
        path: Dot-separated path (e.g., "matching.max_workers")
        default: Default value if path doesn't exist

    Returns:
        Configuration value or default
    """
    keys = path.split(".")
    value = config
    for key in keys:
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default
    return value
