"""
Configuration loading and validation.

This module handles loading of YAML configuration files and
validates that all required fields are present.
"""

import logging
from pathlib import Path
from typing import Dict, Any, List

import yaml

from ..ranking.filters import DATE_RANGES
from ..scoring.weights import ScoringWeights, KEY_ALIASES

logger = logging.getLogger(__name__)

WEIGHT_NAMES = list(ScoringWeights.__dataclass_fields__)


def load_config(filepath: str) -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Args:
        filepath: Path to the YAML configuration file

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config file is empty
        yaml.YAMLError: If YAML is invalid
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {filepath}")

    logger.info(f"Loading configuration from {filepath}")
    with open(filepath, "r") as f:
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

    for section in ["global", "data", "scoring", "feed"]:
        if section not in config:
            issues.append(f"Missing required section: {section}")

    if "data" in config:
        data = config["data"] or {}
        if "path" not in (data.get("profiles") or {}):
            issues.append("Missing data.profiles.path")
        if "path" not in (data.get("posts") or {}):
            issues.append("Missing data.posts.path")

    # Weights are all-or-nothing
    weights = (config.get("scoring") or {}).get("weights")
    if weights:
        weights = {KEY_ALIASES.get(k, k): v for k, v in weights.items()}
        missing = [name for name in WEIGHT_NAMES if name not in weights]
        if missing:
            issues.append(f"Scoring weights must be given together, missing: {missing}")
        for name, value in weights.items():
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
                issues.append(f"Scoring weight {name} must be a positive number, got {value!r}")

    feed = config.get("feed") or {}
    date_range = (feed.get("filters") or {}).get("date_range", "all")
    if date_range not in DATE_RANGES:
        issues.append(f"feed.filters.date_range must be one of {sorted(DATE_RANGES)}, got {date_range!r}")

    limit = feed.get("limit")
    if limit is not None and (not isinstance(limit, int) or limit < 0):
        issues.append(f"feed.limit must be a non-negative integer, got {limit!r}")

    return issues


def get_config_value(config: Dict[str, Any], path: str, default: Any = None) -> Any:
    """
    Get a nested configuration value using dot notation.

    Args:
        config: Configuration dictionary
        path: Dot-separated path (e.g., "scoring.weights.tag_matches")
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
