"""
Configuration Loader - Load and manage scheduling policies

This module provides functions to load configuration from YAML/JSON files
and turn it into a SchedulingPolicy.

Key Features:
    - Load default and custom policy configurations
    - Accept flat keys or keys grouped into sections
    - Resolve the policy file from SCHEDULING_POLICY_PATH (.env aware)
    - Save a policy back to YAML
"""

import os
import yaml
import json
import logging
from pathlib import Path
from typing import Dict, Any, Optional

from dotenv import load_dotenv

from models.policy import SchedulingPolicy

logger = logging.getLogger(__name__)

POLICY_PATH_ENV = "SCHEDULING_POLICY_PATH"
DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / 'config' / 'default_policy.yaml'


def load_yaml(file_path: str) -> Dict[str, Any]:
    """
    Load YAML configuration file.

    Args:
        file_path: Path to YAML file

    Returns:
        Dictionary with configuration data
    """
    with open(file_path, 'r') as f:
        return yaml.safe_load(f) or {}


def load_json(file_path: str) -> Dict[str, Any]:
    """
    Load JSON configuration file.

    Args:
        file_path: Path to JSON file

    Returns:
        Dictionary with configuration data
    """
    with open(file_path, 'r') as f:
        return json.load(f)


def flatten_policy_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Merge section dictionaries (e.g. `batching: {...}`) into one flat mapping.

    Keys that are policy fields themselves (priority_weights, trend_factors, ...)
    are kept as values, not flattened.
    """
    policy_fields = set(SchedulingPolicy().to_dict())
    flat: Dict[str, Any] = {}

    for key, value in config.items():
        if isinstance(value, dict) and key not in policy_fields:
            flat.update(value)
        else:
            flat[key] = value

    return flat


def load_policy_from_config(config: Dict[str, Any]) -> SchedulingPolicy:
    """
    Create SchedulingPolicy from configuration dictionary.

    Missing keys keep their defaults and unknown keys are ignored. Partial
    dictionaries (e.g. only `urgent` in priority_weights) are merged over the
    default dictionary.

    Args:
        config: Configuration dictionary

    Returns:
        SchedulingPolicy object
    """
    defaults = SchedulingPolicy().to_dict()
    values = flatten_policy_config(config)

    for key, value in values.items():
        if isinstance(defaults.get(key), dict) and isinstance(value, dict):
            values[key] = {**defaults[key], **value}

    ignored = sorted(set(values) - set(defaults))
    if ignored:
        logger.debug("Ignoring unknown policy keys: %s", ", ".join(ignored))

    return SchedulingPolicy.from_dict(values)


def resolve_config_path(config_path: Optional[str] = None) -> Path:
    """
    Pick the policy file: explicit path, then SCHEDULING_POLICY_PATH, then the default.
    """
    if config_path is not None:
        return Path(config_path)

    load_dotenv()
    env_path = os.getenv(POLICY_PATH_ENV)
    if env_path:
        return Path(env_path)

    return DEFAULT_CONFIG_PATH


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load complete configuration from file.

    If no path provided, uses SCHEDULING_POLICY_PATH from the environment or
    loads default_policy.yaml from the config directory.

    Args:
        config_path: Optional path to config file

    Returns:
        Dictionary containing policy and raw_config
    """
    path = resolve_config_path(config_path)

    # Load config file
    if path.suffix == '.json':
        config_data = load_json(str(path))
    else:
        config_data = load_yaml(str(path))

    logger.info("Loaded scheduling policy from %s", path)

    return {
        'policy': load_policy_from_config(config_data),
        'raw_config': config_data
    }


def save_config(policy: SchedulingPolicy, output_path: str):
    """
    Save policy to YAML file.

    Args:
        policy: Policy to save
        output_path: Path to output file
    """
    with open(output_path, 'w') as f:
        yaml.dump(policy.to_dict(), f, default_flow_style=False, sort_keys=False)


# Example usage
if __name__ == "__main__":
    # Load default configuration
    config = load_config()
    policy = config['policy']

    print("Loaded Configuration:")
    print(f"Policy: {policy}")
    print(f"\nComplexity factors:")
    for key, value in policy.complexity_factors.items():
        print(f"  {key}: x{value}")
