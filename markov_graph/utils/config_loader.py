"""
Configuration loading for markov_graph.

Settings live in YAML files under ``configs/`` at the project root. An
environment-specific file (``markov_graph_<environment>.yaml``) is tried
first, then the shared ``markov_graph.yaml``. Whatever is found is merged
over ``DEFAULT_CONFIG``, so a config file only needs the keys it changes.
"""

import copy
import logging
import os

import yaml

logger = logging.getLogger(__name__)

UNKNOWN_SOURCE_POLICIES = ("error", "create")

PREPROCESSING_STEPS = (
    "html",
    "urls",
    "lowercase",
    "contractions",
    "accents",
    "emojis",
    "punctuation",
    "whitespace",
)

DEFAULT_CONFIG = {
    "chain": {
        "on_unknown_source": "error",
    },
    "preprocessing": {
        "steps": ["lowercase", "punctuation", "whitespace"],
    },
    "logging": {
        "log_file": None,
        "console_json": True,
        "level": "INFO",
    },
    "analytics": {
        "top_n": 5,
    },
}


def get_config_dir():
    """Return the ``configs`` directory at the project root."""
    project_root = os.path.abspath(
        os.path.join(os.path.dirname(__file__), "..", ".."))
    return os.path.join(project_root, "configs")


def merge_config(base, override):
    """
    Recursively merge ``override`` into a copy of ``base``.

    Args:
        base (dict): Configuration providing defaults
        override (dict): Values that take precedence

    Returns:
        dict: The merged configuration
    """
    merged = copy.deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = value
    return merged


def validate_config(config):
    """
    Check configuration values the rest of the package relies on.

    Args:
        config (dict): A fully merged configuration

    Raises:
        ValueError: If a value is outside its supported range
    """
    policy = config["chain"]["on_unknown_source"]
    if policy not in UNKNOWN_SOURCE_POLICIES:
        raise ValueError(
            f"Invalid chain.on_unknown_source '{policy}'. "
            f"Choose one of {UNKNOWN_SOURCE_POLICIES}")

    steps = config["preprocessing"]["steps"]
    if not isinstance(steps, list):
        raise ValueError("preprocessing.steps must be a list")
    unknown = [step for step in steps if step not in PREPROCESSING_STEPS]
    if unknown:
        raise ValueError(f"Unknown preprocessing steps: {unknown}")

    top_n = config["analytics"]["top_n"]
    if isinstance(top_n, bool) or not isinstance(top_n, int) or top_n < 1:
        raise ValueError("analytics.top_n must be a positive integer")


def _read_yaml(config_path):
    try:
        with open(config_path, 'r') as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Error loading config from {config_path}: {e}")
        return None

    if not isinstance(data, dict):
        logger.warning(f"Ignoring config {config_path}: top level is not a mapping")
        return None

    logger.info(f"Loaded config from {config_path}")
    return data


def load_config(environment="development", config_dir=None):
    """
    Load configuration for the given environment.

    Args:
        environment (str): Environment name, e.g. 'development' or 'test'
        config_dir (str, optional): Directory holding the YAML files.
            Defaults to ``configs/`` at the project root.

    Returns:
        dict: Defaults merged with the first readable config file

    Raises:
        ValueError: If the resulting configuration is invalid
    """
    config_dir = config_dir or get_config_dir()

    candidate_paths = [
        os.path.join(config_dir, f"markov_graph_{environment}.yaml"),
        os.path.join(config_dir, "markov_graph.yaml"),
    ]

    loaded = None
    for config_path in candidate_paths:
        if os.path.exists(config_path):
            loaded = _read_yaml(config_path)
            if loaded is not None:
                break

    if loaded is None:
        logger.warning("No configuration file found, using defaults")

    config = merge_config(DEFAULT_CONFIG, loaded)
    validate_config(config)
    return config
