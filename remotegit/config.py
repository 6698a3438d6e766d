#!/usr/bin/env python3

import os
import json
import tomllib
from pathlib import Path

import logging
import sys

import yaml

logger = logging.getLogger("remotegit")

CONFIG_FILENAMES = ['config.json', 'config.toml', 'config.yaml', 'config.yml']


def setup_logging(level=None, fmt=None, config=None):
    """Attach a stderr handler to the remotegit logger.

    The library itself never configures logging; this is for the CLI.
    """
    if config is None:
        config = load_config()
    level = level or config["logging"]["level"]
    fmt = fmt or config["logging"]["format"]

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt))

    logger.handlers = [handler]
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    return logger


def get_config_path():
    """Get the path to the configuration file.

    Checks in order:
    1. REMOTEGIT_CONFIG environment variable
    2. ~/.remotegit/ directory
    """
    if 'REMOTEGIT_CONFIG' in os.environ:
        path = Path(os.environ['REMOTEGIT_CONFIG'])
        if path.exists():
            return path

    config_dir = Path.home() / '.remotegit'
    for filename in CONFIG_FILENAMES:
        path = config_dir / filename
        if path.exists():
            return path

    # If no file exists, return default path for saving
    return config_dir / 'config.json'


def load_config():
    """Load configuration from file, defaults and environment."""
    config_path = get_config_path()

    config = get_default_config()

    if config_path.exists():
        try:
            if config_path.suffix.lower() in ['.toml']:
                with open(config_path, 'rb') as f:
                    file_config = tomllib.load(f)
            elif config_path.suffix.lower() in ['.yaml', '.yml']:
                with open(config_path, 'r') as f:
                    file_config = yaml.safe_load(f) or {}
            else:
                with open(config_path, 'r') as f:
                    file_config = json.load(f)

            config = merge_configs(config, file_config)
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.error(f"Error loading config from {config_path}: {e}")

    config = apply_env_overrides(config)

    return config


def get_default_config():
    """Get default configuration."""
    return {
        "git": {
            "executable": "",   # Empty: git found on PATH
            "timeout": 0,       # Seconds; 0 waits forever
        },
        "storage": {
            "temp_directory": "",  # Empty: system temp directory
        },
        "logging": {
            "level": "WARNING",
            "format": "%(levelname)s: %(message)s"
        },
    }


def merge_configs(base_config, override_config):
    """
    Recursively merge two configuration dictionaries.

    Args:
        base_config (dict): Base configuration
        override_config (dict): Configuration to merge/override with

    Returns:
        dict: Merged configuration
    """
    merged = base_config.copy()

    for key, value in override_config.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_configs(merged[key], value)
        else:
            merged[key] = value

    return merged


def apply_env_overrides(config):
    """
    Apply environment variable overrides to configuration.
    Environment variables follow the pattern: REMOTEGIT_SECTION_KEY
    For example: REMOTEGIT_STORAGE_TEMP_DIRECTORY=/var/tmp
    """
    env_prefix = "REMOTEGIT_"

    for env_key, value in os.environ.items():
        if not env_key.startswith(env_prefix) or env_key == 'REMOTEGIT_CONFIG':
            continue

        key_parts = env_key[len(env_prefix):].lower().split('_')

        if value.lower() in ('true', 'yes', 'on'):
            typed_value = True
        elif value.lower() in ('false', 'no', 'off'):
            typed_value = False
        elif value.isdigit():
            typed_value = int(value)
        else:
            typed_value = value

        current_level = config
        i = 0
        while i < len(key_parts):
            # Longest configured key matching the remaining parts wins,
            # so TEMP_DIRECTORY maps to temp_directory
            best_match_len = 0
            matched_key = None

            for config_key in current_level.keys():
                config_key_parts = config_key.split('_')
                if key_parts[i:i + len(config_key_parts)] == config_key_parts:
                    if len(config_key_parts) > best_match_len:
                        best_match_len = len(config_key_parts)
                        matched_key = config_key

            if matched_key is None:
                break

            if i + best_match_len == len(key_parts):
                current_level[matched_key] = typed_value
                break

            if isinstance(current_level[matched_key], dict):
                current_level = current_level[matched_key]
                i += best_match_len
            else:
                break

    return config
