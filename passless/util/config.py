"""
Configuration utilities for Passless.
Provides environment and file loading helpers used by the config dataclasses.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

ENV_PREFIX = "PASSLESS_"


def get_config_value(key: str, default: Any = None,
                     cast_type: Optional[type] = None,
                     env_prefix: str = ENV_PREFIX) -> Any:
    """
    Get configuration value from environment or return default.
    Optionally cast to specified type.
    """
    env_key = f"{env_prefix}{key.upper()}"
    value = os.environ.get(env_key)

    if value is None or value == "":
        return default

    if cast_type is None:
        return value

    try:
        if cast_type == bool:
            return value.lower() in ('true', '1', 'yes', 'on')
        return cast_type(value)
    except (ValueError, TypeError):
        return default


def normalize_config_key(key: str) -> str:
    """Normalize configuration key to snake_case (``clientId`` -> ``client_id``)."""
    out = []
    for char in key.replace('-', '_'):
        if char.isupper():
            out.append('_')
            out.append(char.lower())
        else:
            out.append(char)
    return ''.join(out).lstrip('_')


def load_config_file(file_path: str) -> Dict[str, Any]:
    """Load configuration from a file (JSON or YAML)."""
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"Configuration file not found: {file_path}")

    file_ext = Path(file_path).suffix.lower()

    with open(file_path, 'r', encoding='utf-8') as f:
        if file_ext == '.json':
            return json.load(f)
        elif file_ext in ('.yaml', '.yml'):
            import yaml
            return yaml.safe_load(f) or {}
        else:
            raise ValueError(f"Unsupported configuration file format: {file_ext}")
