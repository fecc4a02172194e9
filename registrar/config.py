"""
Configuration loading for the Registrar platform.

Configuration is a plain dictionary. Values come from ``DEFAULT_CONFIG``,
optionally overlaid by a JSON file and then by ``REGISTRAR_*`` environment
variables.
"""

import json
import os
from typing import Any, Dict, Optional

from .core.exceptions import ConfigurationError


DEFAULT_CONFIG: Dict[str, Any] = {
    'rest_host': "0.0.0.0",
    'rest_port': 8000,
    'log_level': "INFO",
    'log_file': None,
}

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

ENV_OVERRIDES = {
    'REGISTRAR_REST_HOST': 'rest_host',
    'REGISTRAR_REST_PORT': 'rest_port',
    'REGISTRAR_LOG_LEVEL': 'log_level',
    'REGISTRAR_LOG_FILE': 'log_file',
}


def load_config(path: Optional[str] = None, environ: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    """Build the effective configuration."""
    config = dict(DEFAULT_CONFIG)
    
    if path:
        config.update(_read_config_file(path))
    
    environ = os.environ if environ is None else environ
    for env_name, key in ENV_OVERRIDES.items():
        if env_name in environ:
            config[key] = environ[env_name]
    
    config['rest_port'] = _coerce_port(config['rest_port'])
    config['log_level'] = _coerce_log_level(config['log_level'])
    return config


def _read_config_file(path: str) -> Dict[str, Any]:
    """Read and validate a JSON configuration file."""
    try:
        with open(path, 'r') as f:
            data = json.load(f)
    except OSError as e:
        raise ConfigurationError(f"Cannot read configuration file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in configuration file {path}: {e}") from e
    
    if not isinstance(data, dict):
        raise ConfigurationError("Configuration file must contain a JSON object")
    
    unknown = set(data) - set(DEFAULT_CONFIG)
    if unknown:
        raise ConfigurationError(
            f"Unknown configuration keys: {', '.join(sorted(unknown))}",
            details={'unknown_keys': sorted(unknown)}
        )
    return data


def _coerce_log_level(value: Any) -> str:
    if not isinstance(value, str) or value.upper() not in LOG_LEVELS:
        raise ConfigurationError(
            f"Invalid log level: {value!r}",
            details={'allowed': list(LOG_LEVELS)}
        )
    return value.upper()


def _coerce_port(value: Any) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"Invalid REST port: {value!r}")
    try:
        port = int(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid REST port: {value!r}") from e
    if not 0 < port < 65536:
        raise ConfigurationError(f"REST port out of range: {port}")
    return port
