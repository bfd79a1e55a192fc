"""
densevec Configuration Loader
=============================

Load diagnostic-sink settings from densevec.yaml and wire them into the
process-wide registry.

Defaults live in code; a YAML file only needs the keys it overrides.

Usage:
    from densevec.config import configure, load_config

    config = load_config()              # defaults merged with densevec.yaml, if any
    configure('config/densevec.yaml')   # load + build sink + register it

Example densevec.yaml:
    diagnostics:
      sink: file            # none | logging | file
      path: vector.log
      rewrite_if_exist: false
      level: WARNING        # minimum level the sink records
"""

import logging
import os
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from densevec.diagnostics import (
    DEFAULT_LOG_FILE,
    DEFAULT_LOGGER_NAME,
    DiagnosticSink,
    FileSink,
    LoggingSink,
    set_diagnostic_sink,
)

logger = logging.getLogger(__name__)


# Environment variable naming an explicit config file
CONFIG_ENV_VAR = 'DENSEVEC_CONFIG'

CONFIG_FILENAME = 'densevec.yaml'

# Repository-level config directory (can be overridden)
CONFIG_PATH = Path(__file__).parent.parent.parent / 'config'

DEFAULT_CONFIG: Dict[str, Any] = {
    'diagnostics': {
        'sink': 'none',
        'path': DEFAULT_LOG_FILE,
        'rewrite_if_exist': True,
        'level': 'WARNING',
        'logger_name': DEFAULT_LOGGER_NAME,
    },
}

SINK_KINDS = ('none', 'logging', 'file')


class ConfigError(ValueError):
    """Raised when a configuration value cannot be honoured."""
    pass


def get_config_path() -> Optional[Path]:
    """First existing config file: $DENSEVEC_CONFIG, ./config, repository config."""
    env_path = os.environ.get(CONFIG_ENV_VAR)
    candidates = [
        Path(env_path) if env_path else None,
        Path('config') / CONFIG_FILENAME,
        CONFIG_PATH / CONFIG_FILENAME,
    ]

    for path in candidates:
        if path is not None and path.exists():
            return path

    return None


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    Load configuration, YAML values overriding DEFAULT_CONFIG.

    Args:
        path: Explicit YAML file. If None, get_config_path() is searched and
              defaults are returned when nothing is found.

    Returns:
        Merged configuration dict

    Raises:
        FileNotFoundError: `path` was given but does not exist
        ConfigError: The file is not a YAML mapping
    """
    if path is None:
        path = get_config_path()
        if path is None:
            logger.debug("No %s found, using defaults", CONFIG_FILENAME)
            return deepcopy(DEFAULT_CONFIG)
    else:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        raw = yaml.safe_load(f)

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"{path}: expected a mapping at top level, got {type(raw).__name__}")

    return _merge(DEFAULT_CONFIG, raw)


def _logging_level(name: Any) -> int:
    if isinstance(name, int):
        return name
    level = logging.getLevelName(str(name).upper())
    if not isinstance(level, int):
        raise ConfigError(f"Unknown logging level: {name!r}")
    return level


def build_sink(diagnostics: Dict[str, Any]) -> Optional[DiagnosticSink]:
    """
    Construct the sink described by the 'diagnostics' config section.

    Returns:
        LoggingSink, FileSink, or None for sink: none
    """
    kind = str(diagnostics.get('sink', 'none')).lower()
    if kind not in SINK_KINDS:
        raise ConfigError(f"Unknown diagnostics sink '{kind}'. Available: {', '.join(SINK_KINDS)}")

    level = _logging_level(diagnostics.get('level', 'WARNING'))

    if kind == 'none':
        return None

    if kind == 'logging':
        sink = LoggingSink(diagnostics.get('logger_name', DEFAULT_LOGGER_NAME))
    else:
        sink = FileSink(
            diagnostics.get('path', DEFAULT_LOG_FILE),
            rewrite_if_exist=bool(diagnostics.get('rewrite_if_exist', True)),
        )

    sink.logger.setLevel(level)
    return sink


def configure(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """Load config, build its sink and register it process-wide."""
    config = load_config(path)
    sink = build_sink(config['diagnostics'])
    set_diagnostic_sink(sink)
    logger.debug("Diagnostic sink configured: %r", sink)
    return config
