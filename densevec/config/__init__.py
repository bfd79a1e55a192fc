"""
Configuration

Exports:
    - load_config: Defaults merged with densevec.yaml
    - build_sink: Diagnostic sink from the 'diagnostics' section
    - configure: load_config + build_sink + set_diagnostic_sink
    - ConfigError: Raised for values that cannot be honoured
"""

from .loader import (
    load_config,
    build_sink,
    configure,
    get_config_path,
    ConfigError,
    DEFAULT_CONFIG,
    CONFIG_ENV_VAR,
)

__all__ = [
    'load_config',
    'build_sink',
    'configure',
    'get_config_path',
    'ConfigError',
    'DEFAULT_CONFIG',
    'CONFIG_ENV_VAR',
]
