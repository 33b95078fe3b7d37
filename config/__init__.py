"""Configuration module for the morm record synchronizer"""

from .settings import (
    Config,
    ConfigurationError,
    RDBMSConfig,
    ModelConfig,
    SystemConfig,
    get_config,
    reload_config
)

__all__ = [
    'Config',
    'ConfigurationError',
    'RDBMSConfig',
    'ModelConfig',
    'SystemConfig',
    'get_config',
    'reload_config'
]
