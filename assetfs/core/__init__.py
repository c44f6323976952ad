"""
assetfs Core Module

Generator configuration.
"""

from .config_loader import (
    ConfigLoader,
    Config,
    BuilderConfig,
    OutputConfig,
    LoggingConfig,
    MAX_FILE_SIZE,
    OUTPUT_FORMATS,
)

__all__ = [
    'ConfigLoader',
    'Config',
    'BuilderConfig',
    'OutputConfig',
    'LoggingConfig',
    'MAX_FILE_SIZE',
    'OUTPUT_FORMATS',
]
