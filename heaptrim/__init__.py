#!filepath: heaptrim/__init__.py

from .utils.logger import Logging, logs
from .utils.errors import (
    TrimError,
    ConfigError,
    InputError,
    OutputError,
    FormatError,
)
from .config.app_config import AppConfig

__version__ = "0.1.0"

__all__ = [
    "logs", "Logging",
    "TrimError", "ConfigError", "InputError", "OutputError", "FormatError",
    "AppConfig",
    "__version__",
]
