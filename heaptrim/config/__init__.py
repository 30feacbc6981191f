#!filepath: heaptrim/config/__init__.py
from .app_config import AppConfig
from .log_config import LogConfig
from .trim_config import TrimConfig, EarlyClockPolicy

__all__ = ["AppConfig", "LogConfig", "TrimConfig", "EarlyClockPolicy"]
