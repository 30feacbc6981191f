#!filepath: heaptrim/config/app_config.py
import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from .log_config import LogConfig
from .trim_config import TrimConfig
from heaptrim.utils.errors import ConfigError


def default_config_path() -> Path:
    """
    Packaged defaults: heaptrim/config/base.yml
    """
    return Path(__file__).with_name("base.yml")


class AppConfig(BaseModel):
    log: LogConfig = Field(default_factory=LogConfig)
    trim: TrimConfig = Field(default_factory=TrimConfig)

    @classmethod
    def load(cls, path: str | None = None) -> "AppConfig":
        """
        Load YAML config + .env
        - defaults to the packaged base.yml
        - .env is looked up in the current working directory
        - HEAPTRIM_LOG_LEVEL / HEAPTRIM_LOG_DIR override the log section
        """
        load_dotenv(os.path.join(os.getcwd(), ".env"))

        cfg_path = Path(path) if path is not None else default_config_path()
        if not cfg_path.exists():
            raise ConfigError(f"Config file not found: {cfg_path}")

        try:
            with open(cfg_path, "r", encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Config file is not valid YAML: {cfg_path}: {e}") from e

        if not isinstance(raw, dict):
            raise ConfigError(f"Config file must hold a mapping: {cfg_path}")

        log_raw = dict(raw.get("log") or {})
        if os.getenv("HEAPTRIM_LOG_LEVEL"):
            log_raw["level"] = os.getenv("HEAPTRIM_LOG_LEVEL")
        if os.getenv("HEAPTRIM_LOG_DIR"):
            log_raw["dir"] = os.getenv("HEAPTRIM_LOG_DIR")
        raw["log"] = log_raw

        try:
            return cls(**raw)
        except ValidationError as e:
            raise ConfigError(f"Invalid config {cfg_path}: {e}") from e
