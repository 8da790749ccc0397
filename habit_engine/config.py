#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Habit Engine - Configuration
Settings loaded from HABIT_* environment variables or a .env file
"""

import sys
from datetime import tzinfo
from enum import Enum
from pathlib import Path
from typing import Any, Dict

import pytz
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from habit_engine.utils.datetime_utils import get_timezone


class Environment(str, Enum):
    """Runtime environments"""
    DEVELOPMENT = "development"
    TESTING = "testing"
    PRODUCTION = "production"


class LogLevel(str, Enum):
    """Logging levels"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class HabitEngineSettings(BaseSettings):
    """Habit engine settings"""

    model_config = SettingsConfigDict(
        env_prefix="HABIT_",
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    # ===== GENERAL =====

    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Runtime environment",
    )

    timezone: str = Field(
        default="UTC",
        description="IANA timezone that defines the user's calendar day",
    )

    # ===== STORAGE =====

    data_dir: Path = Field(
        default=Path("data"),
        description="Directory holding the storage file",
    )

    data_file: str = Field(
        default="habits_data.json",
        description="Storage file name inside data_dir",
    )

    storage_slot: str = Field(
        default="habits",
        description="Key under which the habit collection is stored",
    )

    backup_enabled: bool = Field(
        default=True,
        description="Keep gzip copies of the storage file before overwriting it",
    )

    backup_dir: Path = Field(
        default=Path("backups"),
        description="Directory for storage backups",
    )

    max_backups: int = Field(
        default=10,
        ge=1,
        description="Number of backups kept after rotation",
    )

    # ===== LOGGING =====

    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Root logging level",
    )

    log_to_file: bool = Field(
        default=False,
        description="Also write logs to a rotating file in log_dir",
    )

    log_dir: Path = Field(
        default=Path("logs"),
        description="Directory for log files",
    )

    log_format: str = Field(
        default="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        description="logging.Formatter format string",
    )

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        if value not in pytz.all_timezones_set:
            raise ValueError(f"Unknown timezone: {value}")
        return value

    @field_validator("storage_slot", "data_file")
    @classmethod
    def validate_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @property
    def data_path(self) -> Path:
        return self.data_dir / self.data_file

    @property
    def tzinfo(self) -> tzinfo:
        return get_timezone(self.timezone)

    def ensure_directories(self) -> None:
        """Create the directories the engine writes into"""
        directories = [self.data_dir]
        if self.backup_enabled:
            directories.append(self.backup_dir)
        if self.log_to_file:
            directories.append(self.log_dir)

        for directory in directories:
            directory.mkdir(parents=True, exist_ok=True)

    def get_logging_config(self) -> Dict[str, Any]:
        """dictConfig-compatible logging configuration"""
        handlers = ['console']
        if self.log_to_file:
            handlers.append('file')

        config: Dict[str, Any] = {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'default': {
                    'format': self.log_format,
                    'datefmt': '%Y-%m-%d %H:%M:%S'
                }
            },
            'handlers': {
                'console': {
                    'class': 'logging.StreamHandler',
                    'level': self.log_level.value,
                    'formatter': 'default',
                    'stream': sys.stdout
                }
            },
            'loggers': {
                '': {
                    'level': self.log_level.value,
                    'handlers': handlers,
                    'propagate': False
                }
            }
        }

        if self.log_to_file:
            config['handlers']['file'] = {
                'class': 'logging.handlers.RotatingFileHandler',
                'level': self.log_level.value,
                'formatter': 'default',
                'filename': str(self.log_dir / f"habit_engine_{self.environment.value}.log"),
                'maxBytes': 10485760,  # 10MB
                'backupCount': 5,
                'encoding': 'utf-8'
            }

        return config


def get_settings(**overrides: Any) -> HabitEngineSettings:
    """Build settings from the environment, with explicit overrides winning"""
    return HabitEngineSettings(**overrides)
