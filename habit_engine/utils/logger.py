# habit_engine/utils/logger.py

import logging
import logging.config
from typing import Optional

from habit_engine.config import HabitEngineSettings, get_settings


def setup_logging(settings: Optional[HabitEngineSettings] = None) -> logging.Logger:
    settings = settings or get_settings()
    if settings.log_to_file:
        settings.log_dir.mkdir(parents=True, exist_ok=True)
    logging.config.dictConfig(settings.get_logging_config())
    return logging.getLogger()
