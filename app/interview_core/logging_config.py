"""
Purpose: Logging configuration for the core (console plus optional daily
rotated files).
Why: modules only ask for named loggers; the application decides once, via
setup_logging(), where records go. Nothing is configured on import.
"""

import logging
import logging.config
import os
from pathlib import Path
from typing import Optional, Union

FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] [%(filename)s:%(lineno)d] %(message)s"
DATEFMT = "%Y-%m-%d %H:%M:%S"


def build_logging_config(
    level: str = "INFO", log_dir: Optional[Union[str, Path]] = None
) -> dict:
    """Console always; daily-rotated files only when a log directory is given."""
    handlers = {
        "console": {
            "level": level.upper(),
            "class": "logging.StreamHandler",
            "formatter": "standard",
        },
    }
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        for name, file_name, file_level in (
            ("file_app", "interview_core.log", "DEBUG"),
            ("file_error", "interview_core.error.log", "ERROR"),
        ):
            handlers[name] = {
                "level": file_level,
                "class": "logging.handlers.TimedRotatingFileHandler",
                "filename": os.path.join(log_dir, file_name),
                "when": "midnight",
                "interval": 1,
                "backupCount": 30,
                "encoding": "utf-8",
                "formatter": "standard",
            }

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {"format": FORMAT, "datefmt": DATEFMT},
        },
        "handlers": handlers,
        "root": {
            "handlers": list(handlers),
            "level": "DEBUG",
        },
    }


def setup_logging(
    level: str = "INFO", log_dir: Optional[Union[str, Path]] = None
) -> None:
    """Apply the package logging configuration. Call once at startup."""
    logging.config.dictConfig(build_logging_config(level, log_dir))


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
