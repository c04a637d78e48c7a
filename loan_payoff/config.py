"""Runtime configuration for the loan payoff calculator.

Settings come from environment variables so the same code runs on a laptop
and behind a web server without edits.
"""

from __future__ import annotations

import copy
import logging.config
import os

# --- Web application ---
SECRET_KEY = os.environ.get("FLASK_SECRET_KEY", "dev-secret-key")
ASSET_VERSION = os.environ.get("ASSET_VERSION", "1")
PORT = int(os.environ.get("LOAN_PAYOFF_PORT", "8710"))

# --- Display ---
DEFAULT_LOCALE = os.environ.get("LOAN_PAYOFF_LOCALE", "en-US")
MAX_SCHEDULE_ROWS = 120  # rows printed to a terminal before truncating

# --- Input limits ---
# The simulation may run up to twice the term, so user-supplied terms are bounded.
MAX_TERM_YEARS = 100

# --- Logging Configuration ---
LOG_LEVEL = os.environ.get("LOAN_PAYOFF_LOG_LEVEL", "WARNING").upper()

LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
            "stream": "ext://sys.stderr",
        },
    },
    "loggers": {
        "loan_payoff": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": True},
        "loan_payoff_web": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": True},
    },
}


def configure_logging(level: str | None = None) -> None:
    """Apply ``LOGGING_CONFIG``, optionally overriding the level."""
    config = copy.deepcopy(LOGGING_CONFIG)
    if level:
        for logger_config in config["loggers"].values():
            logger_config["level"] = level.upper()
    logging.config.dictConfig(config)
