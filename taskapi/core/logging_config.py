# taskapi/core/logging_config.py

import logging

from taskapi.core.config import get_settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging() -> None:
    level = get_settings().log_level.upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)
    # SQL echo is noisy at INFO
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
