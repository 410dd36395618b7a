import logging
from logging import Logger

from .config_models import LoggingConfig


def setup_logging(config: LoggingConfig) -> None:
    """
    Configure root logging from a LoggingConfig.

    - Sets root level according to config.level
    - Applies a consistent format from config.format
    - Avoids reconfiguration if handlers already exist (idempotent)
    """
    level_name = (config.level or "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    # If already configured, just ensure level is set and return
    root = logging.getLogger()
    if root.handlers:
        root.setLevel(level)
        return

    logging.basicConfig(level=level, format=config.format)

    for noisy in ("uvicorn.access", "sqlalchemy.engine", "botocore", "multipart"):
        logging.getLogger(noisy).setLevel(max(level, logging.INFO))


__all__ = ["setup_logging", "Logger"]
