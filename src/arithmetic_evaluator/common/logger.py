"""Package logger shared by the pipeline, the batch workers and the CLI."""
import logging
import os
from typing import Optional, Union

LOGGER_NAME = "arithmetic_evaluator"
LOG_LEVEL_ENV = "ARITHMETIC_EVALUATOR_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(processName)s: %(message)s"


def configure_logging(level: Optional[Union[str, int]] = None) -> logging.Logger:
    """
    Attach a stream handler to the package logger (once) and set its level.

    :param level: Logging level name or number, defaults to the
        ``ARITHMETIC_EVALUATOR_LOG_LEVEL`` environment variable, then ``WARNING``

    :return: The configured package logger
    :rtype: logging.Logger
    """
    log = logging.getLogger(LOGGER_NAME)
    if not log.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        log.addHandler(handler)
        log.propagate = False

    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, "WARNING")
    log.setLevel(level.upper() if isinstance(level, str) else level)
    return log


logger = configure_logging()
