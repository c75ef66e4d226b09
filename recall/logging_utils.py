"""
Logging setup.

Loggers are configured once per name with a console handler. JSON output
(python-json-logger) is the default; set LOG_FORMAT=text for plain lines.
"""

import logging
import os
import sys

from pythonjsonlogger import jsonlogger


def get_logger(name: str = "recall") -> logging.Logger:
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT = os.getenv("LOG_FORMAT", "json")

    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    logger.setLevel(LOG_LEVEL.upper())

    handler = logging.StreamHandler(sys.stdout)
    if LOG_FORMAT == "json":
        fmt = jsonlogger.JsonFormatter("%(asctime)s %(levelname)s %(name)s %(message)s")
    else:
        fmt = logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
    handler.setFormatter(fmt)
    logger.addHandler(handler)

    return logger
