"""
Structured Logging Configuration Module

Every account operation is logged as one JSON line carrying the operation
name, the account it touched and its amounts.
"""

import logging
import json
from datetime import datetime, timezone
from typing import Optional

ROOT_LOGGER = "bank_simulation"

OPERATION_FIELDS = ("operation", "account_id", "details")

TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """One JSON object per record, operation fields included when present"""

    def format(self, record):
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in OPERATION_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                log_entry[name] = value

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


def setup_logging(level: str = "INFO", logger_name: str = ROOT_LOGGER,
                  log_format: str = "json") -> logging.Logger:
    """
    Attach a single stdout handler to the simulation logger.

    Args:
        level: Log level name
        logger_name: Logger to configure
        log_format: "json" or "text"
    """
    logger = logging.getLogger(logger_name)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    formatter = JSONFormatter() if log_format == "json" else logging.Formatter(TEXT_FORMAT)
    handler.setFormatter(formatter)

    logger.addHandler(handler)
    logger.setLevel(level.upper())
    logger.propagate = False
    return logger


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    return logging.getLogger(name)


def log_operation(logger: logging.Logger, level: str, message: str,
                  operation: Optional[str] = None, account_id: Optional[str] = None,
                  details: Optional[dict] = None):
    """
    Log an account operation with its structured fields.

    Args:
        logger: Logger instance
        level: Log level name (info, warning, ...)
        message: Human readable message
        operation: Operation name, e.g. "saving_deposit"
        account_id: Account or CDT the operation touched
        details: Amounts and resulting balances
    """
    fields = {"operation": operation, "account_id": account_id, "details": details}
    logger.log(
        getattr(logging, level.upper()),
        message,
        extra={k: v for k, v in fields.items() if v is not None}
    )
