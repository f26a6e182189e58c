"""
Logging setup for the API.

A single stdout handler on the root logger writes JSON lines in production and
plain text in development. Every record is stamped with the service name and
environment, so several deployments can share one log sink.
"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

HANDLER_NAME = "talentdesk-console"

JSON_FORMAT = "%(timestamp)s %(level)s %(service)s %(environment)s %(logger)s %(message)s"
TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(service)s/%(environment)s %(name)s: %(message)s"

# Library loggers and the lowest level they may emit at
QUIET_LOGGERS = {
    "urllib3": logging.WARNING,
    "botocore": logging.WARNING,
    "boto3": logging.WARNING,
    "s3transfer": logging.WARNING,
    "sqlalchemy.engine": logging.WARNING,
    "multipart": logging.WARNING,
    "passlib": logging.ERROR,
}


class ServiceContextFilter(logging.Filter):
    """Attaches `service` and `environment` to every record passing the handler."""

    def __init__(self, service: str, environment: str):
        super().__init__()
        self.service = service
        self.environment = environment

    def filter(self, record: logging.LogRecord) -> bool:
        record.service = self.service
        record.environment = self.environment
        return True


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record['timestamp'] = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()
        log_record['level'] = record.levelname
        log_record['logger'] = record.name

        if record.levelno >= logging.WARNING:
            log_record['location'] = f"{record.module}:{record.lineno}"


def setup_logging(
    log_level: str = "INFO",
    json_logs: bool = True,
    service: str = "talentdesk",
    environment: str = "development",
) -> logging.Handler:
    """
    Install the console handler on the root logger and return it.

    Calling this again replaces the handler installed by the previous call;
    handlers added by anything else (uvicorn, pytest) are left alone.

    Args:
        log_level: Root level name, case-insensitive
        json_logs: JSON lines when True, plain text otherwise
        service: Value of the `service` field on every record
        environment: Value of the `environment` field on every record
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        if handler.get_name() == HANDLER_NAME:
            root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.set_name(HANDLER_NAME)
    console_handler.addFilter(ServiceContextFilter(service, environment))

    if json_logs:
        console_handler.setFormatter(CustomJsonFormatter(JSON_FORMAT))
    else:
        console_handler.setFormatter(logging.Formatter(TEXT_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))

    root_logger.setLevel(getattr(logging, log_level.upper()))
    root_logger.addHandler(console_handler)

    for name, level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)

    return console_handler
