"""
Process-wide JSON logging for RigAsset

All loggers live under the ``rigasset`` namespace. The namespace is
configured once, on first use, with a console handler and (unless LOG_FILE
is empty) a rotating main log plus an errors-only log beside it. Records
emitted while a request is being handled carry its method, path and the
authenticated user id.
"""

import json
import logging
import os
import threading
from logging.handlers import RotatingFileHandler
from pathlib import Path
from flask import g, has_request_context, request

ROOT_NAME = "rigasset"

_configure_lock = threading.Lock()
_configured = False


class RequestContextFilter(logging.Filter):
    """Attach request details to records logged inside a Flask request"""

    def filter(self, record):
        record.request = None
        if has_request_context():
            # Read the user Flask-Login has already loaded; never trigger a load
            user = g.get('_login_user')
            record.request = {'method': request.method, 'path': request.path, 'user_id': getattr(user, 'id', None)}
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per record"""

    FIELDS = {
        "level": "levelname",
        "logger": "name",
        "module": "module",
        "function": "funcName",
        "line": "lineno",
    }

    def format(self, record) -> str:
        entry = {"time": self.formatTime(record, "%Y-%m-%dT%H:%M:%S")}
        entry.update({key: getattr(record, attr) for key, attr in self.FIELDS.items()})
        entry["message"] = record.getMessage()

        if getattr(record, "request", None):
            entry["request"] = record.request
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            entry["stack_info"] = self.formatStack(record.stack_info)

        return json.dumps(entry, default=str)


def _file_handler(path: Path, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler = RotatingFileHandler(path, maxBytes=5 * 1024 * 1024, backupCount=3, encoding='utf-8')
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def _configure_root() -> None:
    """
    LOG_LEVEL sets the console level (default INFO). LOG_FILE names the main
    log (default logs/rigasset.log); errors.log is written next to it.
    """
    root = logging.getLogger(ROOT_NAME)
    root.setLevel(logging.DEBUG)
    root.propagate = False
    root.handlers.clear()

    formatter = JsonFormatter()
    context_filter = RequestContextFilter()

    console = logging.StreamHandler()
    console.setLevel(getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO))
    console.setFormatter(formatter)
    root.addHandler(console)

    log_file = os.environ.get("LOG_FILE", "logs/rigasset.log")
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        root.addHandler(_file_handler(log_path, logging.INFO, formatter))
        root.addHandler(_file_handler(log_path.with_name("errors.log"), logging.ERROR, formatter))

    for handler in root.handlers:
        handler.addFilter(context_filter)


def get_logger(name: str = ROOT_NAME) -> logging.Logger:
    """
    Logger for one area of the application, e.g. ``rigasset.api.transfers``.

    Names outside the ``rigasset`` namespace are placed under it.
    """
    global _configured
    if not _configured:
        with _configure_lock:
            if not _configured:
                _configure_root()
                _configured = True

    if name != ROOT_NAME and not name.startswith(ROOT_NAME + "."):
        name = f"{ROOT_NAME}.{name}"
    return logging.getLogger(name)
