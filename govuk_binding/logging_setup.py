"""Structured JSON logging for binding runs."""

from __future__ import annotations

import json
import logging
import os
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional


LOGGER_NAME = "govuk_binding"
DEFAULT_MAX_LOG_BYTES = 2 * 1024 * 1024

# Attributes every LogRecord carries; anything else came in through ``extra``.
STANDARD_ATTRS = set(
    logging.LogRecord("", logging.INFO, "", 0, "", args=(), exc_info=None).__dict__
) | {"message", "asctime", "taskName"}


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key in STANDARD_ATTRS:
                continue
            payload[key] = value

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=True, default=_json_default)


class TruncatingFileHandler(logging.FileHandler):
    """File handler that drops the oldest lines once the file passes ``max_bytes``."""

    def __init__(self, filename: str | Path, max_bytes: int = DEFAULT_MAX_LOG_BYTES) -> None:
        super().__init__(filename, mode="a", encoding="utf-8", delay=False)
        self.max_bytes = max_bytes

    def emit(self, record: logging.LogRecord) -> None:
        super().emit(record)
        if self.max_bytes <= 0:
            return
        try:
            self.flush()
            if os.path.getsize(self.baseFilename) > self.max_bytes:
                self._keep_tail()
        except OSError:
            self.handleError(record)

    def _keep_tail(self) -> None:
        with open(self.baseFilename, "rb+") as handle:
            handle.seek(0, os.SEEK_END)
            size = handle.tell()
            handle.seek(max(0, size - self.max_bytes))
            tail = handle.read()
            # Never keep a partial first line.
            newline_index = tail.find(b"\n")
            if newline_index != -1:
                tail = tail[newline_index + 1 :]
            handle.seek(0)
            handle.write(tail)
            handle.truncate()


def _json_default(value: Any) -> str:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


class MergeExtraAdapter(logging.LoggerAdapter):
    def process(self, msg, kwargs):
        merged = dict(self.extra)
        merged.update(kwargs.get("extra") or {})
        kwargs["extra"] = merged
        return msg, kwargs


def setup_logging(
    log_file: Optional[str],
    level: str,
    request_id: str,
    max_bytes: int = DEFAULT_MAX_LOG_BYTES,
) -> logging.LoggerAdapter:
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.propagate = False

    formatter = JsonFormatter()
    handlers: list = [logging.StreamHandler()]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(TruncatingFileHandler(log_path, max_bytes=max_bytes))

    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(level)
        logger.addHandler(handler)

    return MergeExtraAdapter(logger, {"requestId": request_id})
