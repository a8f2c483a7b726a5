"""
Structured logging for the chat session: JSON records for files and
production consoles, readable lines and inline Streamlit notices while
developing.
"""

import logging
import logging.handlers
import json
import traceback
from datetime import datetime
from pathlib import Path
from typing import Dict, Any, Optional
import streamlit as st

from config.app_config import AppConfig, get_config


# Attributes every LogRecord carries; anything else came in through ``extra``
_RESERVED_RECORD_FIELDS = {
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname',
    'filename', 'module', 'lineno', 'funcName', 'created',
    'msecs', 'relativeCreated', 'thread', 'threadName',
    'processName', 'process', 'getMessage', 'exc_info',
    'exc_text', 'stack_info', 'taskName'
}

# Lifted out of ``extra`` so session logs can be filtered per conversation
_TOP_LEVEL_FIELDS = ('conversation_id', 'event_type')

# Streamlit element and icon per minimum level, most severe first
_STREAMLIT_LEVELS = (
    (logging.ERROR, "error", "🚨"),
    (logging.WARNING, "warning", "⚠️"),
    (logging.INFO, "info", "ℹ️"),
)


class StructuredFormatter(logging.Formatter):
    """
    Formats records as one JSON object per line
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc_value, exc_tb = record.exc_info
            log_data["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "traceback": traceback.format_exception(exc_type, exc_value, exc_tb),
            }

        extra_fields = {
            key: value for key, value in record.__dict__.items()
            if key not in _RESERVED_RECORD_FIELDS
        }
        for key in _TOP_LEVEL_FIELDS:
            if key in extra_fields:
                log_data[key] = extra_fields.pop(key)

        if extra_fields:
            log_data["extra"] = extra_fields

        return json.dumps(log_data, ensure_ascii=False, default=str)


class StreamlitLogHandler(logging.Handler):
    """
    Shows log records inline on the page (development only)
    """

    def emit(self, record: logging.LogRecord):
        try:
            text = self.format(record)
            for level, element, icon in _STREAMLIT_LEVELS:
                if record.levelno >= level:
                    getattr(st, element)(f"{icon} {text}")
                    return
            st.text(f"🐛 {text}")
        except Exception:
            self.handleError(record)


def _console_handler(config: AppConfig) -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setLevel(getattr(logging, config.logging.level))
    if config.debug:
        handler.setFormatter(logging.Formatter(config.logging.format + ' [%(filename)s:%(lineno)d]'))
    else:
        handler.setFormatter(StructuredFormatter())
    return handler


def _file_handler(config: AppConfig) -> logging.Handler:
    log_file_path = Path(config.logging.log_file)
    log_file_path.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.handlers.RotatingFileHandler(
        log_file_path,
        maxBytes=config.logging.max_bytes,
        backupCount=config.logging.backup_count,
        encoding="utf-8",
    )
    handler.setLevel(logging.DEBUG)  # files keep everything
    handler.setFormatter(StructuredFormatter())
    return handler


def setup_logging(config: Optional[AppConfig] = None) -> logging.Logger:
    """
    Set up structured logging for the application

    Args:
        config: Configuration to apply; the global one when omitted

    Returns:
        logging.Logger: Configured root logger
    """
    config = config or get_config()

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, config.logging.level))

    # Streamlit reruns the script; avoid stacking handlers
    root_logger.handlers.clear()

    root_logger.addHandler(_console_handler(config))

    if config.logging.enable_file_logging:
        root_logger.addHandler(_file_handler(config))

    if config.debug and config.environment == "development":
        streamlit_handler = StreamlitLogHandler()
        streamlit_handler.setLevel(logging.WARNING)
        streamlit_handler.setFormatter(logging.Formatter('%(message)s'))
        root_logger.addHandler(streamlit_handler)

    return root_logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def log_user_interaction(logger: logging.Logger, interaction_type: str, **details):
    """
    Log something the user did in the chat window

    Args:
        logger: Logger instance
        interaction_type: e.g. "submit", "copy"
        **details: Additional interaction details
    """
    logger.info(f"User {interaction_type}", extra={
        "event_type": "user_interaction",
        "interaction_type": interaction_type,
        **details
    })


def log_conversation_event(logger: logging.Logger, event_type: str, conversation_id: str, **details):
    """
    Log a conversation lifecycle event

    Args:
        logger: Logger instance
        event_type: e.g. "created", "selected", "reply_delivered"
        conversation_id: Conversation identifier
        **details: Additional event details
    """
    logger.info(f"Conversation {event_type}", extra={
        "event_type": "conversation_event",
        "conversation_event_type": event_type,
        "conversation_id": conversation_id,
        **details
    })


class ErrorTracker:
    """
    Counts errors per type and context and logs each occurrence
    """

    def __init__(self, logger: logging.Logger):
        self.logger = logger
        self.error_counts: Dict[str, int] = {}

    def track_error(self, error: Exception, context: str = "", **extra_info):
        """
        Track and log an error with context

        Args:
            error: Exception that occurred
            context: Where it happened (e.g. "session_initialization")
            **extra_info: Additional error information
        """
        error_type = type(error).__name__
        error_key = f"{error_type}:{context}"
        self.error_counts[error_key] = self.error_counts.get(error_key, 0) + 1

        self.logger.error(f"Error in {context}: {error}", extra={
            "event_type": "error",
            "error_type": error_type,
            "context": context,
            "error_count": self.error_counts[error_key],
            **extra_info
        }, exc_info=(type(error), error, error.__traceback__))

    def get_error_summary(self) -> Dict[str, Any]:
        return {
            "total_errors": sum(self.error_counts.values()),
            "unique_errors": len(self.error_counts),
            "error_breakdown": dict(self.error_counts),
        }


_logger_setup = False
_error_tracker: Optional[ErrorTracker] = None


def initialize_logging() -> ErrorTracker:
    """
    Configure logging once per process and return the error tracker

    Returns:
        ErrorTracker: Global error tracker instance
    """
    global _logger_setup, _error_tracker

    if not _logger_setup:
        setup_logging()
        _logger_setup = True

    if _error_tracker is None:
        _error_tracker = ErrorTracker(logging.getLogger())

    return _error_tracker
