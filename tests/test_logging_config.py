"""
Tests for structured logging helpers
"""

import json
import logging
import logging.handlers

from config.app_config import AppConfig
from utils.logging_config import (
    ErrorTracker,
    StreamlitLogHandler,
    StructuredFormatter,
    get_logger,
    log_conversation_event,
    log_user_interaction,
    setup_logging,
)


def make_record(message="hello", **extra):
    record = logging.LogRecord(
        name="nova.test", level=logging.INFO, pathname=__file__, lineno=10,
        msg=message, args=(), exc_info=None, func="handler",
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestStructuredFormatter:
    """Test JSON log formatting"""

    def setup_method(self):
        """Set up test environment"""
        self.formatter = StructuredFormatter()

    def test_base_fields(self):
        """Test the base log structure"""
        payload = json.loads(self.formatter.format(make_record()))

        assert payload["level"] == "INFO"
        assert payload["logger"] == "nova.test"
        assert payload["message"] == "hello"
        assert payload["function"] == "handler"
        assert payload["line"] == 10
        assert "extra" not in payload

    def test_extra_fields_included(self):
        """Test custom fields land under extra, conversation id at the top"""
        payload = json.loads(self.formatter.format(make_record(conversation_id="c1", count=2)))

        assert payload["conversation_id"] == "c1"
        assert payload["extra"] == {"count": 2}

    def test_exception_info(self):
        """Test exceptions are serialised"""
        try:
            raise ValueError("boom")
        except ValueError:
            import sys
            record = make_record()
            record.exc_info = sys.exc_info()

        payload = json.loads(self.formatter.format(record))

        assert payload["exception"]["type"] == "ValueError"
        assert payload["exception"]["message"] == "boom"


class TestEventHelpers:
    """Test interaction and conversation event logging"""

    def test_log_user_interaction(self, caplog):
        """Test user interactions carry their type and details"""
        logger = get_logger("nova.test.interaction")

        with caplog.at_level(logging.INFO, logger="nova.test.interaction"):
            log_user_interaction(logger, "submit", conversation_id="c1", attachments=2)

        record = caplog.records[-1]
        assert record.event_type == "user_interaction"
        assert record.interaction_type == "submit"
        assert record.attachments == 2

    def test_log_conversation_event(self, caplog):
        """Test conversation events carry the conversation id"""
        logger = get_logger("nova.test.conversation")

        with caplog.at_level(logging.INFO, logger="nova.test.conversation"):
            log_conversation_event(logger, "reply_delivered", "c9", provider="openai")

        record = caplog.records[-1]
        assert record.event_type == "conversation_event"
        assert record.conversation_event_type == "reply_delivered"
        assert record.conversation_id == "c9"
        assert record.provider == "openai"


class TestSetupLogging:
    """Test handler wiring"""

    def setup_method(self):
        """Set up test environment"""
        self.root = logging.getLogger()
        self.saved_handlers = list(self.root.handlers)
        self.saved_level = self.root.level

    def teardown_method(self):
        """Clean up test environment"""
        for handler in self.root.handlers:
            handler.close()
        self.root.handlers[:] = self.saved_handlers
        self.root.setLevel(self.saved_level)

    def test_production_handlers(self, tmp_path):
        """Test JSON console plus a rotating file"""
        config = AppConfig(environment="production", debug=False)
        config.logging.log_file = str(tmp_path / "logs" / "app.log")
        config.logging.backup_count = 2

        setup_logging(config)

        console, rotating = self.root.handlers
        assert isinstance(console.formatter, StructuredFormatter)
        assert isinstance(rotating, logging.handlers.RotatingFileHandler)
        assert rotating.backupCount == 2
        assert (tmp_path / "logs").is_dir()

    def test_development_adds_streamlit_handler(self):
        """Test inline notices while developing"""
        config = AppConfig(environment="development", debug=True)
        config.logging.enable_file_logging = False

        setup_logging(config)

        assert any(isinstance(handler, StreamlitLogHandler) for handler in self.root.handlers)
        assert not isinstance(self.root.handlers[0].formatter, StructuredFormatter)


class TestErrorTracker:
    """Test error counting"""

    def setup_method(self):
        """Set up test environment"""
        self.tracker = ErrorTracker(get_logger("nova.test.errors"))

    def test_counts_by_type_and_context(self, caplog):
        """Test repeated errors are counted per context"""
        with caplog.at_level(logging.ERROR, logger="nova.test.errors"):
            self.tracker.track_error(ValueError("a"), "render")
            self.tracker.track_error(ValueError("b"), "render")
            self.tracker.track_error(KeyError("c"), "pump")

        summary = self.tracker.get_error_summary()

        assert summary["total_errors"] == 3
        assert summary["unique_errors"] == 2
        assert summary["error_breakdown"]["ValueError:render"] == 2
        assert caplog.records[-1].error_count == 1
