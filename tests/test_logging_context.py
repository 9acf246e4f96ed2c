"""Tests for session-id correlation logging."""

import io
import logging

from catalog_chat.config import LOG_FORMAT, load_config
from catalog_chat.logging_context import (
    SessionIdFilter,
    attach_session_filter,
    get_session_id,
    get_session_logger,
    set_session_id,
)


class TestSessionId:
    def test_set_and_get(self):
        set_session_id("SESSION-test")
        assert get_session_id() == "SESSION-test"

    def test_filter_injects_session_id(self):
        set_session_id("SESSION-filter")
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
        assert SessionIdFilter().filter(record)
        assert record.session_id == "SESSION-filter"

    def test_logger_gets_single_filter(self):
        logger = get_session_logger("catalog_chat.tests.sample")
        get_session_logger("catalog_chat.tests.sample")
        assert sum(isinstance(f, SessionIdFilter) for f in logger.filters) == 1


class TestHandlerFilter:
    def test_plain_logger_output_carries_session_id(self):
        stream = io.StringIO()
        handler = logging.StreamHandler(stream)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        attach_session_filter(handler)
        logger = logging.getLogger("catalog_chat.tests.plain")
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
        try:
            set_session_id("SESSION-visible")
            logger.info("turn handled")
        finally:
            logger.removeHandler(handler)
        assert "[SESSION-visible]: turn handled" in stream.getvalue()

    def test_attach_is_idempotent(self):
        handler = logging.NullHandler()
        attach_session_filter(handler)
        attach_session_filter(handler)
        assert sum(isinstance(f, SessionIdFilter) for f in handler.filters) == 1

    def test_load_config_filters_root_handlers(self):
        load_config()
        for handler in logging.getLogger().handlers:
            assert any(isinstance(f, SessionIdFilter) for f in handler.filters)
