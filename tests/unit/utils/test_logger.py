"""
Unit tests for the logging utilities.

Tests the ContextAwareLogger, CorrelationIdFilter, AzureQueueHandler,
and configuration functions. The Azure Storage clients are mocked.
"""

import json
import logging
import os
import sys
from io import StringIO
from unittest.mock import Mock, patch

import pytest

from identity_store.exceptions import clear_correlation_id, set_correlation_id
from identity_store.utils import logger as utils_logger
from identity_store.utils.logger import (
    AzureQueueHandler,
    ContextAwareLogger,
    CorrelationIdFilter,
    configure_logging,
    get_logger,
)

CONNECTION_STRING = "DefaultEndpointsProtocol=https;AccountName=test;AccountKey=dGVzdA==;"


@pytest.fixture(autouse=True)
def disable_queue_logging():
    """Disable queue logging by default so no test reaches Azure."""
    with patch.dict(os.environ, {"AzureWebJobsStorage": ""}, clear=False):
        yield


@pytest.fixture
def captured_logger():
    """A fresh logger writing bare messages into a buffer."""
    logger = logging.getLogger("identity_store.tests.captured")
    logger.handlers.clear()
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)

    yield logger, stream

    logger.handlers.clear()
    logger.filters.clear()


def make_record(msg="hello", level=logging.INFO, **extra):
    record = logging.LogRecord(
        name="identity_store.test",
        level=level,
        pathname=__file__,
        lineno=42,
        msg=msg,
        args=(),
        exc_info=None,
        func="test_function",
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestContextAwareLogger:
    def test_formats_extras_into_message(self, captured_logger):
        logger, stream = captured_logger

        ContextAwareLogger(logger).info("Issued client credentials", extra={"client_id": "web"})

        assert stream.getvalue().strip() == "Issued client credentials | client_id=web"

    def test_message_without_extras(self, captured_logger):
        logger, stream = captured_logger

        ContextAwareLogger(logger).warning("plain")

        assert stream.getvalue().strip() == "plain"

    def test_extras_stay_on_record(self, captured_logger):
        logger, _ = captured_logger
        records = []
        logger.addFilter(lambda record: records.append(record) or True)

        ContextAwareLogger(logger).debug("msg", extra={"count": 3})

        assert records[0].count == 3

    def test_all_levels(self, captured_logger):
        logger, stream = captured_logger
        wrapped = ContextAwareLogger(logger)

        wrapped.debug("d")
        wrapped.info("i")
        wrapped.warning("w")
        wrapped.error("e")

        assert stream.getvalue().split() == ["d", "i", "w", "e"]

    def test_set_level(self, captured_logger):
        logger, stream = captured_logger
        wrapped = ContextAwareLogger(logger)

        wrapped.set_level(logging.ERROR)
        wrapped.info("hidden")

        assert stream.getvalue() == ""


class TestCorrelationIdFilter:
    def teardown_method(self):
        clear_correlation_id()

    def test_adds_correlation_id(self):
        set_correlation_id("req-123")
        record = make_record()

        assert CorrelationIdFilter().filter(record) is True
        assert record.correlation_id == "req-123"

    def test_without_correlation_id(self):
        record = make_record()

        assert CorrelationIdFilter().filter(record) is True
        assert not hasattr(record, "correlation_id")


class TestAzureQueueHandler:
    def test_without_connection_string(self):
        handler = AzureQueueHandler(queue_name="logs", connection_string=None)

        assert handler.connection_string == ""
        handler.emit(make_record())
        handler.flush()

        assert len(handler.log_buffer) == 1

    def test_creates_missing_queue(self):
        with patch.object(utils_logger, "QueueServiceClient") as service_class:
            service = service_class.from_connection_string.return_value
            service.list_queues.return_value = []

            AzureQueueHandler(queue_name="logs", connection_string=CONNECTION_STRING)

        service.create_queue.assert_called_once_with("logs")

    def test_existing_queue_is_not_recreated(self):
        existing = Mock()
        existing.name = "logs"
        with patch.object(utils_logger, "QueueServiceClient") as service_class:
            service = service_class.from_connection_string.return_value
            service.list_queues.return_value = [existing]

            AzureQueueHandler(queue_name="logs", connection_string=CONNECTION_STRING)

        service.create_queue.assert_not_called()

    def test_build_entry(self):
        with patch.object(utils_logger, "QueueServiceClient"):
            handler = AzureQueueHandler(connection_string=CONNECTION_STRING)

        entry = handler.build_entry(
            make_record("Replaced connector configs", correlation_id="req-9", count=2)
        )

        assert entry["level"] == "INFO"
        assert entry["logger"] == "identity_store.test"
        assert entry["message"] == "Replaced connector configs"
        assert entry["function"] == "test_function"
        assert entry["line"] == 42
        assert entry["correlation_id"] == "req-9"
        assert entry["context"] == {"count": 2}
        assert "exception" not in entry

    def test_build_entry_with_exception(self):
        with patch.object(utils_logger, "QueueServiceClient"):
            handler = AzureQueueHandler(connection_string=CONNECTION_STRING)
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = make_record()
            record.exc_info = sys.exc_info()

        entry = handler.build_entry(record)

        assert entry["exception"]["type"] == "RuntimeError"
        assert entry["exception"]["message"] == "boom"

    def test_flushes_when_batch_is_full(self):
        with patch.object(utils_logger, "QueueServiceClient"), patch.object(
            utils_logger, "QueueClient"
        ) as queue_client_class:
            handler = AzureQueueHandler(
                queue_name="logs", connection_string=CONNECTION_STRING, batch_size=2
            )
            queue_client = queue_client_class.from_connection_string.return_value

            handler.emit(make_record("first"))
            queue_client.send_message.assert_not_called()

            handler.emit(make_record("second"))

        assert queue_client.send_message.call_count == 2
        sent = json.loads(queue_client.send_message.call_args_list[1].args[0])
        assert sent["message"] == "second"
        assert handler.log_buffer == []

    def test_close_flushes_remaining_entries(self):
        with patch.object(utils_logger, "QueueServiceClient"), patch.object(
            utils_logger, "QueueClient"
        ) as queue_client_class:
            handler = AzureQueueHandler(connection_string=CONNECTION_STRING, batch_size=10)
            handler.emit(make_record())

            handler.close()

        queue_client_class.from_connection_string.return_value.send_message.assert_called_once()


class TestConfigureLogging:
    def test_configures_console_logger(self):
        wrapped = configure_logging("tests", log_level="DEBUG", enable_queue=False)

        assert isinstance(wrapped, ContextAwareLogger)
        assert wrapped.logger.name == "identity_store.tests"
        assert wrapped.logger.level == logging.DEBUG
        assert len(wrapped.logger.handlers) == 1
        assert get_logger() is wrapped

    def test_reconfiguring_replaces_handlers(self):
        configure_logging("tests", enable_queue=False)
        wrapped = configure_logging("tests", enable_queue=False)

        assert len(wrapped.logger.handlers) == 1

    def test_adds_queue_handler(self):
        with patch.object(utils_logger, "QueueServiceClient"):
            wrapped = configure_logging(
                "tests", enable_queue=True, queue_name="audit", connection_string=CONNECTION_STRING
            )

        queue_handlers = [h for h in wrapped.logger.handlers if isinstance(h, AzureQueueHandler)]
        assert len(queue_handlers) == 1
        assert queue_handlers[0].queue_name == "audit"
        queue_handlers[0].log_buffer.clear()
        wrapped.logger.removeHandler(queue_handlers[0])


class TestGetLogger:
    def test_falls_back_to_package_logger(self):
        logger = get_logger()

        assert isinstance(logger, ContextAwareLogger)
        assert logger.logger.name == "identity_store"

    def test_level_override(self):
        assert get_logger(log_level="WARNING").logger.level == logging.WARNING
