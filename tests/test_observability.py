import io
import json
import logging

import pytest
from botocore.exceptions import IncompleteReadError
from prometheus_client import REGISTRY

from gateway.common.config import Settings
from gateway.common.logging import JsonFormatter, setup_logging
from gateway.infra.storage.errors import ObjectNotFound
from gateway.services.s3_gateway import S3Gateway


def _count(operation: str, outcome: str) -> float:
    value = REGISTRY.get_sample_value(
        "gateway_operations_total", {"operation": operation, "outcome": outcome}
    )
    return value or 0.0


def _observations(operation: str) -> float:
    value = REGISTRY.get_sample_value(
        "gateway_operation_duration_seconds_count", {"operation": operation}
    )
    return value or 0.0


def test_successful_call_is_counted(gateway):
    before_ok = _count("list_buckets", "ok")
    before_latency = _observations("list_buckets")

    gateway.list_buckets()

    assert _count("list_buckets", "ok") == before_ok + 1
    assert _observations("list_buckets") == before_latency + 1


def test_failed_call_uses_error_kind_as_outcome(gateway, bucket):
    before = _count("head_object", "ObjectNotFound")

    with pytest.raises(ObjectNotFound):
        gateway.get_object_info(bucket, "missing.txt")

    assert _count("head_object", "ObjectNotFound") == before + 1


def test_metrics_can_be_disabled(clients):
    gateway = S3Gateway(clients, settings=Settings(ENABLE_METRICS=False))
    before = _count("list_buckets", "ok")

    gateway.list_buckets()

    assert _count("list_buckets", "ok") == before


def test_backend_errors_are_logged(gateway, bucket, caplog):
    with caplog.at_level(logging.WARNING, logger="gateway.backend"):
        with pytest.raises(ObjectNotFound):
            gateway.get_object_info(bucket, "missing.txt")

    record = next(r for r in caplog.records if r.name == "gateway.backend")
    assert "backend_error" in record.getMessage()
    assert record.extra["operation"] == "head_object"
    assert record.extra["object"] == "missing.txt"
    assert record.extra["outcome"] == "ObjectNotFound"


def test_short_read_is_logged_and_counted(gateway, bucket, caplog):
    gateway.put_object(bucket, "digits.txt", 10, io.BytesIO(b"0123456789"), None)
    before = _count("get_object", "IncompleteReadError")

    with caplog.at_level(logging.WARNING, logger="gateway.backend"):
        with pytest.raises(IncompleteReadError):
            gateway.get_object(bucket, "digits.txt", 6, 10, io.BytesIO())

    assert _count("get_object", "IncompleteReadError") == before + 1
    record = next(r for r in caplog.records if r.name == "gateway.backend")
    assert record.extra["outcome"] == "IncompleteReadError"
    assert record.extra["object"] == "digits.txt"


def test_json_formatter_orders_operation_fields():
    record = logging.LogRecord(
        "gateway.backend", logging.WARNING, __file__, 1, "backend_error", None, None
    )
    record.extra = {
        "exception": "ClientError()",
        "duration_ms": 1.5,
        "outcome": "ObjectNotFound",
        "object": "",
        "bucket": "photos",
        "operation": "head_object",
    }

    payload = json.loads(JsonFormatter().format(record))

    assert list(payload) == [
        "ts",
        "level",
        "logger",
        "message",
        "operation",
        "bucket",
        "object",
        "outcome",
        "duration_ms",
        "exception",
    ]
    assert payload["object"] is None
    assert payload["bucket"] == "photos"
    assert payload["level"] == "WARNING"


@pytest.fixture()
def restore_logging():
    root = logging.getLogger()
    saved = (root.level, list(root.handlers))
    yield
    root.setLevel(saved[0])
    root.handlers[:] = saved[1]
    logging.getLogger("gateway.backend").setLevel(logging.NOTSET)
    startup = logging.getLogger("gateway.startup")
    startup.handlers.clear()
    startup.setLevel(logging.NOTSET)
    startup.propagate = True


def test_setup_logging_sets_backend_level(restore_logging):
    setup_logging("WARNING", backend_level="DEBUG")

    assert logging.getLogger().level == logging.WARNING
    assert logging.getLogger("gateway.backend").level == logging.DEBUG
    assert logging.getLogger("gateway.startup").propagate is False
