"""Unit tests for time, id and logging helpers."""
import json
import logging
from datetime import datetime, timedelta, timezone

from repairdesk.events.types import EVENT_TYPES, known_event_pairs, split_event_type
from repairdesk.domain.enums import EntityType, EventAction
from repairdesk.utils.idgen import generate_correlation_id, generate_event_id, generate_notification_id
from repairdesk.utils.logger import JsonFormatter, set_correlation_id
from repairdesk.utils.time import format_iso, parse_iso, whole_days_since


def test_whole_days_since_floors():
    now = datetime(2024, 6, 1, tzinfo=timezone.utc)
    assert whole_days_since(now - timedelta(days=3, hours=23), now) == 3
    assert whole_days_since(now - timedelta(hours=1), now) == 0


def test_whole_days_since_treats_naive_as_utc():
    now = datetime(2024, 6, 1, tzinfo=timezone.utc)
    assert whole_days_since(datetime(2024, 5, 1), now) == 31


def test_iso_round_trip_uses_z_suffix():
    dt = datetime(2024, 6, 1, 8, 30, tzinfo=timezone.utc)
    assert format_iso(dt) == "2024-06-01T08:30:00Z"
    assert parse_iso("2024-06-01T08:30:00Z") == dt


def test_id_prefixes_are_unique():
    assert generate_event_id().startswith("EVT-")
    assert generate_notification_id().startswith("NTF-")
    assert generate_correlation_id().startswith("COR-")
    assert generate_event_id() != generate_event_id()


def test_event_types_split_into_enum_pairs():
    assert split_event_type("ticket.status_changed") == (EntityType.TICKET, EventAction.STATUS_CHANGED)
    assert len(known_event_pairs()) == len(EVENT_TYPES)


def test_json_formatter_includes_structured_fields():
    set_correlation_id("COR-test")
    record = logging.LogRecord("repairdesk.test", logging.WARNING, __file__, 1, "delivery failed", None, None)
    record.event_id = "EVT-1"
    record.success = False

    line = json.loads(JsonFormatter().format(record))

    assert line["level"] == "WARNING"
    assert line["event_id"] == "EVT-1"
    assert line["success"] is False
    assert line["correlation_id"] == "COR-test"


def test_setup_logging_writes_app_and_error_logs(tmp_path, monkeypatch):
    from repairdesk.config.settings import settings
    from repairdesk.utils.logger import setup_logging

    root_logger = logging.getLogger()
    saved_handlers, saved_level = list(root_logger.handlers), root_logger.level
    monkeypatch.setattr(settings, "logs_path", str(tmp_path))
    try:
        setup_logging()
        handlers = list(root_logger.handlers)
        for handler in handlers:
            handler.close()
    finally:
        root_logger.handlers[:] = saved_handlers
        root_logger.setLevel(saved_level)

    assert len(handlers) == 3
    assert (tmp_path / "app.log").exists()
    assert (tmp_path / "error.log").exists()


def test_transition_denied_error_serializes_reason_code():
    from repairdesk.domain.errors import TransitionDeniedError

    error = TransitionDeniedError("nope", reason_code="TERMINAL_STATE", details={"ticket_id": "TKT-1"})
    body = error.to_dict()["error"]

    assert error.http_status == 403
    assert body["code"] == "TRANSITION_DENIED"
    assert body["details"] == {"reason_code": "TERMINAL_STATE", "ticket_id": "TKT-1"}
