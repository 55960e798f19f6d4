"""Tests for import chains and module integrity.

Ensures all public modules can be imported without errors and
that re-exports from __init__.py files work correctly.
"""

import pytest


class TestSchemaImports:
    def test_import_booking_schema(self):
        from lenslink.schemas import Booking, BookingStatus, ReassignmentEntry
        assert BookingStatus.IN_PROGRESS == "in_progress"
        assert "reassignment_history" in Booking.model_fields
        assert ReassignmentEntry.model_config.get("frozen") is True

    def test_import_photographer_schema(self):
        from lenslink.schemas import WeeklyAvailability
        week = WeeklyAvailability()
        assert week.sunday.available is False


class TestCoreImports:
    def test_import_scheduling(self):
        from lenslink.scheduling import (
            WEEKDAY_KEYS, BookingStateMachine, compute_cancellation, ensure_no_conflict,
        )
        assert WEEKDAY_KEYS[0] == "sunday"
        assert BookingStateMachine.TRANSITIONS

    def test_import_store(self):
        from lenslink.store import EntityStore, MemoryStore
        assert isinstance(MemoryStore(), EntityStore)

    def test_import_services(self):
        from lenslink.services import (
            AdminService, BookingService, FeedbackService, PhotographerService, UserService,
        )
        assert BookingService is not None

    def test_import_errors(self):
        from lenslink.errors import (
            InvalidTransitionError, LensLinkError, NotFoundError, SchedulingConflictError,
            UnauthorizedError, ValidationError, WindowClosedError,
        )
        for cls in (InvalidTransitionError, NotFoundError, SchedulingConflictError,
                    UnauthorizedError, ValidationError, WindowClosedError):
            assert issubclass(cls, LensLinkError)


class TestEntryPoints:
    def test_import_main(self):
        import main
        assert callable(main.build_services)

    def test_console_demo_runs(self, capsys):
        from console_demo import ConsoleSession
        ConsoleSession().run()
        out = capsys.readouterr().out
        assert "SchedulingConflictError" in out
        assert "WindowClosedError" in out

    def test_unknown_scenario_prints_usage(self, capsys):
        import main
        assert main._run_console_mode("badname") == 2
        out = capsys.readouterr().out
        assert "Unknown scenario: 'badname'" in out
        assert "Usage:" in out

    def test_run_scenario_rejects_unknown_name(self):
        from console_demo import ConsoleSession
        with pytest.raises(ValueError, match="badname"):
            ConsoleSession().run_scenario("badname")


class TestLoggingContext:
    def test_request_id_attached(self):
        import logging

        from lenslink.logging_context import (
            RequestIdFilter, get_request_id, get_request_logger, set_request_id,
        )
        set_request_id("REQ-42")
        logger = get_request_logger("lenslink.test")
        assert get_request_id() == "REQ-42"
        assert any(isinstance(f, RequestIdFilter) for f in logger.filters)
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
        RequestIdFilter().filter(record)
        assert record.request_id == "REQ-42"
