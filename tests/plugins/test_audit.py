"""Tests for the built-in audit plugin."""

from __future__ import annotations

from structlog.testing import capture_logs

from periodctl.plugins.builtins.audit import AuditPlugin
from periodctl.plugins.event_bus import EventBus
from periodctl.plugins.manager import PluginManager


def _bus() -> EventBus:
    pm = PluginManager()
    pm.register_plugin(AuditPlugin(), name="audit-builtin")
    return EventBus(pm)


class TestAuditPlugin:
    def test_logs_created_period(self) -> None:
        with capture_logs() as logs:
            _bus().dispatch(
                "post_create",
                {
                    "tenant_id": "acme",
                    "period_id": 7,
                    "start": "2025-01-01",
                    "end": "2025-01-15",
                    "periodicity": "biweekly",
                    "ordinal_number": 1,
                },
            )
        assert logs == [
            {
                "event": "period.created",
                "log_level": "info",
                "tenant_id": "acme",
                "period_id": 7,
                "start": "2025-01-01",
                "end": "2025-01-15",
                "periodicity": "biweekly",
                "ordinal_number": 1,
            }
        ]

    def test_failed_verification_is_a_warning(self) -> None:
        with capture_logs() as logs:
            _bus().dispatch(
                "post_verify",
                {
                    "tenant_id": "acme",
                    "periodicity": "biweekly",
                    "is_valid": False,
                    "gaps": ["gap"],
                    "overlaps": [],
                },
            )
        assert logs[0]["event"] == "periods.verified"
        assert logs[0]["log_level"] == "warning"
        assert logs[0]["gaps"] == 1
