"""
Shared fixtures for taskledger tests.
"""

import pytest

from taskledger.audit import AuditLogger
from taskledger.models.audit import AuditEvent


class RecordingAuditLogger(AuditLogger):
    """AuditLogger that also remembers every event it logs."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.events: list[AuditEvent] = []

    def log(self, event: AuditEvent) -> None:
        super().log(event)
        self.events.append(event)

    def of_type(self, event_type) -> list[AuditEvent]:
        return [e for e in self.events if e.event_type == event_type]


@pytest.fixture
def audit_logger():
    return RecordingAuditLogger()
