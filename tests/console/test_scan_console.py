"""Scanner console command handling."""

from io import StringIO

import pytest

from materials_kernel.domain.results import ScanMode
from materials_kernel.exceptions import (
    AuditLogImmutabilityError,
    MaterialNotFoundError,
    PersistenceError,
)
from materials_kernel.services.materials_service import MaterialsService
from scripts.scan_console import StationState, handle_line, run
from tests.support import RecordingGateway, issued_material, make_material


def _service(*materials):
    service = MaterialsService(RecordingGateway())
    for material in materials:
        service.add_material(material)
    return service


def test_scan_in_current_mode():
    service = _service(make_material("SN123", "Drill"))
    state = StationState(ScanMode.ISSUE, "Meier")

    output = handle_line(service, state, "SN123\n")

    assert output == "OK  Drill  Issued via scan to Meier"
    assert service.materials[0].position == "Meier"


def test_rejected_scan():
    service = _service(make_material("SN123", "Drill"))

    output = handle_line(service, StationState(), "SN123")

    assert output == '!!  "Drill" is already in the warehouse.'


def test_mode_and_recipient_commands():
    state = StationState()
    service = _service()

    assert handle_line(service, state, ":mode Ausgabe") == "mode: issue"
    assert handle_line(service, state, ":recipient Schulz") == "recipient: Schulz"
    assert state == StationState(ScanMode.ISSUE, "Schulz")


def test_undo_and_find():
    service = _service(issued_material("SN123", holder="Meier"), make_material("XY1", "Saw"))
    state = StationState()

    assert handle_line(service, state, ":undo SN123").startswith("OK  Drill")
    assert "Saw" in handle_line(service, state, ":find saw")
    assert handle_line(service, state, ":find wrench") == "(no matches)"


def test_blank_quit_and_unknown():
    service = _service()
    state = StationState()

    assert handle_line(service, state, "   ") == ""
    assert handle_line(service, state, ":quit") is None
    assert handle_line(service, state, ":frobnicate") == "unknown command: frobnicate"


def test_run_reports_errors_and_stops_at_quit():
    service = _service(make_material("SN123", "Drill"))
    stdin = StringIO(":mode inventory\n:mode issue\n:recipient Meier\nSN123\n:quit\nSN123\n")
    stdout = StringIO()

    assert run(service, StationState(), stdin, stdout) == 0

    lines = stdout.getvalue().splitlines()
    assert lines[0] == "!!  Unknown scan mode: 'inventory'"
    assert lines[1:] == [
        "mode: issue",
        "recipient: Meier",
        "OK  Drill  Issued via scan to Meier",
    ]


class _FailingGateway(RecordingGateway):
    def __init__(self, error):
        super().__init__()
        self._error = error

    def update(self, material):
        raise self._error


@pytest.mark.parametrize(
    "error, code",
    [
        (MaterialNotFoundError("m-1"), "MATERIAL_NOT_FOUND"),
        (AuditLogImmutabilityError("m-1", 0, "stored entry differs"), "AUDIT_LOG_IMMUTABLE"),
        (PersistenceError("update", "m-1", "database is locked"), "PERSISTENCE_ERROR"),
    ],
)
def test_run_reports_storage_faults_and_continues(captured_logs, error, code):
    service = MaterialsService(_FailingGateway(error))
    service.add_material(make_material("SN123", "Drill"))
    stdin = StringIO(":mode issue\n:recipient Meier\nSN123\n:find drill\n")
    stdout = StringIO()

    run(service, StationState(), stdin, stdout)

    lines = stdout.getvalue().splitlines()
    assert lines[2].startswith(f"!!  [{code}]")
    assert "Drill" in lines[3]
    failures = [r for r in captured_logs() if r["message"] == "console_command_failed"]
    assert failures[0]["line"] == "SN123"
    assert failures[0]["exc_code"] == code
