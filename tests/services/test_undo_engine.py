"""
UndoEngine tests.

Tests cover:
- Undo of an issue returns the item to the warehouse
- Undo of a receipt returns it to the holder named in that receipt
- NOT_FOUND / NO_HISTORY / UNSUPPORTED_UNDO leave everything untouched
- Legacy (untagged) log texts are still undoable
- The log only ever grows
"""

from materials_kernel.domain.material import WAREHOUSE_POSITION, LogAction
from materials_kernel.domain.results import ResultKind, ScanMode
from tests.support import issued_material, make_entry, make_material


class TestUndoApplied:
    def test_undo_issue(self, seed, store, gateway, undo_engine):
        material = seed(issued_material(holder="Schulz"))

        result = undo_engine.undo_by_serial("SN123")

        assert result.kind is ResultKind.SUCCESS
        stored = store.find_by_id(material.id)
        assert stored.in_lager is True
        assert stored.position == WAREHOUSE_POSITION
        assert stored.log[-1].event_text == "Issue reversed - returned to warehouse"
        assert gateway.calls_named("update") == [stored]

    def test_undo_receipt_restores_holder(self, seed, store, scan_processor, undo_engine):
        material = seed(issued_material(holder="Meier"))
        scan_processor.process_scan("SN123", ScanMode.RECEIVE, "Meier")

        result = undo_engine.undo_by_serial("SN123")

        assert result.success
        stored = store.find_by_id(material.id)
        assert stored.in_lager is False
        assert stored.position == "Meier"
        assert stored.log[-1].event_text == "Receipt reversed - returned to Meier"
        assert len(stored.log) == 3

    def test_undo_receipt_without_holder(self, seed, store, undo_engine):
        material = seed(make_material(log=(make_entry(LogAction.RECEIVED, ""),)))

        undo_engine.undo_by_serial("SN123")

        stored = store.find_by_id(material.id)
        assert stored.in_lager is False
        assert stored.position == ""

    def test_undo_legacy_issue_text(self, seed, store, undo_engine):
        legacy = make_entry(None, text="Material per Scan ausgegeben an Schulz")
        material = seed(
            make_material(in_lager=False, position="Schulz", log=(legacy,))
        )

        result = undo_engine.undo_by_serial("SN123")

        assert result.success
        stored = store.find_by_id(material.id)
        assert stored.in_lager is True
        assert stored.log[0] == legacy

    def test_undo_uses_actor(self, seed, store, undo_engine):
        material = seed(issued_material())

        undo_engine.undo_by_serial("SN123", actor="Supervisor")

        assert store.find_by_id(material.id).log[-1].actor == "Supervisor"

    def test_log_is_never_truncated(self, seed, store, scan_processor, undo_engine):
        material = seed(make_material())

        scan_processor.process_scan("SN123", ScanMode.ISSUE, "Meier")
        undo_engine.undo_by_serial("SN123")
        scan_processor.process_scan("SN123", ScanMode.ISSUE, "Schulz")
        undo_engine.undo_by_serial("SN123")

        stored = store.find_by_id(material.id)
        assert [e.action for e in stored.log] == [
            LogAction.ISSUED,
            LogAction.ISSUE_UNDONE,
            LogAction.ISSUED,
            LogAction.ISSUE_UNDONE,
        ]
        assert stored.in_lager is True


class TestUndoRejected:
    def test_unknown_serial(self, seed, gateway, undo_engine):
        seed(make_material())

        result = undo_engine.undo_by_serial("NOPE")

        assert result.kind is ResultKind.NOT_FOUND
        assert gateway.calls == []

    def test_no_history(self, seed, store, gateway, undo_engine):
        material = seed(make_material())

        result = undo_engine.undo_by_serial("SN123")

        assert result.kind is ResultKind.NO_HISTORY
        assert result.message == "No previous action found for serial number SN123."
        assert store.find_by_id(material.id) == material
        assert gateway.calls == []

    def test_undo_of_undo_is_unsupported(self, seed, store, gateway, undo_engine):
        material = seed(issued_material())
        undo_engine.undo_by_serial("SN123")
        after_first = store.find_by_id(material.id)
        gateway.calls.clear()

        result = undo_engine.undo_by_serial("SN123")

        assert result.kind is ResultKind.UNSUPPORTED_UNDO
        assert result.message == "Last action cannot be undone."
        assert store.find_by_id(material.id) == after_first
        assert gateway.calls == []

    def test_free_text_entry_is_unsupported(self, seed, undo_engine, captured_logs):
        seed(make_material(log=(make_entry(None, text="Manually relocated"),)))

        result = undo_engine.undo_by_serial("SN123")

        assert result.kind is ResultKind.UNSUPPORTED_UNDO
        rejected = [r for r in captured_logs() if r["message"] == "undo_rejected"]
        assert rejected[0]["last_event"] == "Manually relocated"
