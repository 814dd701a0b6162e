"""
Property-based tests for the scan state machine.

Properties:
- A code that matches no serial leaves the store and the gateway untouched,
  in either mode
- filtered_view with active=False returns the whole collection, in order,
  whatever the text
- Receive followed by undo hands the item back to the named recipient,
  trimmed
- Issue followed by undo returns the item to the warehouse, appending
  exactly two log entries
"""

from hypothesis import HealthCheck, assume, given, settings
from hypothesis import strategies as st

from materials_kernel.domain.clock import DeterministicClock
from materials_kernel.domain.material import WAREHOUSE_POSITION
from materials_kernel.domain.results import ResultKind, ScanMode
from materials_kernel.services.inventory_store import InventoryStore
from materials_kernel.services.scan_processor import ScanProcessor
from materials_kernel.services.undo_engine import UndoEngine
from tests.support import FIXED_TIME, RecordingGateway, issued_material, make_material

serials = st.text(alphabet="ABCDEFGHJKLMNPQRSTUVWXYZ0123456789-", min_size=1, max_size=10)
holder_names = st.text(min_size=1, max_size=30).map(str.strip).filter(bool)
scan_modes = st.sampled_from(list(ScanMode))


def _stocked(materials):
    gateway = RecordingGateway(rows=list(materials))
    store = InventoryStore(gateway)
    gateway.calls.clear()
    return store, gateway


def _engines(store):
    clock = DeterministicClock(FIXED_TIME)
    return ScanProcessor(store, clock), UndoEngine(store, clock)


class TestUnknownCodes:
    @given(
        stock=st.lists(st.tuples(serials, st.booleans()), max_size=8),
        code=st.text(max_size=12),
        mode=scan_modes,
        recipient=st.text(max_size=12),
    )
    @settings(max_examples=200, suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture])
    def test_unknown_code_changes_nothing(self, stock, code, mode, recipient):
        assume(code.strip())
        assume(not any(serial.startswith(code.strip()) for serial, _ in stock))
        materials = [
            make_material(serial) if in_lager else issued_material(serial)
            for serial, in_lager in stock
        ]
        store, gateway = _stocked(materials)
        processor, _ = _engines(store)

        result = processor.process_scan(code, mode, recipient)

        assert result.kind is ResultKind.NOT_FOUND
        assert store.materials == tuple(materials)
        assert gateway.calls == []


class TestFilteredView:
    @given(
        stock=st.lists(st.tuples(serials, st.text(max_size=15)), max_size=8),
        text=st.text(max_size=15),
    )
    @settings(max_examples=200, suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture])
    def test_inactive_filter_returns_everything(self, stock, text):
        materials = [make_material(serial, designation) for serial, designation in stock]
        store, _ = _stocked(materials)

        assert store.filtered_view(text, active=False) == tuple(materials)

    @given(
        stock=st.lists(st.tuples(serials, st.text(max_size=15)), max_size=8),
        text=st.text(max_size=15),
    )
    @settings(max_examples=200, suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture])
    def test_active_filter_is_an_ordered_subset(self, stock, text):
        materials = [make_material(serial, designation) for serial, designation in stock]
        store, _ = _stocked(materials)

        view = store.filtered_view(text, active=True)

        assert [m for m in materials if m in view] == list(view)


class TestUndoRoundTrips:
    @given(
        holder=holder_names,
        recipient=st.text(min_size=1, max_size=30).filter(str.strip),
        serial=serials,
    )
    @settings(max_examples=200, suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture])
    def test_receive_then_undo_restores_holder(self, holder, recipient, serial):
        material = issued_material(serial, holder=holder)
        store, _ = _stocked([material])
        processor, undo = _engines(store)

        assert processor.process_scan(serial, ScanMode.RECEIVE, recipient).success
        assert undo.undo_by_serial(serial).success

        restored = store.find_by_id(material.id)
        assert restored.in_lager is False
        assert restored.position == recipient.strip()
        assert restored.log[: len(material.log)] == material.log
        assert len(restored.log) == len(material.log) + 2

    @given(recipient=holder_names, serial=serials)
    @settings(max_examples=200, suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture])
    def test_issue_then_undo_returns_to_warehouse(self, recipient, serial):
        material = make_material(serial)
        store, _ = _stocked([material])
        processor, undo = _engines(store)

        assert processor.process_scan(serial, ScanMode.ISSUE, recipient).success
        assert undo.undo_by_serial(serial).success

        restored = store.find_by_id(material.id)
        assert restored.in_lager is True
        assert restored.position == WAREHOUSE_POSITION
        assert len(restored.log) == 2
