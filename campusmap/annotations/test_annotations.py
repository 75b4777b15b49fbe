"""
Tests for annotations

Validates:
- Id format and uniqueness
- Create / remove / list semantics
- Persist then restore round-trip (ids included)
- Store and slot stay consistent when a write fails
- Malformed saved data is ignored
"""

import json
import random
from typing import Any, Dict, List

import pytest

from campusmap.errors import InvalidCoordinate, StorageError, ValidationError
from campusmap.storage.slots import MARKERS_SLOT, MemorySlotStore
from campusmap.widgets import HeadlessMap

from .ids import IdGenerator
from .models import Annotation
from .presenter import MapPresenter
from .store import AnnotationStore


class RecordingPresenter:
    """Presenter that records render / unrender calls."""
    
    def __init__(self):
        self.rendered: Dict[int, Annotation] = {}
        self.unrendered: List[int] = []
        self._next = 0
    
    def render(self, annotation: Annotation) -> int:
        self._next += 1
        self.rendered[self._next] = annotation
        return self._next
    
    def unrender(self, handle: Any) -> None:
        self.unrendered.append(handle)


class BrokenPresenter(RecordingPresenter):
    """Presenter whose render can be switched to fail."""
    
    def __init__(self):
        super().__init__()
        self.fail_renders = False
    
    def render(self, annotation: Annotation) -> int:
        if self.fail_renders:
            raise RuntimeError("map not ready")
        return super().render(annotation)


class FailingSlotStore(MemorySlotStore):
    """Slot store whose writes can be switched off."""
    
    def __init__(self):
        super().__init__()
        self.fail_writes = False
    
    def set(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise StorageError("disk full")
        super().set(key, value)


@pytest.fixture
def slots():
    return MemorySlotStore()


@pytest.fixture
def presenter():
    return RecordingPresenter()


@pytest.fixture
def store(slots, presenter):
    return AnnotationStore(slots, presenter)


class TestIdGenerator:
    
    def test_format(self):
        generator = IdGenerator(clock=lambda: 1700000000.5, rng=random.Random(1))
        annotation_id = generator.next()
        
        millis, suffix = annotation_id.split("_")
        assert millis == "1700000000500"
        assert len(suffix) == 7
        assert suffix.isalnum() and suffix == suffix.lower()
    
    def test_thousands_of_ids_are_unique(self):
        generator = IdGenerator()
        ids = [generator.next() for _ in range(5000)]
        assert len(set(ids)) == len(ids)
    
    def test_repeated_draw_is_redrawn(self):
        # Same seed twice, frozen clock: the second generator's first draw collides.
        first = IdGenerator(clock=lambda: 1.0, rng=random.Random(7))
        taken = first.next()
        
        second = IdGenerator(clock=lambda: 1.0, rng=random.Random(7))
        assert second.reserve(taken) is True
        assert second.next() != taken
    
    def test_reserve_reports_duplicates(self):
        generator = IdGenerator()
        assert generator.reserve("abc") is True
        assert generator.reserve("abc") is False


class TestAnnotationModel:
    
    def test_is_frozen(self):
        annotation = Annotation(id="1_a", lat=1.0, lng=2.0)
        with pytest.raises(AttributeError):
            annotation.name = "Changed"  # type: ignore[misc]
    
    def test_record_uses_desc_key(self):
        annotation = Annotation(id="1_a", lat=1.5, lng=2.5, name="Library", description="Quiet")
        assert annotation.to_record() == {
            "id": "1_a",
            "lat": 1.5,
            "lng": 2.5,
            "name": "Library",
            "desc": "Quiet",
        }
    
    def test_from_record_defaults(self):
        annotation = Annotation.from_record({"id": "1_a", "lat": "13.01", "lng": 76.12})
        assert annotation.name == "Untitled"
        assert annotation.description == ""
        assert annotation.lat == pytest.approx(13.01)
    
    @pytest.mark.parametrize("record", [
        [],
        {"lat": 1, "lng": 2},
        {"id": "x", "lat": "north", "lng": 2},
        {"id": "x", "lat": float("nan"), "lng": 2},
        {"id": "x", "lng": 2},
    ])
    def test_from_record_rejects_bad_records(self, record):
        with pytest.raises(ValueError):
            Annotation.from_record(record)


class TestAnnotationStore:
    
    def test_create_appends_persists_and_renders(self, store, slots, presenter):
        annotation = store.create(13.01, 76.12, "Library", "Books")
        
        assert store.list() == (annotation,)
        assert list(presenter.rendered.values()) == [annotation]
        saved = json.loads(slots.get(MARKERS_SLOT))
        assert saved == [annotation.to_record()]
    
    def test_create_defaults(self, store):
        annotation = store.create(1, 2)
        assert annotation.name == "Untitled"
        assert annotation.description == ""
    
    def test_create_blank_name_becomes_untitled(self, store):
        assert store.create(1, 2, name="   ").name == "Untitled"
    
    def test_create_accepts_form_strings(self, store):
        annotation = store.create("13.010075", " 76.120501 ")
        assert annotation.lat == pytest.approx(13.010075)
        assert annotation.lng == pytest.approx(76.120501)
    
    @pytest.mark.parametrize("lat,lng", [
        ("", 1.0),
        ("abc", 1.0),
        (float("nan"), 1.0),
        (1.0, float("inf")),
        (None, 1.0),
        (True, 1.0),
    ])
    def test_create_rejects_invalid_coordinates(self, store, slots, presenter, lat, lng):
        with pytest.raises(InvalidCoordinate):
            store.create(lat, lng)
        
        assert len(store) == 0
        assert presenter.rendered == {}
        assert slots.get(MARKERS_SLOT) is None
    
    def test_invalid_coordinate_is_validation_error(self):
        assert issubclass(InvalidCoordinate, ValidationError)
    
    def test_list_is_insertion_ordered_snapshot(self, store):
        first = store.create(1, 1, "A")
        second = store.create(2, 2, "B")
        snapshot = store.list()
        store.create(3, 3, "C")
        
        assert snapshot == (first, second)
        assert [a.name for a in store.list()] == ["A", "B", "C"]
    
    def test_remove_twice(self, store, presenter):
        keep = store.create(1, 1, "Keep")
        gone = store.create(2, 2, "Gone")
        
        assert store.remove(gone.id) is True
        assert store.remove(gone.id) is False
        assert store.list() == (keep,)
        assert presenter.unrendered == [2]
    
    def test_remove_unknown_id_is_noop(self, store, slots):
        store.create(1, 1)
        before = slots.get(MARKERS_SLOT)
        
        assert store.remove("missing") is False
        assert slots.get(MARKERS_SLOT) == before
    
    def test_remove_updates_slot(self, store, slots):
        annotation = store.create(1, 1)
        store.remove(annotation.id)
        assert json.loads(slots.get(MARKERS_SLOT)) == []
    
    def test_get(self, store):
        annotation = store.create(1, 1, "Gym")
        assert store.get(annotation.id) == annotation
        assert store.get("missing") is None


class TestConsistencyOnWriteFailure:
    
    def test_failed_create_changes_nothing(self, presenter):
        slots = FailingSlotStore()
        store = AnnotationStore(slots, presenter)
        existing = store.create(1, 1)
        slots.fail_writes = True
        
        with pytest.raises(StorageError):
            store.create(2, 2)
        
        assert store.list() == (existing,)
        assert len(presenter.rendered) == 1
    
    def test_failed_remove_changes_nothing(self, presenter):
        slots = FailingSlotStore()
        store = AnnotationStore(slots, presenter)
        first = store.create(1, 1)
        second = store.create(2, 2)
        slots.fail_writes = True
        
        with pytest.raises(StorageError):
            store.remove(first.id)
        
        assert store.list() == (first, second)
        assert presenter.unrendered == []


class TestConsistencyOnRenderFailure:
    
    def test_failed_render_keeps_nothing(self, slots):
        presenter = BrokenPresenter()
        store = AnnotationStore(slots, presenter)
        existing = store.create(1, 1, "Library")
        presenter.fail_renders = True
        
        with pytest.raises(RuntimeError, match="map not ready"):
            store.create(2, 2, "Gym")
        
        assert store.list() == (existing,)
        assert json.loads(slots.get(MARKERS_SLOT)) == [existing.to_record()]
        assert list(presenter.rendered.values()) == [existing]
    
    def test_store_usable_after_failed_render(self, slots):
        presenter = BrokenPresenter()
        store = AnnotationStore(slots, presenter)
        presenter.fail_renders = True
        
        with pytest.raises(RuntimeError):
            store.create(1, 1)
        assert json.loads(slots.get(MARKERS_SLOT)) == []
        
        presenter.fail_renders = False
        annotation = store.create(3, 3, "Stadium")
        assert store.list() == (annotation,)
        assert store.get(annotation.id) == annotation


class TestRestore:
    
    def test_round_trip_preserves_order_and_ids(self, slots):
        original = AnnotationStore(slots, RecordingPresenter())
        created = [
            original.create(13.0 + i / 1000, 76.0 + i / 1000, f"Spot {i}", f"Desc {i}")
            for i in range(5)
        ]
        original.persist()
        
        presenter = RecordingPresenter()
        restored = AnnotationStore(slots, presenter)
        assert restored.restore() == 5
        
        assert restored.list() == tuple(created)
        assert list(presenter.rendered.values()) == created
    
    def test_restored_spots_come_before_new_ones(self, slots):
        AnnotationStore(slots, RecordingPresenter()).create(1, 1, "Old")
        
        store = AnnotationStore(slots, RecordingPresenter())
        store.restore()
        store.create(2, 2, "New")
        
        assert [a.name for a in store.list()] == ["Old", "New"]
    
    def test_absent_slot_restores_nothing(self, store):
        assert store.restore() == 0
        assert store.list() == ()
    
    @pytest.mark.parametrize("raw", ["{broken", '{"id": "x"}', "null", '"text"'])
    def test_malformed_slot_restores_nothing(self, presenter, raw):
        store = AnnotationStore(MemorySlotStore({MARKERS_SLOT: raw}), presenter)
        assert store.restore() == 0
        assert presenter.rendered == {}
    
    def test_bad_and_duplicate_records_are_skipped(self, presenter):
        records = [
            {"id": "1_a", "lat": 1, "lng": 1, "name": "Good", "desc": ""},
            {"id": "2_b", "lat": "x", "lng": 1},
            {"id": "1_a", "lat": 2, "lng": 2, "name": "Dup", "desc": ""},
            "not a record",
        ]
        slots = MemorySlotStore({MARKERS_SLOT: json.dumps(records)})
        store = AnnotationStore(slots, presenter)
        
        assert store.restore() == 1
        assert [a.name for a in store.list()] == ["Good"]
    
    def test_restore_after_create_is_refused(self, store):
        store.create(1, 1)
        with pytest.raises(RuntimeError):
            store.restore()
    
    def test_new_ids_avoid_restored_ids(self, slots):
        AnnotationStore(slots, RecordingPresenter()).create(1, 1)
        
        store = AnnotationStore(slots, RecordingPresenter())
        store.restore()
        for _ in range(50):
            store.create(2, 2)
        
        ids = [a.id for a in store.list()]
        assert len(set(ids)) == len(ids)


class TestMapPresenter:
    
    def test_render_draws_point_with_escaped_popup(self):
        map_widget = HeadlessMap()
        presenter = MapPresenter(map_widget)
        annotation = Annotation(id="1_a", lat=1.0, lng=2.0, name="<b>Lab</b>", description="R&D")
        
        handle = presenter.render(annotation)
        point = map_widget.points[handle]
        
        assert (point.lat, point.lng) == (1.0, 2.0)
        assert "&lt;b&gt;Lab&lt;/b&gt;" in point.popup
        assert "R&amp;D" in point.popup
        assert 'data-id="1_a"' in point.popup
    
    def test_unrender_removes_point(self):
        map_widget = HeadlessMap()
        presenter = MapPresenter(map_widget)
        handle = presenter.render(Annotation(id="1_a", lat=1.0, lng=2.0))
        
        presenter.unrender(handle)
        assert map_widget.points == {}
