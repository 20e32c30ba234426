"""
Tests for SelectionSession (coordination of boundary, drawing and filters).

Run with: python -m pytest test_session.py -v
"""

import threading

import pytest

from dredge_zone import (
    DashboardConfig,
    DepthRange,
    EmptyBoundaryError,
    GeoPoint,
    NoSelectionError,
    SelectionSession,
    VertexIndexError,
)
from dredge_zone.control import EventNotAvailableError

from conftest import make_record, square


BOUNDARY_VERTICES = [GeoPoint(0, 0), GeoPoint(0, 10), GeoPoint(10, 10), GeoPoint(10, 0)]


@pytest.fixture
def records():
    return [
        make_record("in_boundary", lat=2, lng=2, depth=4.0, volume=100.0),
        make_record("in_adhoc", lat=12, lng=12, depth=6.0, volume=50.0),
    ]


@pytest.fixture
def session(records):
    return SelectionSession(records, boundary_vertices=BOUNDARY_VERTICES)


class TestStats:

    def test_stored_boundary_gives_official_stats(self, session):
        stats = session.stats
        assert stats.count == 1
        assert stats.volume == 100.0
        assert stats.is_official_boundary

    def test_drawing_adds_to_selection(self, session):
        session.dispatch('polygon_created', square(5, 5, 15, 15))

        assert session.stats.count == 2
        assert not session.stats.is_official_boundary

    def test_new_drawing_replaces_previous(self, session):
        session.dispatch('polygon_created', square(5, 5, 15, 15))
        session.dispatch('polygon_edited', square(50, 50, 60, 60))

        assert session.stats.count == 1
        assert session.adhoc_polygon == square(50, 50, 60, 60)

    def test_deleting_drawing_restores_official(self, session):
        session.dispatch('polygon_created', square(5, 5, 15, 15))
        session.dispatch('polygon_deleted')

        assert session.adhoc_polygon is None
        assert session.stats.is_official_boundary

    def test_drawing_accepts_vertex_dicts(self, session):
        session.set_adhoc_polygon([
            {'lat': 11, 'lng': 11},
            {'lat': 11, 'lng': 13},
            {'lat': 13, 'lng': 13},
            {'lat': 13, 'lng': 11},
        ])
        assert session.stats.count == 2

    def test_hidden_boundary_without_drawing_has_no_stats(self, session):
        session.set_boundary_visible(False)

        assert session.stats is None
        assert session.active_polygons.is_empty

    def test_no_records_has_no_stats(self):
        session = SelectionSession([], boundary_vertices=BOUNDARY_VERTICES)
        assert session.stats is None

    def test_depth_filter(self, session):
        session.dispatch('polygon_created', square(5, 5, 15, 15))
        session.set_depth_range(DepthRange(5.0, 30.0))

        assert session.stats.count == 1
        assert [r.id for r in session.selected_records()] == ["in_adhoc"]

    def test_listeners_receive_every_recomputation(self, session):
        received = []
        session.add_stats_listener(received.append)

        session.set_boundary_visible(False)
        session.set_boundary_visible(True)

        assert received[0] is None
        assert received[1].count == 1

    def test_unknown_event_raises(self, session):
        with pytest.raises(EventNotAvailableError):
            session.dispatch('rectangle_created', None)

    def test_drawing_event_without_polygon_raises(self, session):
        session.dispatch('polygon_created', square(5, 5, 15, 15))

        with pytest.raises(ValueError, match="requires a payload"):
            session.dispatch('polygon_created')

        assert session.adhoc_polygon == square(5, 5, 15, 15)

    def test_delete_event_rejects_payload(self, session):
        session.dispatch('polygon_created', square(5, 5, 15, 15))

        with pytest.raises(ValueError, match="does not take a payload"):
            session.dispatch('polygon_deleted', square(50, 50, 60, 60))

        assert session.adhoc_polygon == square(5, 5, 15, 15)

    def test_registered_events(self, session):
        assert session.events.available_events == {
            'polygon_created', 'polygon_edited', 'polygon_deleted', 'map_click',
        }


class TestRecordsAndDepthRange:

    def test_records_clamp_depth_range(self):
        records = [
            make_record("a", lat=1, lng=1, depth=2.3),
            make_record("b", lat=2, lng=2, depth=17.8),
        ]
        session = SelectionSession(records)
        assert session.depth_range == DepthRange(2.0, 18.0)

    def test_user_range_is_not_clamped(self, session):
        session.set_depth_range(DepthRange(0.0, 100.0))
        assert session.depth_range == DepthRange(0.0, 100.0)

    def test_config_supplies_initial_range(self, records):
        config = DashboardConfig(depth_range=DepthRange(5.0, 6.0))
        session = SelectionSession(records, config=config)
        assert session.depth_range == DepthRange(5.0, 6.0)

    def test_replacing_records_recomputes(self, session):
        session.set_records([make_record("x", lat=3, lng=3, depth=4.0, volume=7.0)])
        assert session.stats.volume == 7.0


class TestBoundaryEditing:

    def test_map_click_needs_capture(self, records):
        saves = []
        session = SelectionSession(records, on_boundary_save=saves.append)

        assert session.dispatch('map_click', GeoPoint(0, 0)) is False
        assert session.boundary_vertices == []

        session.start_capture()
        for point in BOUNDARY_VERTICES[:3]:
            assert session.dispatch('map_click', point) is True

        assert session.boundary_vertices == BOUNDARY_VERTICES[:3]
        assert saves[-1] == BOUNDARY_VERTICES[:3]
        assert session.stats is not None

    def test_map_click_accepts_dicts(self, session):
        session.start_capture()
        assert session.handle_map_click({'lat': 5, 'lng': -1})
        assert session.boundary_vertices[-1] == GeoPoint(5, -1)

    def test_undo_below_three_vertices_drops_boundary(self, records):
        session = SelectionSession(records, boundary_vertices=BOUNDARY_VERTICES[:3])

        session.undo_last()

        assert session.stats is None

    def test_undo_on_empty_boundary_raises(self, records):
        session = SelectionSession(records)
        with pytest.raises(EmptyBoundaryError):
            session.undo_last()

    def test_remove_out_of_range_raises(self, session):
        with pytest.raises(VertexIndexError):
            session.remove_vertex_at(4)
        assert session.boundary_vertices == BOUNDARY_VERTICES

    def test_clear_boundary(self, session):
        session.clear_boundary()
        assert session.boundary_vertices == []
        assert session.stats is None


class TestExport:

    def test_export_without_selection_raises(self, records):
        session = SelectionSession(records)
        with pytest.raises(NoSelectionError):
            session.export()

    def test_export_document_and_filename(self, session):
        document, filename = session.export(now=1741944600.0)

        assert filename == "dredge_selection_1741944600000.geojson"
        assert len(document['features']) == 2
        assert document['features'][0]['properties']['role'] == "Official Area"
        assert document['features'][1]['properties']['id'] == "in_boundary"

    def test_export_prefix_from_config(self, records):
        config = DashboardConfig(export_prefix="santos")
        session = SelectionSession(records, boundary_vertices=BOUNDARY_VERTICES, config=config)

        _, filename = session.export(now=2.0)
        assert filename == "santos_2000.geojson"


class TestListenerOrdering:

    def test_each_recomputation_gets_a_new_revision(self, session):
        start = session.revision

        session.set_boundary_visible(False)
        session.set_boundary_visible(True)

        assert session.revision == start + 2

    def test_stale_snapshot_is_dropped(self, session):
        received = []
        session.set_boundary_visible(False)
        current = session.revision

        assert session._notify(current - 1, session.stats, [received.append]) is False
        assert received == []

        assert session._notify(current + 1, session.stats, [received.append]) is True
        assert received == [None]

    def test_concurrent_changes_deliver_latest_snapshot_last(self, session):
        received = []
        session.add_stats_listener(received.append)

        def toggle(visible):
            for _ in range(50):
                session.set_boundary_visible(visible)
                session.set_depth_range(DepthRange(0.0, 30.0))

        threads = [threading.Thread(target=toggle, args=(i % 2 == 0,)) for i in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert received
        assert received[-1] == session.stats
