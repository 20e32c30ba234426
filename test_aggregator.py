"""
Tests for SelectionAggregator, DepthRange and ActivePolygonSet.

Run with: python -m pytest test_aggregator.py -v
"""

import pytest

from dredge_zone import (
    ActivePolygonSet,
    DepthRange,
    Material,
    SelectionAggregator,
)

from conftest import make_record, square


BOUNDARY = square(0, 0, 10, 10)
ADHOC = square(5, 5, 15, 15)


@pytest.fixture
def records():
    return [
        make_record("in_boundary", lat=2, lng=2, depth=4.0, volume=100.0, material=Material.SAND),
        make_record("in_both", lat=7, lng=7, depth=6.0, volume=50.5, material=Material.CLAY),
        make_record("in_adhoc", lat=12, lng=12, depth=8.0, volume=25.25, material=Material.SILT),
        make_record("outside", lat=20, lng=20, depth=5.0, volume=1000.0, material=Material.ROCK),
    ]


class TestComputeStats:

    def test_no_polygon_returns_none(self, records):
        stats = SelectionAggregator.compute_stats(records, ActivePolygonSet(), DepthRange())
        assert stats is None

    def test_no_records_returns_none(self):
        stats = SelectionAggregator.compute_stats([], ActivePolygonSet(boundary=BOUNDARY), DepthRange())
        assert stats is None

    def test_boundary_only_is_official(self, records):
        stats = SelectionAggregator.compute_stats(
            records, ActivePolygonSet(boundary=BOUNDARY), DepthRange()
        )

        assert stats.count == 2
        assert stats.volume == 150.5
        assert stats.avg_depth == 5.0
        assert stats.is_official_boundary is True

    def test_adhoc_only_is_not_official(self, records):
        stats = SelectionAggregator.compute_stats(
            records, ActivePolygonSet(adhoc=ADHOC), DepthRange()
        )

        assert [stats.count, stats.volume] == [2, 75.75]
        assert stats.is_official_boundary is False

    def test_overlap_counts_each_record_once(self, records):
        stats = SelectionAggregator.compute_stats(
            records, ActivePolygonSet(boundary=BOUNDARY, adhoc=ADHOC), DepthRange()
        )

        assert stats.count == 3
        assert stats.volume == 175.75
        assert stats.avg_depth == 6.0
        assert stats.is_official_boundary is False

    def test_depth_range_is_inclusive(self, records):
        active = ActivePolygonSet(boundary=BOUNDARY, adhoc=ADHOC)

        stats = SelectionAggregator.compute_stats(records, active, DepthRange(4.0, 6.0))
        assert stats.count == 2

        stats = SelectionAggregator.compute_stats(records, active, DepthRange(4.5, 5.5))
        assert stats.count == 0

    def test_empty_selection_has_zero_average(self, records):
        stats = SelectionAggregator.compute_stats(
            records, ActivePolygonSet(boundary=square(50, 50, 60, 60)), DepthRange()
        )

        assert stats is not None
        assert stats.count == 0
        assert stats.volume == 0.0
        assert stats.avg_depth == 0.0
        assert stats.material_distribution == ()

    def test_inverted_range_selects_nothing(self, records):
        stats = SelectionAggregator.compute_stats(
            records, ActivePolygonSet(boundary=BOUNDARY), DepthRange(20.0, 10.0)
        )
        assert stats.count == 0

    def test_identical_inputs_give_identical_stats(self, records):
        active = ActivePolygonSet(boundary=BOUNDARY, adhoc=ADHOC)
        first = SelectionAggregator.compute_stats(records, active, DepthRange())
        second = SelectionAggregator.compute_stats(records, active, DepthRange())
        assert first == second

    def test_select_keeps_input_order(self, records):
        selected = SelectionAggregator.select(
            records, ActivePolygonSet(boundary=BOUNDARY, adhoc=ADHOC), DepthRange()
        )
        assert [r.id for r in selected] == ["in_boundary", "in_both", "in_adhoc"]

    def test_to_dict(self, records):
        stats = SelectionAggregator.compute_stats(
            records, ActivePolygonSet(boundary=BOUNDARY), DepthRange()
        )
        data = stats.to_dict()

        assert data['count'] == 2
        assert data['material_distribution'][0] == {'material': "Sand", 'volume': 100.0}
        assert data['is_official_boundary'] is True
        assert "Official Area" in str(stats)


class TestMaterialDistribution:

    def test_sorted_by_volume_descending(self):
        records = [
            make_record("a", 1, 1, volume=10.0, material=Material.SAND),
            make_record("b", 2, 2, volume=30.0, material=Material.CLAY),
            make_record("c", 3, 3, volume=15.0, material=Material.SAND),
        ]
        stats = SelectionAggregator.compute_stats(records, ActivePolygonSet(boundary=BOUNDARY), DepthRange())

        assert [(mv.material, mv.volume) for mv in stats.material_distribution] == [
            (Material.CLAY, 30.0),
            (Material.SAND, 25.0),
        ]

    def test_sand_and_clay_totals(self):
        records = [
            make_record("sand", 1, 1, depth=5.0, volume=100.0, material=Material.SAND),
            make_record("clay", 2, 2, depth=8.0, volume=50.0, material=Material.CLAY),
        ]
        stats = SelectionAggregator.compute_stats(
            records, ActivePolygonSet(boundary=BOUNDARY), DepthRange(0.0, 30.0)
        )

        assert stats.volume == 150.0
        assert stats.count == 2
        assert stats.avg_depth == 6.5
        assert [(mv.material, mv.volume) for mv in stats.material_distribution] == [
            (Material.SAND, 100.0),
            (Material.CLAY, 50.0),
        ]

    def test_ties_keep_first_appearance_order(self):
        records = [
            make_record("a", 1, 1, volume=40.0, material=Material.SILT),
            make_record("b", 2, 2, volume=40.0, material=Material.ROCK),
            make_record("c", 3, 3, volume=40.0, material=Material.OTHER),
        ]
        stats = SelectionAggregator.compute_stats(records, ActivePolygonSet(boundary=BOUNDARY), DepthRange())

        assert [mv.material for mv in stats.material_distribution] == [
            Material.SILT,
            Material.ROCK,
            Material.OTHER,
        ]

    def test_only_selected_records_contribute(self, records):
        stats = SelectionAggregator.compute_stats(records, ActivePolygonSet(adhoc=ADHOC), DepthRange())
        materials = {mv.material for mv in stats.material_distribution}
        assert materials == {Material.CLAY, Material.SILT}


class TestDepthRange:

    def test_defaults(self):
        assert DepthRange() == DepthRange(0.0, 30.0)

    def test_rejects_non_finite(self):
        with pytest.raises(ValueError):
            DepthRange(0.0, float("inf"))

    def test_data_extent_rounds_outwards(self):
        records = [make_record("a", 0, 0, depth=2.3), make_record("b", 0, 0, depth=17.8)]
        assert DepthRange.data_extent(records) == (2.0, 18.0)
        assert DepthRange.data_extent([]) == (0.0, 30.0)

    def test_clamp_pulls_bounds_into_extent(self):
        records = [make_record("a", 0, 0, depth=2.3), make_record("b", 0, 0, depth=17.8)]
        assert DepthRange(0.0, 30.0).clamp_to(records) == DepthRange(2.0, 18.0)
        assert DepthRange(5.0, 10.0).clamp_to(records) == DepthRange(5.0, 10.0)
        assert DepthRange(0.0, 30.0).clamp_to([]) == DepthRange(0.0, 30.0)

    def test_dict_round_trip(self):
        assert DepthRange.from_dict({'min': 1, 'max': "9.5"}) == DepthRange(1.0, 9.5)
        with pytest.raises(ValueError, match="Missing required DepthRange field"):
            DepthRange.from_dict({'min': 1})


class TestActivePolygonSet:

    def test_hidden_boundary_is_inactive(self):
        active = ActivePolygonSet.from_state(BOUNDARY, boundary_visible=False)
        assert active.is_empty
        assert len(active) == 0

    def test_adhoc_listed_before_boundary(self):
        active = ActivePolygonSet(boundary=BOUNDARY, adhoc=ADHOC)
        assert active.polygons == [ADHOC, BOUNDARY]
        assert [role for role, _ in active.roles] == ['adhoc', 'boundary']

    def test_official_only(self):
        assert ActivePolygonSet(boundary=BOUNDARY).is_official_only
        assert not ActivePolygonSet(boundary=BOUNDARY, adhoc=ADHOC).is_official_only
        assert not ActivePolygonSet(adhoc=ADHOC).is_official_only
