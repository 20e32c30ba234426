"""
Tests for project summaries, monthly trends and record schemas.

Run with: python -m pytest test_trends.py -v
"""

import pytest

from dredge_zone import (
    DredgeRecord,
    Material,
    Timestamp,
    critical_records,
    monthly_trends,
    peak_month,
    select_records,
    summarize_project,
)

from conftest import make_record


@pytest.fixture
def records():
    # Deliberately out of chronological order
    return [
        make_record("apr", 0, 0, depth=10.0, volume=50.0, material=Material.CLAY,
                    timestamp="2025-04-02T08:00:00Z"),
        make_record("mar1", 0, 0, depth=14.0, volume=100.0, material=Material.SAND,
                    timestamp="2025-03-10T08:00:00Z"),
        make_record("mar2", 0, 0, depth=8.0, volume=25.0, material=Material.SAND,
                    timestamp="2025-03-20T08:00:00Z"),
    ]


class TestSummaries:

    def test_summarize_project(self, records):
        summary = summarize_project(records)

        assert summary.total_volume == 175.0
        assert summary.point_count == 3
        assert summary.avg_depth == pytest.approx(32.0 / 3)
        assert [mv.material for mv in summary.material_distribution] == [
            Material.SAND,
            Material.CLAY,
        ]

    def test_summarize_empty(self):
        summary = summarize_project([])
        assert (summary.total_volume, summary.avg_depth, summary.point_count) == (0.0, 0.0, 0)

    def test_critical_records_are_shallower_than_target(self, records):
        assert [r.id for r in critical_records(records)] == ["apr", "mar2"]
        assert [r.id for r in critical_records(records, target_depth=8.0)] == []


class TestMonthlyTrends:

    def test_months_in_chronological_order(self, records):
        trends = monthly_trends(records)

        assert [t.month for t in trends] == ["2025-03", "2025-04"]
        assert [t.volume for t in trends] == [125.0, 50.0]
        assert [t.cumulative_volume for t in trends] == [125.0, 175.0]
        assert [t.count for t in trends] == [2, 1]
        assert trends[0].avg_depth == 11.0

    def test_material_volumes_cover_every_material(self, records):
        march = monthly_trends(records)[0]

        assert set(march.material_volumes) == {m.value for m in Material}
        assert march.material_volumes["Sand"] == 125.0
        assert march.material_volumes["Clay"] == 0.0

    def test_peak_month(self, records):
        assert peak_month(monthly_trends(records)).month == "2025-03"
        assert peak_month([]) is None

    def test_peak_month_tie_keeps_earliest(self):
        records = [
            make_record("a", 0, 0, volume=10.0, timestamp="2025-01-05T00:00:00Z"),
            make_record("b", 0, 0, volume=10.0, timestamp="2025-02-05T00:00:00Z"),
        ]
        assert peak_month(monthly_trends(records)).month == "2025-01"


class TestRecordSelection:

    def test_project_scoping(self):
        records = [
            make_record("a", 0, 0, project_id="santos"),
            make_record("b", 0, 0, project_id="paranagua"),
        ]
        assert [r.id for r in select_records(records, project_id="santos")] == ["a"]
        assert len(select_records(records)) == 2

    def test_search_matches_vessel_material_and_notes(self):
        records = [
            make_record("a", 0, 0, vessel_name="Draga Norte"),
            make_record("b", 0, 0, material=Material.ROCK),
            make_record("c", 0, 0, notes="Turbid water near pier"),
            make_record("d", 0, 0),
        ]
        assert [r.id for r in select_records(records, search="norte")] == ["a"]
        assert [r.id for r in select_records(records, search="ROCK")] == ["b"]
        assert [r.id for r in select_records(records, search="pier")] == ["c"]
        assert len(select_records(records, search="  ")) == 4


class TestSchemas:

    def test_material_parse(self):
        assert Material.parse("sand") is Material.SAND
        assert Material.parse("Areia") is Material.SAND
        assert Material.parse("ROCHA") is Material.ROCK
        assert Material.parse(Material.CLAY) is Material.CLAY
        with pytest.raises(ValueError, match="Unknown material"):
            Material.parse("gravel")

    def test_record_from_browser_storage_keys(self):
        record = DredgeRecord.from_dict({
            'id': "1741944600000",
            'projectId': "santos",
            'timestamp': "2025-03-14T09:30:00.000Z",
            'latitude': -23.9618,
            'longitude': -46.3322,
            'depth': 8.5,
            'volume': 120,
            'material': "Argila",
            'vesselName': "Draga I",
        })

        assert record.project_id == "santos"
        assert (record.lat, record.lng) == (-23.9618, -46.3322)
        assert record.material is Material.CLAY
        assert record.notes is None
        assert record.timestamp.month_key() == "2025-03"

    def test_record_dict_round_trip(self):
        record = make_record("p1", -23.96, -46.33, notes="ok")
        assert DredgeRecord.from_dict(record.to_dict()) == record

    def test_record_missing_field(self):
        data = make_record("p1", 0, 0).to_dict()
        del data['depth']
        with pytest.raises(ValueError, match="Missing required DredgeRecord field"):
            DredgeRecord.from_dict(data)

    def test_record_rejects_negative_values(self):
        with pytest.raises(ValueError):
            make_record("p1", 0, 0, depth=-1.0)
        with pytest.raises(ValueError):
            make_record("p1", 0, 0, volume=-5.0)

    def test_timestamp_validation(self):
        assert Timestamp("2025-03-14T09:30:00Z").to_datetime().tzinfo is not None
        assert Timestamp("2025-03-14T09:30:00").sort_key() == Timestamp("2025-03-14T09:30:00Z").sort_key()
        with pytest.raises(ValueError):
            Timestamp("yesterday")
