from request_tracker.utility.insights import DashboardInsights, compose_insights
from request_tracker.utility.settings import TrackerSettings


def _supplies_with_quantities(quantities):
    return [
        {"id": f"SUP-{idx}", "fields": {"location": "Plant", "description": f"Item {idx}", "qty": qty}}
        for idx, qty in enumerate(quantities)
    ]


def test_top_view_is_first_five_of_ranked_list():
    records = {"supplies": _supplies_with_quantities([7, 10, 6, 9, 5, 8]), "it": [], "maintenance": []}

    insights = compose_insights(records)

    assert [e.quantity for e in insights.supplies_top_by_location] == [10, 9, 8, 7, 6]
    assert len(insights.supplies_all_by_location) == 6
    assert insights.supplies_all_by_location[:5] == insights.supplies_top_by_location


def test_top_view_never_pads():
    records = {
        "supplies": _supplies_with_quantities([3, 1]),
        "it": [{"fields": {"location": "Plant"}}],
        "maintenance": [],
    }

    insights = compose_insights(records)

    assert len(insights.supplies_top_by_location) == 2
    assert len(insights.it_maintenance_top_by_location) == 1


def test_technical_top_view_ranks_by_combined_count():
    it_records = [{"fields": {"location": loc}} for loc in ["A", "B", "B", "C", "C", "C", "D", "E", "F"]]
    maintenance_records = [{"fields": {"location": loc}} for loc in ["F", "F", "F"]]

    insights = compose_insights({"supplies": [], "it": it_records, "maintenance": maintenance_records})

    assert [e.location for e in insights.it_maintenance_top_by_location] == ["F", "C", "B", "A", "D"]
    assert [e.count for e in insights.it_maintenance_top_by_location] == [4, 3, 2, 1, 1]
    assert len(insights.it_maintenance_all_by_location) == 6


def test_missing_keys_default_to_empty():
    insights = compose_insights({"supplies": _supplies_with_quantities([2])})

    assert len(insights.supplies_all_by_location) == 1
    assert insights.it_maintenance_all_by_location == []
    assert insights.it_maintenance_top_by_location == []


def test_non_mapping_input_yields_empty_insights():
    assert compose_insights(None) == DashboardInsights()


def test_non_collection_values_default_to_empty():
    insights = compose_insights({"supplies": 5, "it": "abc", "maintenance": [{"fields": {"location": "Plant"}}]})

    assert insights.supplies_all_by_location == []
    assert [(e.location, e.it_count, e.maintenance_count) for e in insights.it_maintenance_all_by_location] == [
        ("Plant", 0, 1)
    ]


def test_top_n_comes_from_settings_or_argument():
    records = {"supplies": _supplies_with_quantities([1, 2, 3, 4]), "it": [], "maintenance": []}

    assert len(compose_insights(records, settings=TrackerSettings(top_n=2)).supplies_top_by_location) == 2
    assert len(compose_insights(records, top_n=3).supplies_top_by_location) == 3


def test_to_dict_uses_dashboard_keys():
    records = {
        "supplies": _supplies_with_quantities([4]),
        "it": [{"fields": {"location": "Short North"}}],
        "maintenance": [{"fields": {"location": "Short N."}}],
    }

    payload = compose_insights(records).to_dict()

    assert set(payload) == {
        "suppliesTopByLocation",
        "suppliesAllByLocation",
        "itMaintenanceTopByLocation",
        "itMaintenanceAllByLocation",
    }
    assert payload["suppliesTopByLocation"][0]["quantity"] == 4
    assert payload["itMaintenanceAllByLocation"] == [
        {"location": "Short N.", "itCount": 1, "maintenanceCount": 1, "count": 2}
    ]
