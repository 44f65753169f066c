from datetime import date, datetime, timezone
from types import SimpleNamespace

import pytest

from utils.itinerary import group_by_day, local_day, resolve_timezone, trip_days
from tests.conftest import API

NEW_YORK = resolve_timezone("America/New_York")
TOKYO = resolve_timezone("Asia/Tokyo")


def _at(iso):
    return SimpleNamespace(starts_at=datetime.fromisoformat(iso))


def test_trip_days_inclusive_across_spring_forward():
    days = trip_days(date(2024, 3, 9), date(2024, 3, 11), NEW_YORK)
    assert days == [date(2024, 3, 9), date(2024, 3, 10), date(2024, 3, 11)]


def test_trip_days_across_fall_back_has_no_duplicates():
    days = trip_days(date(2024, 11, 2), date(2024, 11, 4), NEW_YORK)
    assert days == [date(2024, 11, 2), date(2024, 11, 3), date(2024, 11, 4)]


def test_trip_days_across_year_boundary():
    days = trip_days(date(2024, 12, 30), date(2025, 1, 2))
    assert days == [date(2024, 12, 30), date(2024, 12, 31), date(2025, 1, 1), date(2025, 1, 2)]


@pytest.mark.parametrize("start,end", [(None, date(2024, 1, 1)), (date(2024, 1, 1), None), (date(2024, 1, 2), date(2024, 1, 1))])
def test_trip_days_without_a_valid_range(start, end):
    assert trip_days(start, end) == []


def test_local_day_uses_local_midnight():
    # 04:30 UTC is still the previous evening in New York
    assert local_day(datetime(2024, 3, 10, 4, 30), NEW_YORK) == date(2024, 3, 9)
    assert local_day(datetime(2024, 3, 10, 5, 0, tzinfo=timezone.utc), NEW_YORK) == date(2024, 3, 10)


def test_group_by_day_on_dst_day():
    late_dinner = _at("2024-03-10T03:30:00")   # 22:30 EST on the 9th
    early_flight = _at("2024-03-10T06:59:00")  # 01:59 EST on the 10th
    brunch = _at("2024-03-10T15:00:00")        # 11:00 EDT on the 10th
    monday = _at("2024-03-11T13:00:00")

    result = group_by_day(date(2024, 3, 9), date(2024, 3, 11), [monday, brunch, late_dinner, early_flight], NEW_YORK)

    assert result.days == [date(2024, 3, 9), date(2024, 3, 10), date(2024, 3, 11)]
    assert result.by_day[date(2024, 3, 9)] == [late_dinner]
    assert result.by_day[date(2024, 3, 10)] == [early_flight, brunch]
    assert result.by_day[date(2024, 3, 11)] == [monday]
    assert result.out_of_range == []


def test_group_by_day_at_year_boundary_in_tokyo():
    new_year = _at("2024-12-31T15:00:00")  # midnight in Tokyo
    before = _at("2024-12-31T14:59:00")
    result = group_by_day(date(2024, 12, 31), date(2025, 1, 1), [new_year, before], TOKYO)

    assert result.by_day[date(2024, 12, 31)] == [before]
    assert result.by_day[date(2025, 1, 1)] == [new_year]


def test_group_by_day_reports_out_of_range():
    inside = _at("2024-05-02T10:00:00")
    outside = _at("2024-06-01T10:00:00")
    result = group_by_day(date(2024, 5, 1), date(2024, 5, 3), [outside, inside], resolve_timezone("UTC"))

    assert result.by_day[date(2024, 5, 2)] == [inside]
    assert result.out_of_range == [outside]


def test_resolve_timezone_rejects_unknown_names():
    with pytest.raises(ValueError):
        resolve_timezone("Atlantis/Capital")
    with pytest.raises(ValueError):
        resolve_timezone("")


def _activity(client, headers, trip_id, **fields):
    payload = {"title": "Activity", "starts_at": "2024-03-10T15:00:00Z"}
    payload.update(fields)
    resp = client.post(f"{API}/trips/{trip_id}/itinerary/", json=payload, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_activity_crud(client, auth_headers, make_trip):
    trip = make_trip(start_date="2024-03-09", end_date="2024-03-11")
    base = f"{API}/trips/{trip['id']}/itinerary"

    act = _activity(client, auth_headers, trip["id"], title="Museum", activity_type="Activity",
                    location="MoMA", starts_at="2024-03-10T11:00:00-04:00")
    assert act["starts_at"].startswith("2024-03-10T15:00:00")
    assert act["activity_type"] == "Activity"

    resp = client.put(f"{base}/{act['id']}", json={"activity_type": "Food & Dining", "location": None},
                      headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["activity_type"] == "Food & Dining"
    assert resp.json()["location"] == ""
    assert resp.json()["title"] == "Museum"

    assert client.put(f"{base}/{act['id']}", json={"starts_at": None}, headers=auth_headers).status_code == 422

    assert client.delete(f"{base}/{act['id']}", headers=auth_headers).status_code == 204
    assert client.get(f"{base}/", headers=auth_headers).json() == []


def test_unknown_activity_type_is_rejected(client, auth_headers, make_trip):
    trip = make_trip()
    resp = client.post(f"{API}/trips/{trip['id']}/itinerary/",
                       json={"title": "x", "starts_at": "2024-05-01T10:00:00Z", "activity_type": "Party"},
                       headers=auth_headers)
    assert resp.status_code == 422


def test_list_is_chronological(client, auth_headers, make_trip):
    trip = make_trip()
    later = _activity(client, auth_headers, trip["id"], starts_at="2024-05-02T10:00:00Z")
    earlier = _activity(client, auth_headers, trip["id"], starts_at="2024-05-01T10:00:00Z")

    listed = client.get(f"{API}/trips/{trip['id']}/itinerary/", headers=auth_headers).json()
    assert [a["id"] for a in listed] == [earlier["id"], later["id"]]


def test_days_endpoint_groups_by_requested_timezone(client, auth_headers, make_trip):
    trip = make_trip(start_date="2024-03-09", end_date="2024-03-11")
    evening = _activity(client, auth_headers, trip["id"], title="Dinner", starts_at="2024-03-10T03:30:00Z")
    brunch = _activity(client, auth_headers, trip["id"], title="Brunch", starts_at="2024-03-10T15:00:00Z")
    stray = _activity(client, auth_headers, trip["id"], title="Later trip", starts_at="2024-04-01T15:00:00Z")

    resp = client.get(f"{API}/trips/{trip['id']}/itinerary/days", params={"tz": "America/New_York"},
                      headers=auth_headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["timezone"] == "America/New_York"
    assert [d["date"] for d in body["days"]] == ["2024-03-09", "2024-03-10", "2024-03-11"]
    assert [a["id"] for a in body["days"][0]["activities"]] == [evening["id"]]
    assert [a["id"] for a in body["days"][1]["activities"]] == [brunch["id"]]
    assert body["days"][2]["activities"] == []
    assert [a["id"] for a in body["out_of_range"]] == [stray["id"]]

    # UTC puts the dinner on the 10th
    utc = client.get(f"{API}/trips/{trip['id']}/itinerary/days", params={"tz": "UTC"}, headers=auth_headers).json()
    assert [a["id"] for a in utc["days"][1]["activities"]] == [evening["id"], brunch["id"]]


def test_days_endpoint_falls_back_to_profile_timezone(client, auth_headers, make_trip):
    client.patch(f"{API}/auth/me", json={"timezone": "Asia/Tokyo"}, headers=auth_headers)
    trip = make_trip(start_date="2024-12-31", end_date="2025-01-01")
    _activity(client, auth_headers, trip["id"], starts_at="2024-12-31T15:30:00Z")

    body = client.get(f"{API}/trips/{trip['id']}/itinerary/days", headers=auth_headers).json()
    assert body["timezone"] == "Asia/Tokyo"
    assert body["days"][0]["activities"] == []
    assert len(body["days"][1]["activities"]) == 1


def test_days_endpoint_rejects_unknown_timezone(client, auth_headers, make_trip):
    trip = make_trip()
    resp = client.get(f"{API}/trips/{trip['id']}/itinerary/days", params={"tz": "Nowhere/Land"}, headers=auth_headers)
    assert resp.status_code == 400


def test_days_endpoint_without_trip_dates(client, auth_headers, make_trip):
    trip = make_trip(start_date=None, end_date=None)
    act = _activity(client, auth_headers, trip["id"])

    body = client.get(f"{API}/trips/{trip['id']}/itinerary/days", headers=auth_headers).json()
    assert body["days"] == []
    assert [a["id"] for a in body["out_of_range"]] == [act["id"]]
