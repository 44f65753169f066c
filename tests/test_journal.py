from tests.conftest import API


def _entry(client, headers, trip_id, **fields):
    payload = {"title": "Entry"}
    payload.update(fields)
    resp = client.post(f"{API}/trips/{trip_id}/journal/", json=payload, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_create_entry_with_media_and_location(client, auth_headers, make_trip):
    trip = make_trip()
    entry = _entry(
        client, auth_headers, trip["id"],
        title="Alfama walk",
        content="Tram 28 all the way up.",
        media=[{"type": "image", "url": "/api/v1/media/files/a.jpg"}],
        location={"name": "Alfama", "lat": 38.71, "lng": -9.13},
        entry_date="2024-05-02T18:30:00+01:00",
    )
    assert entry["trip_id"] == trip["id"]
    assert entry["media"][0]["type"] == "image"
    assert entry["location"]["name"] == "Alfama"
    # stored in UTC
    assert entry["entry_date"].startswith("2024-05-02T17:30:00")


def test_entry_media_type_is_validated(client, auth_headers, make_trip):
    trip = make_trip()
    resp = client.post(f"{API}/trips/{trip['id']}/journal/",
                       json={"title": "x", "media": [{"type": "gif", "url": "u"}]}, headers=auth_headers)
    assert resp.status_code == 422


def test_list_orders_by_entry_date_then_creation(client, auth_headers, make_trip):
    trip = make_trip()
    undated = _entry(client, auth_headers, trip["id"], title="Undated")
    early = _entry(client, auth_headers, trip["id"], title="Early", entry_date="2024-05-01T09:00:00Z")
    late = _entry(client, auth_headers, trip["id"], title="Late", entry_date="2024-05-03T09:00:00Z")
    late_twin = _entry(client, auth_headers, trip["id"], title="Late twin", entry_date="2024-05-03T09:00:00Z")

    entries = client.get(f"{API}/trips/{trip['id']}/journal/", headers=auth_headers).json()
    assert [e["id"] for e in entries] == [late_twin["id"], late["id"], early["id"], undated["id"]]


def test_entries_of_another_trip_are_not_listed(client, auth_headers, make_trip):
    a = make_trip(title="A")
    b = make_trip(title="B")
    _entry(client, auth_headers, a["id"])

    assert client.get(f"{API}/trips/{b['id']}/journal/", headers=auth_headers).json() == []


def test_update_entry(client, auth_headers, make_trip):
    trip = make_trip()
    entry = _entry(client, auth_headers, trip["id"], content="draft",
                   media=[{"type": "video", "url": "/v.mp4"}])

    resp = client.put(f"{API}/journal/{entry['id']}", json={"title": "Final", "media": None}, headers=auth_headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["title"] == "Final"
    assert body["content"] == "draft"
    assert body["media"] == []


def test_update_rejects_blank_title(client, auth_headers, make_trip):
    trip = make_trip()
    entry = _entry(client, auth_headers, trip["id"])
    assert client.put(f"{API}/journal/{entry['id']}", json={"title": None}, headers=auth_headers).status_code == 422


def test_other_user_cannot_touch_entry(client, auth_headers, other_headers, make_trip):
    trip = make_trip()
    entry = _entry(client, auth_headers, trip["id"])

    assert client.get(f"{API}/trips/{trip['id']}/journal/", headers=other_headers).status_code == 404
    assert client.put(f"{API}/journal/{entry['id']}", json={"title": "x"}, headers=other_headers).status_code == 404
    assert client.delete(f"{API}/journal/{entry['id']}", headers=other_headers).status_code == 404


def test_delete_entry(client, auth_headers, make_trip):
    trip = make_trip()
    entry = _entry(client, auth_headers, trip["id"])

    resp = client.delete(f"{API}/journal/{entry['id']}", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json() == {"message": "Deleted"}
    assert client.delete(f"{API}/journal/{entry['id']}", headers=auth_headers).status_code == 404
