"""Incidentes vía HTTP."""

import pytest


@pytest.fixture
def two_services(client, admin_headers):
    ids = []
    for name in ("API", "Web"):
        resp = client.post("/services", json={"name": name}, headers=admin_headers)
        ids.append(resp.json()["id"])
    return ids


def test_create_incident_scenario(client, admin_headers, two_services):
    resp = client.post(
        "/incidents",
        json={"title": "API down", "impact": "major", "serviceIds": two_services},
        headers=admin_headers,
    )
    assert resp.status_code == 201, resp.text
    inc = resp.json()
    assert inc["status"] == "investigating"
    assert inc["resolvedAt"] is None
    assert [u["title"] for u in inc["updates"]] == ["Incident Created"]

    detail = client.get(f"/incidents/{inc['id']}").json()
    assert [s["id"] for s in detail["services"]] == two_services
    assert {s["impact"] for s in detail["services"]} == {"major"}
    assert detail["latestUpdate"]["title"] == "Incident Created"


def test_unauthenticated_create_writes_nothing(client):
    resp = client.post("/incidents", json={"title": "API down"})
    assert resp.status_code == 401
    assert client.get("/incidents").json() == []


def test_viewer_cannot_create(client, viewer_headers):
    resp = client.post("/incidents", json={"title": "API down"}, headers=viewer_headers)
    assert resp.status_code == 403
    assert client.get("/incidents").json() == []


def test_unknown_service_id_is_400(client, admin_headers):
    resp = client.post("/incidents", json={"title": "x", "serviceIds": [77]}, headers=admin_headers)
    assert resp.status_code == 400
    assert resp.json()["error"][0]["path"] == "serviceIds"
    assert client.get("/incidents").json() == []


def test_blank_title_is_400(client, admin_headers):
    resp = client.post("/incidents", json={"title": "  "}, headers=admin_headers)
    assert resp.status_code == 400


def test_updates_flow(client, admin_headers):
    inc = client.post("/incidents", json={"title": "x"}, headers=admin_headers).json()
    base = f"/incidents/{inc['id']}/updates"

    resp = client.post(base, json={"title": "Found", "description": "Bad deploy", "status": "identified"}, headers=admin_headers)
    assert resp.status_code == 201
    assert resp.json()["incidentId"] == inc["id"]

    resp = client.post(base, json={"title": "Fixed", "description": "Rolled back", "status": "resolved"}, headers=admin_headers)
    assert resp.status_code == 201

    detail = client.get(f"/incidents/{inc['id']}").json()
    assert detail["status"] == "resolved"
    assert detail["resolvedAt"] is not None

    updates = client.get(base).json()
    assert [u["status"] for u in updates] == ["resolved", "identified", "investigating"]

    # resolved es terminal
    resp = client.post(base, json={"title": "Again", "description": "hm", "status": "monitoring"}, headers=admin_headers)
    assert resp.status_code == 400
    assert client.get(f"/incidents/{inc['id']}").json()["status"] == "resolved"


def test_update_requires_title_and_description(client, admin_headers):
    inc = client.post("/incidents", json={"title": "x"}, headers=admin_headers).json()
    resp = client.post(f"/incidents/{inc['id']}/updates", json={"status": "identified"}, headers=admin_headers)
    assert resp.status_code == 400
    paths = {i["path"] for i in resp.json()["error"]}
    assert paths == {"title", "description"}


def test_update_on_missing_incident(client, admin_headers):
    resp = client.post(
        "/incidents/999/updates",
        json={"title": "t", "description": "d", "status": "identified"},
        headers=admin_headers,
    )
    assert resp.status_code == 404
    assert resp.json() == {"error": "Incident not found"}
    assert client.get("/incidents/999/updates").status_code == 404


def test_put_status_goes_through_updates(client, admin_headers):
    inc = client.post("/incidents", json={"title": "x"}, headers=admin_headers).json()

    resp = client.put(
        f"/incidents/{inc['id']}",
        json={"status": "resolved", "impact": "critical"},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "resolved"
    assert body["impact"] == "critical"
    assert body["resolvedAt"] is not None
    assert body["updates"][0]["title"] == "Status Updated"
    assert body["updates"][0]["status"] == "resolved"


def test_put_requires_auth_and_existing(client, admin_headers):
    assert client.put("/incidents/1", json={"title": "x"}).status_code == 401
    assert client.put("/incidents/1", json={"title": "x"}, headers=admin_headers).status_code == 404


def test_list_has_latest_update_only(client, admin_headers):
    first = client.post("/incidents", json={"title": "first"}, headers=admin_headers).json()
    second = client.post("/incidents", json={"title": "second"}, headers=admin_headers).json()
    client.post(
        f"/incidents/{first['id']}/updates",
        json={"title": "Monitoring", "description": "Watching", "status": "monitoring"},
        headers=admin_headers,
    )

    rows = client.get("/incidents").json()
    assert [r["id"] for r in rows] == [second["id"], first["id"]]
    assert rows[1]["latestUpdate"]["title"] == "Monitoring"
    assert "updates" not in rows[1]
