"""Resumen público /status y /status/overview."""

from datetime import timedelta

from statuspage.core.timeutils import utc_now
from statuspage.models import Setting


def test_empty_page_is_operational(client):
    body = client.get("/status").json()
    assert body["siteTitle"] == "System Status"
    assert body["siteDescription"] == "Current status of all our services"
    assert body["overall"] == {"status": "operational", "text": "All Systems Operational"}
    assert body["services"] == []
    assert body["incidents"] == []
    assert body["maintenance"] == []


def test_banner_ignores_hidden_services(client, admin_headers):
    client.post("/services", json={"name": "Hidden", "status": "major_outage", "isVisible": False}, headers=admin_headers)
    client.post("/services", json={"name": "Shown", "status": "degraded"}, headers=admin_headers)

    body = client.get("/status").json()
    assert body["overall"]["status"] == "degraded"
    assert body["overall"]["text"] == "Some Systems Experiencing Degraded Performance"
    assert [s["name"] for s in body["services"]] == ["Shown"]


def test_partial_outage_rolls_up_to_major(client, admin_headers):
    client.post("/services", json={"name": "A", "status": "partial_outage"}, headers=admin_headers)
    assert client.get("/status").json()["overall"]["status"] == "major_outage"


def test_incident_limits(client, admin_headers):
    client.put(
        "/settings",
        json={"settings": {"maxIncidents": {"value": 3, "type": "number"}, "maxResolvedIncidents": {"value": 1, "type": "number"}}},
        headers=admin_headers,
    )
    ids = []
    for i in range(4):
        inc = client.post("/incidents", json={"title": f"inc {i}"}, headers=admin_headers).json()
        ids.append(inc["id"])
    # 0 y 1 resueltos, 2 y 3 activos
    for i in ids[:2]:
        client.post(
            f"/incidents/{i}/updates",
            json={"title": "Fixed", "description": "ok", "status": "resolved"},
            headers=admin_headers,
        )

    shown = [i["id"] for i in client.get("/status").json()["incidents"]]
    assert shown == [ids[3], ids[2], ids[1]]


def test_maintenance_capped_and_filtered(client, admin_headers):
    client.post("/settings", json={"key": "maxMaintenance", "value": 1, "type": "number"}, headers=admin_headers)
    for days in (1, 2):
        start = utc_now() + timedelta(days=days)
        client.post(
            "/maintenance",
            json={
                "title": f"in {days}d",
                "scheduledStartTime": start.isoformat(),
                "scheduledEndTime": (start + timedelta(hours=1)).isoformat(),
            },
            headers=admin_headers,
        )

    shown = client.get("/status").json()["maintenance"]
    assert len(shown) == 1


def test_overview_counts(client, admin_headers):
    client.post("/services", json={"name": "A"}, headers=admin_headers)
    client.post("/services", json={"name": "B", "status": "degraded", "isVisible": False}, headers=admin_headers)
    client.post("/incidents", json={"title": "x"}, headers=admin_headers)

    body = client.get("/status/overview").json()
    assert body["servicesTotal"] == 2
    assert body["servicesByStatus"]["degraded"] == 1
    assert body["overall"]["status"] == "operational"
    assert body["activeIncidents"] == 1
    assert body["upcomingMaintenance"] == 0


def test_non_finite_limit_is_rejected_and_page_survives(client, admin_headers, session_factory):
    resp = client.post(
        "/settings",
        json={"key": "maxIncidents", "value": "Infinity", "type": "number"},
        headers=admin_headers,
    )
    assert resp.status_code == 400
    assert client.get("/settings").json()["maxIncidents"]["value"] == 5

    # una fila ya guardada con inf no tumba la página pública
    session = session_factory()
    try:
        row = session.query(Setting).filter(Setting.key == "maxIncidents").one()
        row.value = "inf"
        session.commit()
    finally:
        session.close()

    client.post("/incidents", json={"title": "x"}, headers=admin_headers)
    resp = client.get("/status")
    assert resp.status_code == 200
    assert len(resp.json()["incidents"]) == 1
