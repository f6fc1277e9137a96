"""Mantenimientos programados vía HTTP."""

from datetime import timedelta

from statuspage.core.timeutils import utc_now


def _iso(dt):
    return dt.isoformat().replace("+00:00", "Z")


def _body(title="DB upgrade", start_in=timedelta(days=1), length=timedelta(hours=2), **extra):
    start = utc_now() + start_in
    body = {
        "title": title,
        "scheduledStartTime": _iso(start),
        "scheduledEndTime": _iso(start + length),
    }
    body.update(extra)
    return body


def test_create_without_services(client, admin_headers):
    resp = client.post("/maintenance", json=_body(), headers=admin_headers)
    assert resp.status_code == 201, resp.text
    m = resp.json()
    assert m["status"] == "scheduled"
    assert m["services"] == []
    assert m["updates"][0]["title"] == "Maintenance Scheduled"
    assert m["scheduledStartTime"].endswith(("Z", "+00:00"))


def test_create_requires_auth(client):
    assert client.post("/maintenance", json=_body()).status_code == 401
    assert client.get("/maintenance").json() == []


def test_create_validates_window(client, admin_headers):
    resp = client.post("/maintenance", json=_body(length=timedelta(hours=-1)), headers=admin_headers)
    assert resp.status_code == 400

    resp = client.post("/maintenance", json={"title": "x"}, headers=admin_headers)
    assert resp.status_code == 400
    paths = {i["path"] for i in resp.json()["error"]}
    assert paths == {"scheduledStartTime", "scheduledEndTime"}


def test_completed_update_without_start(client, admin_headers):
    m = client.post("/maintenance", json=_body(), headers=admin_headers).json()

    resp = client.post(f"/maintenance/{m['id']}/updates", json={"status": "completed"}, headers=admin_headers)
    assert resp.status_code == 201
    assert resp.json()["title"] == "Maintenance Completed"

    detail = client.get(f"/maintenance/{m['id']}").json()
    assert detail["status"] == "completed"
    assert detail["actualStartTime"] is None
    assert detail["actualEndTime"] is not None


def test_in_progress_twice_keeps_first_start(client, admin_headers):
    m = client.post("/maintenance", json=_body(), headers=admin_headers).json()
    base = f"/maintenance/{m['id']}/updates"

    client.post(base, json={"status": "in_progress", "title": "Started"}, headers=admin_headers)
    first = client.get(f"/maintenance/{m['id']}").json()["actualStartTime"]
    client.post(base, json={"status": "in_progress", "description": "Halfway"}, headers=admin_headers)

    detail = client.get(f"/maintenance/{m['id']}").json()
    assert detail["actualStartTime"] == first
    assert [u["status"] for u in client.get(base).json()] == ["in_progress", "in_progress", "scheduled"]


def test_terminal_status_rejected(client, admin_headers):
    m = client.post("/maintenance", json=_body(), headers=admin_headers).json()
    client.post(f"/maintenance/{m['id']}/updates", json={"status": "cancelled"}, headers=admin_headers)

    resp = client.post(f"/maintenance/{m['id']}/updates", json={"status": "in_progress"}, headers=admin_headers)
    assert resp.status_code == 400


def test_put_edits_fields_and_status(client, admin_headers):
    m = client.post("/maintenance", json=_body(), headers=admin_headers).json()

    resp = client.put(
        f"/maintenance/{m['id']}",
        json={"title": "DB upgrade v2", "status": "in_progress"},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["title"] == "DB upgrade v2"
    assert body["status"] == "in_progress"
    assert body["actualStartTime"] is not None
    assert body["updates"][0]["status"] == "in_progress"


def test_put_rejects_inverted_window(client, admin_headers):
    m = client.post("/maintenance", json=_body(), headers=admin_headers).json()
    resp = client.put(
        f"/maintenance/{m['id']}",
        json={"scheduledEndTime": _iso(utc_now() - timedelta(days=3))},
        headers=admin_headers,
    )
    assert resp.status_code == 400


def test_delete(client, admin_headers):
    m = client.post("/maintenance", json=_body(), headers=admin_headers).json()

    assert client.delete(f"/maintenance/{m['id']}").status_code == 401
    assert client.delete(f"/maintenance/{m['id']}", headers=admin_headers).status_code == 200
    assert client.get(f"/maintenance/{m['id']}").status_code == 404
    assert client.delete(f"/maintenance/{m['id']}", headers=admin_headers).status_code == 404


def test_list_filters(client, admin_headers):
    past = client.post("/maintenance", json=_body("past", start_in=timedelta(days=-2)), headers=admin_headers).json()
    future = client.post("/maintenance", json=_body("future"), headers=admin_headers).json()

    assert [m["id"] for m in client.get("/maintenance").json()] == [future["id"], past["id"]]
    assert [m["id"] for m in client.get("/maintenance", params={"upcoming": "true"}).json()] == [future["id"]]
    assert client.get("/maintenance", params={"status": "completed"}).json() == []
    assert client.get("/maintenance", params={"status": "bogus"}).status_code == 400
