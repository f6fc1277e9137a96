from datetime import timedelta

import pytest

from statuspage.core.enums import Impact, IncidentStatus
from statuspage.core.errors import NotFoundError, ValidationError
from statuspage.core.timeutils import ensure_utc, utc_now
from statuspage.models import Component, Incident, IncidentService, IncidentUpdate, Service
from statuspage.services import incident_lifecycle


@pytest.fixture
def services(db):
    a = Service(name="API", status="operational")
    b = Service(name="Web", status="operational")
    db.add_all([a, b])
    db.commit()
    return a, b


def test_create_incident_links_and_initial_update(db, services):
    a, b = services
    inc = incident_lifecycle.create_incident(
        db, title="API down", impact=Impact.MAJOR, service_ids=[a.id, b.id]
    )

    assert inc.status == IncidentStatus.INVESTIGATING
    assert inc.resolved_at is None

    detail = incident_lifecycle.get_incident(db, inc.id)
    assert [s["id"] for s in detail["services"]] == [a.id, b.id]
    assert all(s["impact"] == Impact.MAJOR for s in detail["services"])
    assert len(detail["updates"]) == 1
    first = detail["updates"][0]
    assert first.title == "Incident Created"
    assert first.description == "We are investigating this incident."
    assert first.status == IncidentStatus.INVESTIGATING


def test_create_uses_description_for_initial_update(db):
    inc = incident_lifecycle.create_incident(db, title="Slow", description="Latency is up")
    assert inc.updates[0].description == "Latency is up"


def test_create_rejects_blank_title(db):
    with pytest.raises(ValidationError):
        incident_lifecycle.create_incident(db, title="   ")
    assert db.query(Incident).count() == 0


def test_create_rejects_unknown_service_without_writing(db, services):
    with pytest.raises(ValidationError) as exc:
        incident_lifecycle.create_incident(db, title="x", service_ids=[services[0].id, 999])
    assert exc.value.issues[0]["path"] == "serviceIds"
    assert db.query(Incident).count() == 0
    assert db.query(IncidentService).count() == 0


def test_create_links_components(db, services):
    comp = Component(service_id=services[0].id, name="DB")
    db.add(comp)
    db.commit()

    inc = incident_lifecycle.create_incident(db, title="DB slow", component_ids=[comp.id])
    detail = incident_lifecycle.get_incident(db, inc.id)
    assert detail["components"][0]["id"] == comp.id
    assert detail["components"][0]["service_id"] == services[0].id


def test_append_update_sets_status_and_is_latest(db):
    inc = incident_lifecycle.create_incident(db, title="x")
    later = utc_now() + timedelta(minutes=5)

    upd = incident_lifecycle.append_update(
        db, inc.id, title="Found it", description="Bad deploy", status=IncidentStatus.IDENTIFIED, now=later
    )

    detail = incident_lifecycle.get_incident(db, inc.id)
    assert detail["status"] == IncidentStatus.IDENTIFIED
    assert detail["updates"][0].id == upd.id
    assert detail["latest_update"].id == upd.id
    assert detail["resolved_at"] is None


def test_resolve_stamps_resolved_at(db):
    inc = incident_lifecycle.create_incident(db, title="x")
    later = utc_now() + timedelta(minutes=10)

    incident_lifecycle.append_update(
        db, inc.id, title="Fixed", description="All good", status=IncidentStatus.RESOLVED, now=later
    )
    db.refresh(inc)
    assert ensure_utc(inc.resolved_at) == later
    assert ensure_utc(inc.resolved_at) >= ensure_utc(inc.created_at)


def test_resolved_is_terminal(db):
    inc = incident_lifecycle.create_incident(db, title="x")
    incident_lifecycle.append_update(db, inc.id, title="Fixed", description="ok", status="resolved")

    with pytest.raises(ValidationError):
        incident_lifecycle.append_update(db, inc.id, title="Again", description="no", status="monitoring")

    db.refresh(inc)
    assert inc.status == IncidentStatus.RESOLVED
    assert db.query(IncidentUpdate).filter(IncidentUpdate.incident_id == inc.id).count() == 2


def test_second_resolved_update_restamps(db):
    inc = incident_lifecycle.create_incident(db, title="x")
    t1 = utc_now() + timedelta(minutes=1)
    t2 = utc_now() + timedelta(minutes=2)
    incident_lifecycle.append_update(db, inc.id, title="Fixed", description="ok", status="resolved", now=t1)
    incident_lifecycle.append_update(db, inc.id, title="Postmortem", description="done", status="resolved", now=t2)

    db.refresh(inc)
    assert ensure_utc(inc.resolved_at) == t2


def test_append_update_requires_text(db):
    inc = incident_lifecycle.create_incident(db, title="x")
    with pytest.raises(ValidationError):
        incident_lifecycle.append_update(db, inc.id, title="t", description="  ", status="identified")


def test_append_update_unknown_incident(db):
    with pytest.raises(NotFoundError):
        incident_lifecycle.append_update(db, 12345, title="t", description="d", status="identified")


def test_edit_status_appends_synthetic_update(db):
    inc = incident_lifecycle.create_incident(db, title="x")
    later = utc_now() + timedelta(minutes=3)

    incident_lifecycle.edit_incident(db, inc.id, {"status": "monitoring", "title": "Renamed"}, now=later)

    detail = incident_lifecycle.get_incident(db, inc.id)
    assert detail["title"] == "Renamed"
    assert detail["status"] == IncidentStatus.MONITORING
    assert detail["updates"][0].title == "Status Updated"
    assert detail["updates"][0].status == IncidentStatus.MONITORING
    assert len(detail["updates"]) == 2


def test_edit_without_status_change_adds_no_update(db):
    inc = incident_lifecycle.create_incident(db, title="x")
    incident_lifecycle.edit_incident(db, inc.id, {"status": "investigating", "impact": "critical"})

    detail = incident_lifecycle.get_incident(db, inc.id)
    assert detail["impact"] == Impact.CRITICAL
    assert len(detail["updates"]) == 1


def test_list_incidents_newest_first(db):
    now = utc_now()
    old = incident_lifecycle.create_incident(db, title="old", now=now - timedelta(hours=1))
    new = incident_lifecycle.create_incident(db, title="new", now=now)

    rows = incident_lifecycle.list_incidents(db)
    assert [r["id"] for r in rows] == [new.id, old.id]
    assert rows[0]["latest_update"].title == "Incident Created"


def test_list_updates_unknown_incident(db):
    with pytest.raises(NotFoundError):
        incident_lifecycle.list_updates(db, 999)


def test_select_public_incidents_caps():
    rows = [{"status": "resolved"}] * 4 + [{"status": "investigating"}] * 2
    picked = incident_lifecycle.select_public_incidents(rows, max_total=5, max_resolved=3)
    assert [r["status"] for r in picked] == ["investigating", "investigating", "resolved", "resolved", "resolved"]

    picked = incident_lifecycle.select_public_incidents(rows, max_total=3, max_resolved=3)
    assert len(picked) == 3
