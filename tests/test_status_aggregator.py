from itertools import permutations
from types import SimpleNamespace

import pytest

from statuspage.core.enums import ServiceStatus
from statuspage.services.status_aggregator import (
    OVERALL_TEXT,
    aggregate_status,
    count_by_status,
    worst_status,
)


def _svc(status, visible=True):
    return SimpleNamespace(status=status, is_visible=visible)


def test_empty_set_is_operational():
    overall = aggregate_status([])
    assert overall.status == ServiceStatus.OPERATIONAL
    assert overall.text == "All Systems Operational"


@pytest.mark.parametrize("bad", [ServiceStatus.MAJOR_OUTAGE, ServiceStatus.PARTIAL_OUTAGE])
def test_any_outage_wins(bad):
    overall = aggregate_status([_svc("operational"), _svc("degraded"), _svc(bad)])
    assert overall.status == ServiceStatus.MAJOR_OUTAGE
    assert overall.text == "Some Systems Experiencing Issues"


def test_degraded_without_outage():
    overall = aggregate_status([_svc("operational"), _svc("degraded")])
    assert overall.status == ServiceStatus.DEGRADED
    assert overall.text == OVERALL_TEXT[ServiceStatus.DEGRADED]


def test_hidden_services_are_ignored():
    overall = aggregate_status([_svc("operational"), _svc("major_outage", visible=False)])
    assert overall.status == ServiceStatus.OPERATIONAL


def test_order_does_not_matter():
    services = [_svc("degraded"), _svc("partial_outage"), _svc("operational")]
    results = {aggregate_status(list(p)).status for p in permutations(services)}
    assert results == {ServiceStatus.MAJOR_OUTAGE}


def test_worst_status_uses_severity():
    assert worst_status(["operational", "partial_outage", "degraded"]) == ServiceStatus.PARTIAL_OUTAGE
    assert worst_status([]) is None


def test_count_by_status_includes_all_keys():
    counts = count_by_status([_svc("operational"), _svc("operational"), _svc("degraded")])
    assert counts == {"operational": 2, "degraded": 1, "partial_outage": 0, "major_outage": 0}
