# statuspage/services/status_aggregator.py
"""
Banner público de estado.

Todo aquí es puro: recibe objetos ya cargados (ORM o cualquier cosa con
`status` / `is_visible`) y no toca la BD.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional

from statuspage.core.enums import SERVICE_STATUS_SEVERITY, ServiceStatus

OVERALL_TEXT: Dict[ServiceStatus, str] = {
    ServiceStatus.OPERATIONAL: "All Systems Operational",
    ServiceStatus.DEGRADED: "Some Systems Experiencing Degraded Performance",
    ServiceStatus.MAJOR_OUTAGE: "Some Systems Experiencing Issues",
}

_OUTAGE = {ServiceStatus.MAJOR_OUTAGE, ServiceStatus.PARTIAL_OUTAGE}


@dataclass(frozen=True)
class OverallStatus:
    status: ServiceStatus
    text: str


def _as_status(value: Any) -> ServiceStatus:
    return value if isinstance(value, ServiceStatus) else ServiceStatus(str(value))


def _is_visible(obj: Any) -> bool:
    v = getattr(obj, "is_visible", True)
    return True if v is None else bool(v)


def displayed_status(service: Any) -> ServiceStatus:
    # El status de un servicio lo fija el operador; no se deriva de componentes ni incidentes.
    return _as_status(service.status)


def worst_status(statuses: Iterable[Any]) -> Optional[ServiceStatus]:
    worst: Optional[ServiceStatus] = None
    for s in statuses:
        st = _as_status(s)
        if worst is None or SERVICE_STATUS_SEVERITY[st] > SERVICE_STATUS_SEVERITY[worst]:
            worst = st
    return worst


def aggregate_status(services: Iterable[Any]) -> OverallStatus:
    """
    Clasificación por prioridad sobre los servicios visibles:
      - cualquier major_outage / partial_outage -> major_outage
      - si no, cualquier degraded                -> degraded
      - si no (o sin servicios)                  -> operational
    """
    has_degraded = False
    for svc in services:
        if not _is_visible(svc):
            continue
        st = displayed_status(svc)
        if st in _OUTAGE:
            return OverallStatus(ServiceStatus.MAJOR_OUTAGE, OVERALL_TEXT[ServiceStatus.MAJOR_OUTAGE])
        if st == ServiceStatus.DEGRADED:
            has_degraded = True

    if has_degraded:
        return OverallStatus(ServiceStatus.DEGRADED, OVERALL_TEXT[ServiceStatus.DEGRADED])
    return OverallStatus(ServiceStatus.OPERATIONAL, OVERALL_TEXT[ServiceStatus.OPERATIONAL])


def count_by_status(services: Iterable[Any]) -> Dict[str, int]:
    out: Dict[str, int] = {s.value: 0 for s in ServiceStatus}
    for svc in services:
        out[displayed_status(svc).value] += 1
    return out
