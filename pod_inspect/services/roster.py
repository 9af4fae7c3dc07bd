from __future__ import annotations

import logging
from collections.abc import Iterable

from pod_inspect.core.errors import DataConsistencyError
from pod_inspect.models.pod import (
    ContainerKind,
    ContainerObservation,
    ContainerRecord,
    ContainerSpec,
)
from pod_inspect.services.classifier import classify_observation

logger = logging.getLogger(__name__)


def build_roster(
    init_specs: Iterable[ContainerSpec],
    init_statuses: Iterable[ContainerObservation],
    regular_specs: Iterable[ContainerSpec],
    regular_statuses: Iterable[ContainerObservation],
) -> list[ContainerRecord]:
    """Merge declared containers with their observed statuses.

    Every declared container yields one record; statuses populate the verdict,
    restart count and readiness of the matching record. A status that names no
    declared container of the same kind raises DataConsistencyError. The result
    lists init containers first, then regular ones, each sorted by name.
    """
    records: dict[tuple[ContainerKind, str], ContainerRecord] = {}
    _declare(records, ContainerKind.INIT, init_specs)
    _declare(records, ContainerKind.REGULAR, regular_specs)
    _observe(records, ContainerKind.INIT, init_statuses)
    _observe(records, ContainerKind.REGULAR, regular_statuses)
    return sorted(records.values(), key=lambda record: record.order_key)


def _declare(
    records: dict[tuple[ContainerKind, str], ContainerRecord],
    kind: ContainerKind,
    specs: Iterable[ContainerSpec],
) -> None:
    for spec in specs:
        key = (kind, spec.name)
        if key not in records:
            records[key] = ContainerRecord(kind=kind, name=spec.name, image=spec.image)
        else:
            records[key].image = spec.image


def _observe(
    records: dict[tuple[ContainerKind, str], ContainerRecord],
    kind: ContainerKind,
    statuses: Iterable[ContainerObservation],
) -> None:
    for status in statuses:
        record = records.get((kind, status.name))
        if record is None:
            logger.warning("Orphan %s status for %s", kind.value, status.name)
            raise DataConsistencyError(status.name, kind.value)
        record.verdict = classify_observation(status)
        record.restart_count = status.restart_count
        record.ready = status.ready
