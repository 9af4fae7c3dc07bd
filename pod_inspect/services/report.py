from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Protocol

from pod_inspect.core.masking import RegexMasker
from pod_inspect.models.pod import PodEvent, PodReport, PodSnapshot, TotalFailure
from pod_inspect.services.conditions import filter_failed_conditions
from pod_inspect.services.diagnostics import LogFetcher, select_diagnostics
from pod_inspect.services.events import window_events
from pod_inspect.services.roster import build_roster


class PodAccessor(Protocol):
    def get_pod(self, namespace: str, pod_name: str) -> PodSnapshot:
        raise NotImplementedError


class EventLister(Protocol):
    def list_pod_events(self, namespace: str, pod_name: str) -> list[PodEvent]:
        raise NotImplementedError


class ReportAssembler:
    def __init__(
        self,
        pod_accessor: PodAccessor,
        log_fetcher: LogFetcher,
        event_lister: EventLister,
        *,
        max_events: int = 10,
        max_log_lines: int = 5,
        log_fetch_workers: int = 1,
        masker: RegexMasker | None = None,
    ) -> None:
        self._logger = logging.getLogger(__name__)
        self._pod_accessor = pod_accessor
        self._log_fetcher = log_fetcher
        self._event_lister = event_lister
        self._max_events = max_events
        self._max_log_lines = max_log_lines
        self._log_fetch_workers = log_fetch_workers
        self._masker = masker or RegexMasker()

    def inspect(
        self,
        namespace: str,
        pod_name: str,
        *,
        max_events: int | None = None,
        max_log_lines: int | None = None,
    ) -> PodReport:
        snapshot = self._pod_accessor.get_pod(namespace, pod_name)
        return self.assemble(
            snapshot,
            lambda: self._event_lister.list_pod_events(namespace, pod_name),
            max_events=max_events,
            max_log_lines=max_log_lines,
        )

    def assemble(
        self,
        snapshot: PodSnapshot,
        events: Sequence[PodEvent] | Callable[[], Sequence[PodEvent]] | None = None,
        *,
        max_events: int | None = None,
        max_log_lines: int | None = None,
    ) -> PodReport:
        """Build the report for an already fetched pod.

        ``events`` may be a sequence or a zero-argument callable returning one;
        the callable form defers the event lookup until the containers have been
        classified and their logs fetched.
        """
        event_limit = self._max_events if max_events is None else max(max_events, 0)
        line_limit = self._max_log_lines if max_log_lines is None else max(max_log_lines, 0)

        if not snapshot.has_statuses:
            return self._total_failure_report(snapshot)

        records = build_roster(
            snapshot.init_containers,
            snapshot.init_statuses,
            snapshot.containers,
            snapshot.statuses,
        )

        logs = select_diagnostics(
            snapshot.namespace,
            snapshot.name,
            records,
            self._log_fetcher,
            line_limit,
            max_workers=self._log_fetch_workers,
        )
        if self._masker.enabled:
            logs = self._masker.mask_logs(logs)

        failed_conditions = filter_failed_conditions(snapshot.conditions)

        if callable(events):
            events = events()
        event_window = window_events(list(events or []), event_limit)

        self._logger.info(
            "Assembled report for %s/%s: %d containers, %d with logs, %d failed conditions",
            snapshot.namespace,
            snapshot.name,
            len(records),
            len(logs),
            len(failed_conditions),
        )
        return PodReport(
            namespace=snapshot.namespace,
            pod_name=snapshot.name,
            node_name=snapshot.node_name,
            containers=records,
            failed_conditions=failed_conditions,
            event_window=event_window,
            container_logs=logs,
            log_line_limit=line_limit,
        )

    def _total_failure_report(self, snapshot: PodSnapshot) -> PodReport:
        self._logger.info(
            "Pod %s/%s reports no container statuses (phase=%s)",
            snapshot.namespace,
            snapshot.name,
            snapshot.phase,
        )
        return PodReport(
            namespace=snapshot.namespace,
            pod_name=snapshot.name,
            node_name=snapshot.node_name,
            total_failure=TotalFailure(
                phase=snapshot.phase,
                reason=snapshot.reason,
                message=snapshot.message,
            ),
        )
