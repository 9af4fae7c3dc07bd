from __future__ import annotations

import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import Protocol

from pod_inspect.core.errors import DiagnosticFetchError, NoLogsAvailable
from pod_inspect.models.pod import ContainerRecord, HealthBucket

logger = logging.getLogger(__name__)


class LogFetcher(Protocol):
    def fetch_logs(
        self, namespace: str, pod_name: str, container: str, tail_lines: int
    ) -> str:
        raise NotImplementedError


def needs_diagnostics(record: ContainerRecord) -> bool:
    return record.verdict is not None and record.verdict.health is not HealthBucket.OK


def select_diagnostics(
    namespace: str,
    pod_name: str,
    records: Sequence[ContainerRecord],
    log_fetcher: LogFetcher,
    max_lines: int,
    max_workers: int = 1,
) -> dict[str, str]:
    """Fetch logs for every container whose verdict is not OK.

    ``max_lines`` caps the tail (0 means the whole log). A fetcher raising
    NoLogsAvailable yields nothing for that container; any other failure is
    raised as DiagnosticFetchError. Only non-empty logs are returned.
    """
    # logs are read by container name, so a name shared by both kinds is read once
    targets = list(
        dict.fromkeys(record.name for record in records if needs_diagnostics(record))
    )
    if not targets:
        return {}

    def fetch(container: str) -> str:
        return _fetch_one(log_fetcher, namespace, pod_name, container, max_lines)

    if max_workers > 1 and len(targets) > 1:
        with ThreadPoolExecutor(max_workers=min(max_workers, len(targets))) as executor:
            results = list(executor.map(fetch, targets))
    else:
        results = [fetch(container) for container in targets]

    return {container: logs for container, logs in zip(targets, results) if logs}


def _fetch_one(
    log_fetcher: LogFetcher,
    namespace: str,
    pod_name: str,
    container: str,
    max_lines: int,
) -> str:
    try:
        return log_fetcher.fetch_logs(namespace, pod_name, container, max_lines) or ""
    except NoLogsAvailable:
        logger.debug("No logs available for %s/%s (%s)", namespace, pod_name, container)
        return ""
    except DiagnosticFetchError:
        raise
    except Exception as exc:  # noqa: BLE001 - any fetcher failure aborts the report.
        raise DiagnosticFetchError(container, str(exc)) from exc
