from __future__ import annotations

from functools import lru_cache

from pod_inspect.clients.k8s import KubernetesClient
from pod_inspect.core.config import Settings, load_settings
from pod_inspect.core.masking import build_masker
from pod_inspect.services.report import ReportAssembler


@lru_cache
def get_settings() -> Settings:
    return load_settings()


@lru_cache
def get_k8s_client() -> KubernetesClient:
    settings = get_settings()
    return KubernetesClient(timeout_seconds=settings.k8s_api_timeout_seconds)


@lru_cache
def get_report_assembler() -> ReportAssembler:
    settings = get_settings()
    k8s_client = get_k8s_client()
    return ReportAssembler(
        pod_accessor=k8s_client,
        log_fetcher=k8s_client,
        event_lister=k8s_client,
        max_events=settings.max_events,
        max_log_lines=settings.max_log_lines,
        log_fetch_workers=settings.log_fetch_workers,
        masker=build_masker(settings.masking_regex_list),
    )
