from __future__ import annotations

import json
import os
import re
from dataclasses import dataclass

DEFAULT_MAX_EVENTS = 10
DEFAULT_MAX_LOG_LINES = 5


def _get_int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_count_env(name: str, default: int) -> int:
    return max(_get_int_env(name, default), 0)


def _get_regex_list_env(name: str) -> list[str]:
    value = os.getenv(name, "")
    if not value.strip():
        return []
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError as exc:
        raise ValueError(f"{name} must be a JSON array of strings") from exc
    if not isinstance(parsed, list):
        raise ValueError(f"{name} must be a JSON array of strings")

    patterns: list[str] = []
    for idx, item in enumerate(parsed):
        if not isinstance(item, str):
            raise ValueError(f"{name}[{idx}] must be a string")
        if not item.strip():
            continue
        try:
            re.compile(item)
        except re.error as exc:
            raise ValueError(f"{name}[{idx}] is not a valid regex: {exc}") from exc
        patterns.append(item)
    return patterns


@dataclass(frozen=True)
class Settings:
    port: int
    log_level: str
    k8s_api_timeout_seconds: int
    max_events: int
    max_log_lines: int
    log_fetch_workers: int
    masking_regex_list: list[str]


def load_settings() -> Settings:
    return Settings(
        port=_get_int_env("PORT", 8000),
        log_level=os.getenv("LOG_LEVEL", "info"),
        k8s_api_timeout_seconds=_get_int_env("K8S_API_TIMEOUT_SECONDS", 5),
        max_events=_get_count_env("POD_INSPECT_MAX_EVENTS", DEFAULT_MAX_EVENTS),
        max_log_lines=_get_count_env("POD_INSPECT_MAX_LOG_LINES", DEFAULT_MAX_LOG_LINES),
        log_fetch_workers=max(_get_int_env("POD_INSPECT_LOG_FETCH_WORKERS", 1), 1),
        masking_regex_list=_get_regex_list_env("MASKING_REGEX_LIST_JSON"),
    )
