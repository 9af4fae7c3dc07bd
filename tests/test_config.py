from __future__ import annotations

import pytest

from pod_inspect.core.config import load_settings

_ENV_VARS = (
    "POD_INSPECT_MAX_EVENTS",
    "POD_INSPECT_MAX_LOG_LINES",
    "POD_INSPECT_LOG_FETCH_WORKERS",
    "MASKING_REGEX_LIST_JSON",
    "K8S_API_TIMEOUT_SECONDS",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_load_settings_defaults() -> None:
    settings = load_settings()

    assert settings.max_events == 10
    assert settings.max_log_lines == 5
    assert settings.log_fetch_workers == 1
    assert settings.k8s_api_timeout_seconds == 5
    assert settings.masking_regex_list == []


def test_load_settings_reads_limits(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("POD_INSPECT_MAX_EVENTS", "0")
    monkeypatch.setenv("POD_INSPECT_MAX_LOG_LINES", "20")
    monkeypatch.setenv("POD_INSPECT_LOG_FETCH_WORKERS", "4")

    settings = load_settings()

    assert settings.max_events == 0
    assert settings.max_log_lines == 20
    assert settings.log_fetch_workers == 4


def test_load_settings_clamps_and_ignores_bad_counts(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("POD_INSPECT_MAX_EVENTS", "-3")
    monkeypatch.setenv("POD_INSPECT_MAX_LOG_LINES", "many")
    monkeypatch.setenv("POD_INSPECT_LOG_FETCH_WORKERS", "0")

    settings = load_settings()

    assert settings.max_events == 0
    assert settings.max_log_lines == 5
    assert settings.log_fetch_workers == 1


def test_load_settings_parses_masking_regex_list_json(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(
        "MASKING_REGEX_LIST_JSON",
        '["token-\\\\d+", "secret-[A-Za-z]+", "  "]',
    )

    settings = load_settings()

    assert settings.masking_regex_list == [r"token-\d+", "secret-[A-Za-z]+"]


def test_load_settings_rejects_non_array_masking_regex_json(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("MASKING_REGEX_LIST_JSON", '{"regex": "token-\\\\d+"}')

    with pytest.raises(ValueError, match="MASKING_REGEX_LIST_JSON"):
        load_settings()


def test_load_settings_rejects_non_string_masking_regex_item(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("MASKING_REGEX_LIST_JSON", '["token-\\\\d+", 1]')

    with pytest.raises(ValueError, match="MASKING_REGEX_LIST_JSON\\[1\\]"):
        load_settings()


def test_load_settings_rejects_invalid_regex_pattern(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MASKING_REGEX_LIST_JSON", r'["(unclosed"]')

    with pytest.raises(ValueError, match="MASKING_REGEX_LIST_JSON\\[0\\]"):
        load_settings()
