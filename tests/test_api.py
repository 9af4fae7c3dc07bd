from __future__ import annotations

from collections.abc import Iterator
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from pod_inspect.core.dependencies import get_k8s_client, get_report_assembler
from pod_inspect.core.errors import (
    CollaboratorError,
    DataConsistencyError,
    DiagnosticFetchError,
)
from pod_inspect.main import app
from pod_inspect.models.pod import (
    ContainerKind,
    ContainerRecord,
    ContainerVerdict,
    EventWindow,
    EventWindowLabel,
    HealthBucket,
    Icon,
    PodCondition,
    PodEvent,
    PodReport,
    TotalFailure,
)

BASE_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class FakeAssembler:
    def __init__(self, report: PodReport | None = None, error: Exception | None = None) -> None:
        self._report = report
        self._error = error
        self.calls: list[dict[str, object]] = []

    def inspect(
        self,
        namespace: str,
        pod_name: str,
        *,
        max_events: int | None = None,
        max_log_lines: int | None = None,
    ) -> PodReport:
        self.calls.append(
            {
                "namespace": namespace,
                "pod_name": pod_name,
                "max_events": max_events,
                "max_log_lines": max_log_lines,
            }
        )
        if self._error is not None:
            raise self._error
        assert self._report is not None
        return self._report


class FakeK8sClient:
    def __init__(self, configured: bool) -> None:
        self.configured = configured


def _sample_report() -> PodReport:
    return PodReport(
        namespace="shop",
        pod_name="checkout-7d9f",
        node_name="node-a",
        containers=[
            ContainerRecord(
                kind=ContainerKind.INIT,
                name="migrate",
                image="shop/migrate:2",
                verdict=ContainerVerdict(
                    code="T",
                    reason="Completed",
                    message="",
                    health=HealthBucket.OK,
                    icon=Icon.CHECK,
                ),
                ready=True,
            ),
            ContainerRecord(
                kind=ContainerKind.REGULAR,
                name="checkout",
                image="shop/checkout:2",
                verdict=ContainerVerdict(
                    code="W",
                    reason="CrashLoopBackOff",
                    message="back-off 40s",
                    health=HealthBucket.FAILED,
                    icon=Icon.CROSS,
                ),
                restart_count=3,
            ),
        ],
        failed_conditions=[
            PodCondition(type="Ready", status="False", reason="ContainersNotReady")
        ],
        event_window=EventWindow(
            events=[
                PodEvent(
                    type="Warning",
                    reason="BackOff",
                    message="Back-off restarting failed container",
                    creation_timestamp=BASE_TIME,
                )
            ],
            truncated=True,
            total_available=4,
            label=EventWindowLabel.SINGLE_MOST_RECENT,
        ),
        container_logs={"checkout": "Error: missing DATABASE_URL\n"},
        log_line_limit=5,
    )


@pytest.fixture
def api_client() -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def test_report_endpoint_serializes_report(api_client: TestClient) -> None:
    assembler = FakeAssembler(_sample_report())
    app.dependency_overrides[get_report_assembler] = lambda: assembler

    response = api_client.get("/pods/shop/checkout-7d9f/report", params={"max_events": 1})

    assert response.status_code == 200
    body = response.json()
    assert assembler.calls == [
        {
            "namespace": "shop",
            "pod_name": "checkout-7d9f",
            "max_events": 1,
            "max_log_lines": None,
        }
    ]
    assert [item["name"] for item in body["containers"]] == ["migrate", "checkout"]
    assert body["containers"][0]["type_code"] == "IC"
    checkout = body["containers"][1]["verdict"]
    assert checkout["state"] == "W (CrashLoopBackOff)"
    assert checkout["health"] == "failed"
    assert checkout["icon"] == "cross"
    assert checkout["glyph"] == "✖"
    assert body["failed_conditions"] == [
        {"type": "Ready", "reason": "ContainersNotReady", "message": ""}
    ]
    assert body["event_window"]["title"] == "Last pod event"
    assert body["event_window"]["events"][0]["timestamp"].startswith("2024-05-01T12:00:00")
    assert body["container_logs"] == [
        {
            "container": "checkout",
            "title": "logs (last 5 lines)",
            "logs": "Error: missing DATABASE_URL\n",
        }
    ]
    assert body["total_failure"] is None


def test_report_endpoint_total_failure(api_client: TestClient) -> None:
    report = PodReport(
        namespace="shop",
        pod_name="checkout-7d9f",
        node_name="",
        total_failure=TotalFailure(
            phase="Pending", reason="Unschedulable", message="0/3 nodes are available"
        ),
    )
    app.dependency_overrides[get_report_assembler] = lambda: FakeAssembler(report)

    response = api_client.get("/pods/shop/checkout-7d9f/report")

    assert response.status_code == 200
    body = response.json()
    assert body["total_failure"]["reason"] == "Unschedulable"
    assert body["containers"] == []
    assert body["event_window"] is None


def test_report_endpoint_rejects_negative_limits(api_client: TestClient) -> None:
    app.dependency_overrides[get_report_assembler] = lambda: FakeAssembler(_sample_report())

    response = api_client.get("/pods/shop/checkout-7d9f/report", params={"max_log_lines": -1})

    assert response.status_code == 422


@pytest.mark.parametrize(
    ("error", "status_code"),
    [
        (CollaboratorError("failed to read pod shop/missing: Not Found", status=404), 404),
        (CollaboratorError("failed to read pod shop/x: timed out"), 502),
        (DiagnosticFetchError("checkout", "connection reset"), 502),
        (DataConsistencyError("ghost", "regular"), 500),
    ],
)
def test_report_endpoint_maps_errors(
    api_client: TestClient, error: Exception, status_code: int
) -> None:
    app.dependency_overrides[get_report_assembler] = lambda: FakeAssembler(error=error)

    response = api_client.get("/pods/shop/missing/report")

    assert response.status_code == status_code
    assert response.json()["detail"] == str(error)


@pytest.mark.parametrize(("configured", "status_code"), [(True, 200), (False, 503)])
def test_readyz_reflects_kubernetes_configuration(
    api_client: TestClient, configured: bool, status_code: int
) -> None:
    app.dependency_overrides[get_k8s_client] = lambda: FakeK8sClient(configured)

    response = api_client.get("/readyz")

    assert response.status_code == status_code


def test_healthz(api_client: TestClient) -> None:
    response = api_client.get("/healthz")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
