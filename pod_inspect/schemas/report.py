from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from pod_inspect.models.pod import (
    ContainerKind,
    ContainerRecord,
    EventWindowLabel,
    HealthBucket,
    Icon,
    PodCondition,
    PodEvent,
    PodReport,
)
from pod_inspect.services.diagnostics import needs_diagnostics

ICON_GLYPHS: dict[Icon, str] = {
    Icon.CHECK: "✔",
    Icon.CROSS: "✖",
    Icon.ELLIPSIS: "…",
    Icon.QUESTION: "?",
}


class ContainerVerdictResponse(BaseModel):
    code: str
    reason: str
    message: str
    state: str
    health: HealthBucket
    icon: Icon
    glyph: str


class ContainerResponse(BaseModel):
    kind: ContainerKind
    type_code: str
    name: str
    image: str
    restart_count: int
    ready: bool
    verdict: ContainerVerdictResponse | None = None

    @classmethod
    def from_record(cls, record: ContainerRecord) -> ContainerResponse:
        verdict = None
        if record.verdict is not None:
            verdict = ContainerVerdictResponse(
                code=record.verdict.code,
                reason=record.verdict.reason,
                message=record.verdict.message,
                state=record.verdict.state_label,
                health=record.verdict.health,
                icon=record.verdict.icon,
                glyph=ICON_GLYPHS[record.verdict.icon],
            )
        return cls(
            kind=record.kind,
            type_code=record.type_code,
            name=record.name,
            image=record.image,
            restart_count=record.restart_count,
            ready=record.ready,
            verdict=verdict,
        )


class TotalFailureResponse(BaseModel):
    phase: str
    reason: str
    message: str


class ConditionResponse(BaseModel):
    type: str
    reason: str
    message: str

    @classmethod
    def from_condition(cls, condition: PodCondition) -> ConditionResponse:
        return cls(type=condition.type, reason=condition.reason, message=condition.message)


class EventResponse(BaseModel):
    timestamp: datetime | None = None
    type: str
    reason: str
    message: str

    @classmethod
    def from_event(cls, event: PodEvent) -> EventResponse:
        return cls(
            timestamp=event.timestamp,
            type=event.type,
            reason=event.reason,
            message=event.message,
        )


class EventWindowResponse(BaseModel):
    events: list[EventResponse] = Field(default_factory=list)
    truncated: bool = False
    total_available: int = 0
    label: EventWindowLabel = EventWindowLabel.ALL
    title: str = "Pod events"


class ContainerLogResponse(BaseModel):
    container: str
    title: str
    logs: str


class PodReportResponse(BaseModel):
    status: str = "ok"
    namespace: str
    pod_name: str
    node_name: str
    containers: list[ContainerResponse] = Field(default_factory=list)
    total_failure: TotalFailureResponse | None = None
    failed_conditions: list[ConditionResponse] = Field(default_factory=list)
    event_window: EventWindowResponse | None = None
    container_logs: list[ContainerLogResponse] = Field(default_factory=list)

    @classmethod
    def from_report(cls, report: PodReport) -> PodReportResponse:
        total_failure = None
        if report.total_failure is not None:
            total_failure = TotalFailureResponse(
                phase=report.total_failure.phase,
                reason=report.total_failure.reason,
                message=report.total_failure.message,
            )

        event_window = None
        if report.event_window is not None:
            window = report.event_window
            event_window = EventWindowResponse(
                events=[EventResponse.from_event(event) for event in window.events],
                truncated=window.truncated,
                total_available=window.total_available,
                label=window.label,
                title=event_window_title(window.label, len(window.events)),
            )

        log_title = log_block_title(report.log_line_limit)
        container_logs: list[ContainerLogResponse] = []
        for record in report.containers:
            logs = report.container_logs.get(record.name)
            if not logs or not needs_diagnostics(record):
                continue
            if any(block.container == record.name for block in container_logs):
                continue
            container_logs.append(
                ContainerLogResponse(container=record.name, title=log_title, logs=logs)
            )

        return cls(
            namespace=report.namespace,
            pod_name=report.pod_name,
            node_name=report.node_name,
            containers=[ContainerResponse.from_record(record) for record in report.containers],
            total_failure=total_failure,
            failed_conditions=[
                ConditionResponse.from_condition(condition)
                for condition in report.failed_conditions
            ],
            event_window=event_window,
            container_logs=container_logs,
        )


def event_window_title(label: EventWindowLabel, shown: int) -> str:
    if label is EventWindowLabel.SINGLE_MOST_RECENT:
        return "Last pod event"
    if label is EventWindowLabel.LAST_N:
        return f"Last {shown} pod events"
    return "Pod events"


def log_block_title(line_limit: int) -> str:
    if line_limit <= 0:
        return "logs"
    if line_limit == 1:
        return "logs (last line)"
    return f"logs (last {line_limit} lines)"
