from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Union


class HealthBucket(str, Enum):
    OK = "ok"
    WAITING = "waiting"
    FAILED = "failed"
    UNKNOWN = "unknown"


class Icon(str, Enum):
    CHECK = "check"
    CROSS = "cross"
    ELLIPSIS = "ellipsis"
    QUESTION = "question"


class ContainerKind(str, Enum):
    INIT = "init"
    REGULAR = "regular"

    @property
    def rank(self) -> int:
        return 0 if self is ContainerKind.INIT else 1

    @property
    def type_code(self) -> str:
        return "IC" if self is ContainerKind.INIT else "C"


class EventWindowLabel(str, Enum):
    ALL = "all"
    LAST_N = "last_n"
    SINGLE_MOST_RECENT = "single_most_recent"


@dataclass(frozen=True)
class RunningState:
    started_at: datetime | None = None


@dataclass(frozen=True)
class TerminatedState:
    reason: str = ""
    message: str = ""
    exit_code: int = 0
    finished_at: datetime | None = None


@dataclass(frozen=True)
class WaitingState:
    reason: str = ""
    message: str = ""


@dataclass(frozen=True)
class UnsetState:
    pass


ContainerState = Union[RunningState, TerminatedState, WaitingState, UnsetState]


@dataclass(frozen=True)
class ContainerObservation:
    name: str
    state: ContainerState = field(default_factory=UnsetState)
    last_terminated: TerminatedState | None = None
    restart_count: int = 0
    ready: bool = False


@dataclass(frozen=True)
class ContainerSpec:
    name: str
    image: str = ""


@dataclass(frozen=True)
class ContainerVerdict:
    code: str
    reason: str
    message: str
    health: HealthBucket
    icon: Icon

    @property
    def state_label(self) -> str:
        if self.reason:
            return f"{self.code} ({self.reason})"
        return self.code


@dataclass
class ContainerRecord:
    kind: ContainerKind
    name: str
    image: str
    verdict: ContainerVerdict | None = None
    restart_count: int = 0
    ready: bool = False

    @property
    def order_key(self) -> tuple[int, str]:
        return (self.kind.rank, self.name)

    @property
    def type_code(self) -> str:
        return self.kind.type_code


@dataclass(frozen=True)
class PodCondition:
    type: str
    status: str
    reason: str = ""
    message: str = ""


@dataclass(frozen=True)
class PodEvent:
    type: str
    reason: str
    message: str
    last_timestamp: datetime | None = None
    creation_timestamp: datetime | None = None

    @property
    def timestamp(self) -> datetime | None:
        return self.last_timestamp or self.creation_timestamp


@dataclass(frozen=True)
class EventWindow:
    events: list[PodEvent]
    truncated: bool
    total_available: int
    label: EventWindowLabel


@dataclass(frozen=True)
class TotalFailure:
    phase: str
    reason: str
    message: str


@dataclass(frozen=True)
class PodSnapshot:
    namespace: str
    name: str
    node_name: str = ""
    phase: str = ""
    reason: str = ""
    message: str = ""
    init_containers: list[ContainerSpec] = field(default_factory=list)
    containers: list[ContainerSpec] = field(default_factory=list)
    init_statuses: list[ContainerObservation] = field(default_factory=list)
    statuses: list[ContainerObservation] = field(default_factory=list)
    conditions: list[PodCondition] = field(default_factory=list)

    @property
    def has_statuses(self) -> bool:
        return bool(self.init_statuses or self.statuses)


@dataclass(frozen=True)
class PodReport:
    namespace: str
    pod_name: str
    node_name: str
    containers: list[ContainerRecord] = field(default_factory=list)
    total_failure: TotalFailure | None = None
    failed_conditions: list[PodCondition] = field(default_factory=list)
    event_window: EventWindow | None = None
    container_logs: dict[str, str] = field(default_factory=dict)
    log_line_limit: int = 0
