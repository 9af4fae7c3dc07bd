from __future__ import annotations

from datetime import datetime

from pod_inspect.models.pod import (
    ContainerObservation,
    ContainerState,
    ContainerVerdict,
    HealthBucket,
    Icon,
    RunningState,
    TerminatedState,
    UnsetState,
    WaitingState,
)

# Terminated and Waiting each cover healthy and failing containers; the reason
# string and the previous termination record decide which.

_ICONS = {
    HealthBucket.FAILED: Icon.CROSS,
    HealthBucket.OK: Icon.CHECK,
    HealthBucket.WAITING: Icon.ELLIPSIS,
}

_UNKNOWN_VERDICT = ContainerVerdict(
    code="n/a",
    reason="",
    message="",
    health=HealthBucket.UNKNOWN,
    icon=Icon.QUESTION,
)


def classify(
    state: ContainerState,
    last_terminated: TerminatedState | None = None,
) -> ContainerVerdict:
    if isinstance(state, UnsetState):
        return _UNKNOWN_VERDICT

    if isinstance(state, RunningState):
        code, reason, message = "R", "", ""
        health = HealthBucket.OK
    elif isinstance(state, TerminatedState):
        code, reason, message = "T", state.reason, state.message
        health = HealthBucket.OK if reason == "Completed" else HealthBucket.FAILED
    elif isinstance(state, WaitingState):
        code, reason, message = "W", state.reason, state.message
        if reason == "ImagePullBackOff":
            health = HealthBucket.FAILED
        elif last_terminated is not None:
            # waiting after a termination is most likely CrashLoopBackOff
            health = HealthBucket.FAILED
        else:
            health = HealthBucket.WAITING
    else:
        raise TypeError(f"unsupported container state: {state!r}")

    if last_terminated is not None:
        supplemental = last_terminated_note(last_terminated)
        message = f"{message}\n{supplemental}" if message else supplemental

    return ContainerVerdict(
        code=code,
        reason=reason,
        message=message,
        health=health,
        icon=_ICONS[health],
    )


def classify_observation(observation: ContainerObservation) -> ContainerVerdict:
    return classify(observation.state, observation.last_terminated)


def last_terminated_note(terminated: TerminatedState) -> str:
    return (
        f"⚠ Last Terminated: {terminated.reason} ({terminated.exit_code}), "
        f"{_format_time(terminated.finished_at)}"
    )


def _format_time(value: datetime | None) -> str:
    if value is None:
        return ""
    return value.isoformat()
