from __future__ import annotations

import logging
from datetime import datetime, timezone

from kubernetes import client, config
from kubernetes.client.rest import ApiException
from kubernetes.config.config_exception import ConfigException

from pod_inspect.core.errors import CollaboratorError, NoLogsAvailable
from pod_inspect.models.pod import (
    ContainerObservation,
    ContainerSpec,
    ContainerState,
    PodCondition,
    PodEvent,
    PodSnapshot,
    RunningState,
    TerminatedState,
    UnsetState,
    WaitingState,
)

# read_namespaced_pod_log answers 404 when a container never ran and 400 while
# it is waiting to start. Any other 400 is a bad request and is raised.
_NOT_STARTED_MARKERS = ("is waiting to start", "ContainerCreating", "PodInitializing")

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


class KubernetesClient:
    """Pod accessor, event lister and log fetcher backed by the Kubernetes API."""

    def __init__(self, timeout_seconds: int) -> None:
        self._logger = logging.getLogger(__name__)
        self._timeout_seconds = timeout_seconds
        self._core_api = self._build_client()

    @property
    def configured(self) -> bool:
        return self._core_api is not None

    def get_pod(self, namespace: str, pod_name: str) -> PodSnapshot:
        core_api = self._require_core_api()
        try:
            pod = core_api.read_namespaced_pod(
                name=pod_name,
                namespace=namespace,
                _request_timeout=self._timeout_seconds,
            )
        except ApiException as exc:
            self._logger.warning("Failed to read pod %s/%s: %s", namespace, pod_name, exc.reason)
            raise CollaboratorError(
                f"failed to read pod {namespace}/{pod_name}: {exc.reason}", status=exc.status
            ) from exc
        except Exception as exc:  # noqa: BLE001 - transport errors come from urllib3.
            self._logger.warning("Failed to read pod %s/%s: %s", namespace, pod_name, exc)
            raise CollaboratorError(f"failed to read pod {namespace}/{pod_name}: {exc}") from exc
        return to_pod_snapshot(pod)

    def list_pod_events(self, namespace: str, pod_name: str) -> list[PodEvent]:
        core_api = self._require_core_api()
        field_selector = f"involvedObject.name={pod_name}"
        try:
            response = core_api.list_namespaced_event(
                namespace=namespace,
                field_selector=field_selector,
                _request_timeout=self._timeout_seconds,
            )
        except ApiException as exc:
            self._logger.warning(
                "Failed to list events for %s/%s: %s", namespace, pod_name, exc.reason
            )
            raise CollaboratorError(
                f"failed to list events for {namespace}/{pod_name}: {exc.reason}",
                status=exc.status,
            ) from exc
        except Exception as exc:  # noqa: BLE001
            self._logger.warning("Failed to list events for %s/%s: %s", namespace, pod_name, exc)
            raise CollaboratorError(
                f"failed to list events for {namespace}/{pod_name}: {exc}"
            ) from exc

        events = [_to_pod_event(item) for item in response.items or []]
        return sorted(events, key=lambda event: event.timestamp or _EPOCH)

    def fetch_logs(
        self, namespace: str, pod_name: str, container: str, tail_lines: int
    ) -> str:
        core_api = self._require_core_api()
        kwargs: dict[str, object] = {}
        if tail_lines > 0:
            kwargs["tail_lines"] = tail_lines
        try:
            return core_api.read_namespaced_pod_log(
                name=pod_name,
                namespace=namespace,
                container=container,
                _request_timeout=self._timeout_seconds,
                **kwargs,
            )
        except ApiException as exc:
            if _means_no_logs(exc):
                raise NoLogsAvailable(container) from exc
            self._logger.warning(
                "Failed to read logs for %s/%s (%s): %s", namespace, pod_name, container, exc.reason
            )
            raise

    def _require_core_api(self) -> client.CoreV1Api:
        if self._core_api is None:
            raise CollaboratorError("kubernetes client is not configured")
        return self._core_api

    def _build_client(self) -> client.CoreV1Api | None:
        try:
            config.load_incluster_config()
            self._logger.info("Loaded in-cluster Kubernetes config")
        except ConfigException:
            try:
                config.load_kube_config()
                self._logger.info("Loaded kubeconfig for local development")
            except ConfigException as exc:
                self._logger.warning("Failed to configure Kubernetes client: %s", exc)
                return None
        return client.CoreV1Api()


def to_pod_snapshot(pod: client.V1Pod) -> PodSnapshot:
    metadata = pod.metadata or client.V1ObjectMeta()
    spec = pod.spec or client.V1PodSpec(containers=[])
    status = pod.status or client.V1PodStatus()
    return PodSnapshot(
        namespace=metadata.namespace or "",
        name=metadata.name or "",
        node_name=spec.node_name or "",
        phase=status.phase or "",
        reason=status.reason or "",
        message=status.message or "",
        init_containers=[_to_container_spec(item) for item in spec.init_containers or []],
        containers=[_to_container_spec(item) for item in spec.containers or []],
        init_statuses=[_to_observation(item) for item in status.init_container_statuses or []],
        statuses=[_to_observation(item) for item in status.container_statuses or []],
        conditions=[_to_condition(item) for item in status.conditions or []],
    )


def _to_container_spec(container: client.V1Container) -> ContainerSpec:
    return ContainerSpec(name=container.name, image=container.image or "")


def _to_observation(container_status: client.V1ContainerStatus) -> ContainerObservation:
    last_state = container_status.last_state
    last_terminated = None
    if last_state is not None and last_state.terminated is not None:
        last_terminated = _to_terminated(last_state.terminated)
    return ContainerObservation(
        name=container_status.name,
        state=_to_container_state(container_status.state),
        last_terminated=last_terminated,
        restart_count=container_status.restart_count or 0,
        ready=bool(container_status.ready),
    )


def _to_container_state(state: client.V1ContainerState | None) -> ContainerState:
    if state is None:
        return UnsetState()
    if state.running is not None:
        return RunningState(started_at=state.running.started_at)
    if state.terminated is not None:
        return _to_terminated(state.terminated)
    if state.waiting is not None:
        return WaitingState(
            reason=state.waiting.reason or "",
            message=state.waiting.message or "",
        )
    return UnsetState()


def _to_terminated(terminated: client.V1ContainerStateTerminated) -> TerminatedState:
    return TerminatedState(
        reason=terminated.reason or "",
        message=terminated.message or "",
        exit_code=terminated.exit_code or 0,
        finished_at=terminated.finished_at,
    )


def _to_condition(condition: client.V1PodCondition) -> PodCondition:
    return PodCondition(
        type=condition.type or "",
        status=condition.status or "",
        reason=condition.reason or "",
        message=condition.message or "",
    )


def _to_pod_event(event: client.CoreV1Event) -> PodEvent:
    metadata = event.metadata
    return PodEvent(
        type=event.type or "",
        reason=event.reason or "",
        message=event.message or "",
        last_timestamp=event.last_timestamp,
        creation_timestamp=metadata.creation_timestamp if metadata else None,
    )


def _means_no_logs(exc: ApiException) -> bool:
    if exc.status == 404:
        return True
    if exc.status != 400:
        return False
    body = exc.body
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    detail = f"{body or ''} {exc.reason or ''}"
    return any(marker in detail for marker in _NOT_STARTED_MARKERS)
