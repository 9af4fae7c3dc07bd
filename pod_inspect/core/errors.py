from __future__ import annotations


class PodInspectError(Exception):
    """Base class for errors that abort report assembly."""


class DataConsistencyError(PodInspectError):
    """A container status has no matching container in the pod spec."""

    def __init__(self, container_name: str, kind: str) -> None:
        self.container_name = container_name
        self.kind = kind
        label = "init container" if kind == "init" else "container"
        super().__init__(
            f"status found for {label} '{container_name}'; no corresponding container in spec"
        )


class DiagnosticFetchError(PodInspectError):
    def __init__(self, container_name: str, detail: str) -> None:
        self.container_name = container_name
        super().__init__(f"failed to fetch logs for container '{container_name}': {detail}")


class CollaboratorError(PodInspectError):
    """Pod or event lookup failed upstream."""

    def __init__(self, message: str, status: int | None = None) -> None:
        self.status = status
        super().__init__(message)


class NoLogsAvailable(Exception):
    """Raised by a log fetcher when the container has no logs to read yet."""
