from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from pod_inspect.clients.k8s import KubernetesClient
from pod_inspect.core.dependencies import get_k8s_client

router = APIRouter()


@router.get("/healthz")
def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/readyz")
def readyz(
    k8s_client: KubernetesClient = Depends(get_k8s_client),  # noqa: B008
) -> JSONResponse:
    """Ready once a Kubernetes configuration has been loaded."""
    if not k8s_client.configured:
        return JSONResponse(
            status_code=503,
            content={"status": "unavailable", "message": "kubernetes client is not configured"},
        )
    return JSONResponse(content={"status": "ok"})


@router.get("/")
def root() -> dict[str, str]:
    return {"status": "ok", "message": "pod-inspect-agent is running"}
