from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from pod_inspect.core.dependencies import get_report_assembler
from pod_inspect.core.errors import (
    CollaboratorError,
    DataConsistencyError,
    DiagnosticFetchError,
)
from pod_inspect.schemas.report import PodReportResponse
from pod_inspect.services.report import ReportAssembler

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/pods/{namespace}/{pod_name}/report", response_model=PodReportResponse)
def get_pod_report(
    namespace: str,
    pod_name: str,
    max_events: int | None = Query(default=None, ge=0),  # noqa: B008
    max_log_lines: int | None = Query(default=None, ge=0),  # noqa: B008
    assembler: ReportAssembler = Depends(get_report_assembler),  # noqa: B008
) -> PodReportResponse:
    """Inspect a pod: container verdicts, failed conditions, recent events and logs."""
    try:
        report = assembler.inspect(
            namespace,
            pod_name,
            max_events=max_events,
            max_log_lines=max_log_lines,
        )
    except CollaboratorError as exc:
        status_code = 404 if exc.status == 404 else 502
        raise HTTPException(status_code=status_code, detail=str(exc)) from exc
    except DiagnosticFetchError as exc:
        logger.warning("Log retrieval failed for %s/%s: %s", namespace, pod_name, exc)
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    except DataConsistencyError as exc:
        logger.error("Inconsistent pod data for %s/%s: %s", namespace, pod_name, exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return PodReportResponse.from_report(report)
