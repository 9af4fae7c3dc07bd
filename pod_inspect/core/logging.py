from __future__ import annotations

import logging
from collections.abc import Iterable

HEALTH_PATHS = frozenset({"/healthz", "/readyz", "/"})


class _HealthCheckFilter(logging.Filter):
    def __init__(self, paths: Iterable[str]) -> None:
        super().__init__()
        self._paths = {path.rstrip("/") or "/" for path in paths}

    def filter(self, record: logging.LogRecord) -> bool:
        return _extract_path(record) not in self._paths


def _extract_path(record: logging.LogRecord) -> str | None:
    # uvicorn access records carry (client, method, path, http_version, status)
    args = record.args
    if isinstance(args, tuple) and len(args) >= 3:
        return str(args[2]).split("?", 1)[0] or None
    return None


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    logging.getLogger("kubernetes.client.rest").setLevel(logging.WARNING)
    access_logger = logging.getLogger("uvicorn.access")
    access_logger.addFilter(_HealthCheckFilter(HEALTH_PATHS))
