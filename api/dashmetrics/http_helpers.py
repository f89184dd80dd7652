import logging
from typing import Any, Callable

from fastapi import HTTPException
from fastapi.encoders import jsonable_encoder

from .services.fanout import MetricsComputationError
from .services.metrics import NotFoundError

logger = logging.getLogger(__name__)


def compute_or_fail(what: str, build: Callable[..., Any], *args: Any) -> Any:
    """Run a metrics builder and translate its failures into HTTP errors."""
    try:
        result = build(*args)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except MetricsComputationError as exc:
        logger.exception("[METRICS] failed to compute %s loader=%s", what, exc.loader)
        raise HTTPException(status_code=500, detail=f"Failed to compute {what}") from exc
    return jsonable_encoder(result)
