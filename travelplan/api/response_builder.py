import logging

from fastapi.responses import JSONResponse

from travelplan.core.errors import PlannerError
from travelplan.core.schemas import PlanResult

logger = logging.getLogger(__name__)

GENERIC_FAILURE = "Failed to generate travel plan"


def _result_to_response(result: PlanResult) -> JSONResponse:
    return JSONResponse(status_code=200, content=result.to_payload())


def _error_response(exc: Exception) -> JSONResponse:
    """Map a pipeline failure to a ``success: false`` payload and status code."""

    if isinstance(exc, PlannerError):
        status_code = exc.status_code
        message = str(exc)
    elif isinstance(exc, ValueError):
        status_code = 400
        message = str(exc)
    else:
        status_code = 500
        message = GENERIC_FAILURE

    result = PlanResult(success=False, error=message or GENERIC_FAILURE)
    return JSONResponse(status_code=status_code, content=result.to_payload())
