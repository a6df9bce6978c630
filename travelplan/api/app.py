"""FastAPI surface for the travel plan pipeline."""
from __future__ import annotations

import os

# Load environment variables from .env file
from dotenv import load_dotenv

# Load .env file before any other imports that might need environment variables
load_dotenv()


import logging
from typing import Any, Dict, Optional

import sentry_sdk
from fastapi import APIRouter, Body, FastAPI, Header, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from travelplan.api.dependencies import get_plan_pipeline, get_settings, lifespan
from travelplan.api.response_builder import _error_response, _result_to_response
from travelplan.api.schemas import HealthResponse, PingResponse
from travelplan.core.config import configure_logging
from travelplan.core.schemas import PlanResult

configure_logging()
logger = logging.getLogger(__name__)

if os.getenv("SENTRY_DSN"):  # pragma: no cover - runtime configuration
    sentry_sdk.init(
        dsn=os.getenv("SENTRY_DSN"),
        send_default_pii=False,
        traces_sample_rate=1.0,
    )

app = FastAPI(title="Travel Plan API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().allowed_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger.info(
        "%s %s (content-type: %s)",
        request.method,
        request.url.path,
        request.headers.get("content-type", "-"),
    )
    return await call_next(request)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("Rejected malformed request body on %s", request.url.path)
    result = PlanResult(success=False, error="Invalid request body: expected a JSON object")
    return JSONResponse(status_code=400, content=result.to_payload())


def _header_flag(value: Optional[str]) -> Optional[bool]:
    if value is None:
        return None
    return value.strip().lower() in {"1", "true", "yes", "on"}


router = APIRouter()


@router.post("/travel-plan", response_model=PlanResult, response_model_exclude_none=True)
async def create_travel_plan(
    payload: Dict[str, Any] = Body(...),
    x_mock_mode: Optional[str] = Header(default=None),
) -> JSONResponse:
    """Generate a budget-aware travel plan.

    The body uses the form's field names::

        {
            "from_city": "Mumbai",
            "to_city": "Goa",
            "budget": 50000,
            "currency": "INR",
            "duration": 5,
            "travelers": 2
        }

    Returns ``PlanResult`` with status 200 on success, 400 when fields are
    missing or out of bounds, and 500 for configuration or provider failures.
    Sending ``x-mock-mode: true`` returns deterministic offline sections.
    """

    logger.info("Travel plan request received: %s -> %s", payload.get("from_city"), payload.get("to_city"))
    pipeline = get_plan_pipeline()
    mock_mode = _header_flag(x_mock_mode)
    if not mock_mode:
        # Header can only switch mock mode on
        mock_mode = None

    try:
        result = await pipeline.plan_trip(payload, mock_mode=mock_mode)
        logger.info("Travel plan generated for %s", payload.get("to_city"))
    except (ValueError, RuntimeError) as exc:
        logger.error(f"Travel plan failed ({type(exc).__name__}): {exc}")
        return _error_response(exc)
    except Exception as exc:
        logger.error(f"Unexpected error during travel plan: {exc}", exc_info=True)
        return _error_response(exc)

    return _result_to_response(result)


@router.get("/ping", response_model=PingResponse)
async def ping() -> PingResponse:
    return PingResponse(message=get_settings().ping_message)


app.include_router(router, prefix="/api")
# Function-gateway deployments mount the same routes under this prefix
app.include_router(router, prefix="/.netlify/functions/api")


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Simple health endpoint used for readiness probes."""

    return HealthResponse(status="healthy", service="travel-plan-api")


if __name__ == "__main__":  # pragma: no cover
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8080")))
