"""Response models for the auxiliary endpoints.

The plan endpoint itself returns ``travelplan.core.schemas.PlanResult``.
"""
from pydantic import BaseModel


class PingResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    status: str
    service: str
