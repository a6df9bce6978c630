from contextlib import asynccontextmanager
from functools import lru_cache
from typing import AsyncGenerator

from fastapi import FastAPI

from travelplan.api.workflow_service import PlanPipeline
from travelplan.core.config import ApiSettings


@lru_cache(maxsize=1)
def get_settings() -> ApiSettings:
    return ApiSettings.from_env()


@lru_cache(maxsize=1)
def get_plan_pipeline() -> PlanPipeline:
    return PlanPipeline(get_settings())


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    try:
        yield
    finally:
        if get_plan_pipeline.cache_info().currsize:
            await get_plan_pipeline().close()
