"""Pydantic schemas for health check responses."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Body of GET /health/."""

    status: Literal["ok"] = "ok"
    environment: str = Field(description="APP_ENV the process runs with (dev or prod)")
    database: Literal["connected", "disconnected"] = Field(
        description="Whether SELECT 1 succeeded against DATABASE_URL",
    )
