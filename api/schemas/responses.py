from pydantic import BaseModel, Field
from datetime import datetime
from enum import Enum


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"


class MessageResponse(BaseModel):
    """Body of every /send response, success or failure"""
    message: str = Field(description="Human readable outcome")


class HealthResponse(BaseModel):
    status: HealthStatus
    service: str
    version: str
    timestamp: datetime
    broker_connected: bool
    directory_size: int
    topic: str
