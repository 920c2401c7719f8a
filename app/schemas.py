"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class MetricStatus(str, Enum):
    """Threshold classification levels for a single measurement."""

    normal = "normal"
    warning = "warning"
    critical = "critical"


class ReadingOut(BaseModel):
    """A stored reading as exposed over the API."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    light_level: Optional[int] = Field(default=None, alias="lightLevel")
    temperature: Optional[float] = None
    humidity: Optional[float] = None
    voltage: Optional[float] = None
    timestamp: datetime


class SubmitResponse(BaseModel):
    """Acknowledgement returned after a reading is stored."""

    success: bool = True
    message: str = "Reading stored."
    data: ReadingOut


class LatestReadingResponse(BaseModel):
    reading: ReadingOut
    status: Dict[str, MetricStatus] = Field(default_factory=dict)


class AnalysisRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    window_size: Optional[int] = Field(default=None, ge=1, alias="windowSize")


class AnalysisOut(BaseModel):
    summary: str
    recommendations: List[str] = Field(default_factory=list)
    alerts: List[str] = Field(default_factory=list)


class AnalyzeResponse(BaseModel):
    analysis: AnalysisOut
    structured: bool = Field(
        ..., description="False when the generator reply could not be parsed."
    )
