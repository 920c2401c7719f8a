"""HTTP route definitions for the service."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Request, status

from app.schemas import (
    AnalysisOut,
    AnalysisRequest,
    AnalyzeResponse,
    LatestReadingResponse,
    ReadingOut,
    SubmitResponse,
)
from models.records import Reading
from services.classifier import classify_reading
from services.errors import GeneratorUnavailableError, InvalidInputError, NoDataError
from services.monitor import MonitorService, build_default_monitor

router = APIRouter()


def get_monitor() -> MonitorService:
    return build_default_monitor()


def _to_schema(reading: Reading) -> ReadingOut:
    return ReadingOut.model_validate(reading.to_dict())


@router.post(
    "/api/sensor-data",
    response_model=SubmitResponse,
    summary="Submit a raw sensor reading.",
)
async def submit_reading(
    request: Request,
    monitor: MonitorService = Depends(get_monitor),
) -> SubmitResponse:
    try:
        raw = await request.json()
    except (ValueError, UnicodeDecodeError):
        raw = None

    try:
        reading = monitor.submit_reading(raw)
    except InvalidInputError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=exc.reason,
        ) from exc
    return SubmitResponse(message="Reading stored.", data=_to_schema(reading))


@router.get(
    "/api/sensor-data",
    response_model=list[ReadingOut],
    summary="List stored readings, newest first.",
)
async def list_readings(
    monitor: MonitorService = Depends(get_monitor),
) -> list[ReadingOut]:
    return [_to_schema(reading) for reading in monitor.list_readings()]


@router.get(
    "/api/sensor-data/latest",
    response_model=LatestReadingResponse,
    summary="Most recent reading with per-metric classification.",
)
async def latest_reading(
    monitor: MonitorService = Depends(get_monitor),
) -> LatestReadingResponse:
    reading = monitor.latest_reading()
    if reading is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No readings stored yet.",
        )
    return LatestReadingResponse(
        reading=_to_schema(reading),
        status=classify_reading(reading),
    )


@router.post(
    "/api/analyze",
    response_model=AnalyzeResponse,
    summary="Summarize the most recent readings.",
)
def analyze(
    body: Optional[AnalysisRequest] = Body(default=None),
    monitor: MonitorService = Depends(get_monitor),
) -> AnalyzeResponse:
    window_size = body.window_size if body is not None else None
    try:
        result = monitor.analyze(window_size)
    except NoDataError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except GeneratorUnavailableError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(exc),
        ) from exc
    return AnalyzeResponse(
        analysis=AnalysisOut(
            summary=result.summary,
            recommendations=list(result.recommendations),
            alerts=list(result.alerts),
        ),
        structured=result.structured,
    )


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck(
    monitor: MonitorService = Depends(get_monitor),
) -> dict[str, object]:
    return {"status": "ok", "readings": len(monitor.history)}


@router.get(
    "/",
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root() -> dict[str, str]:
    return {"status": "ok", "detail": "See /health for service status."}
