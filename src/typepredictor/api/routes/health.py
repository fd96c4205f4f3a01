"""Liveness and readiness probes for the type predictor service."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request

from typepredictor.core.config import AppSettings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "healthy", "service": "type-predictor"}


@router.get("/ready")
async def ready(request: Request) -> dict[str, str | int]:
    """Ready once the lifespan has loaded settings."""
    settings: AppSettings | None = getattr(request.app.state, "settings", None)
    if settings is None:
        raise HTTPException(status_code=503, detail="Settings not loaded")
    return {
        "status": "ready",
        "environment": settings.environment,
        "max_depth": settings.inference.max_depth,
    }
