"""API routes."""

from fastapi import APIRouter

from biz.routes import health, probes

api_router = APIRouter()

# Liveness / health (Docker healthcheck)
api_router.include_router(health.router, tags=["health"])

# Backend connectivity tests
api_router.include_router(probes.router, tags=["probes"])
