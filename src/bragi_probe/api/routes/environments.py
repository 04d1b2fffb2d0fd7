"""Environment status query endpoints."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, HTTPException, Request

from bragi_probe.registry.registry import EnvironmentRegistry

router = APIRouter(tags=["environments"])


def _get_registry(request: Request) -> EnvironmentRegistry:
    return EnvironmentRegistry(request.app.state.config)


@router.get("/environments")
async def list_environments(request: Request) -> Dict[str, Any]:
    """Probe every configured environment and return the aggregate report."""
    registry = _get_registry(request)
    report = await registry.list_environments()
    return report.to_dict()


@router.get("/environments/{name}")
async def get_environment(request: Request, name: str) -> Dict[str, Any]:
    registry = _get_registry(request)
    status = await registry.probe_one(name)
    if status is None:
        raise HTTPException(status_code=404, detail=f"Unknown environment: {name}")
    return status.to_dict()
