from __future__ import annotations

from fastapi import APIRouter

from ..schemas import StatusResponse

router = APIRouter(prefix="", tags=["status"])


@router.get("/status", response_model=StatusResponse)
async def status():
    return StatusResponse()
