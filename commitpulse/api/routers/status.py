"""Status router — automation schedule and remote state."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from commitpulse.api.deps import get_automation_service
from commitpulse.api.schemas.stats import StatusData, StatusResponse
from commitpulse.services.automation_service import AutomationService

router = APIRouter()


@router.get("", response_model=StatusResponse)
async def get_status(
    svc: AutomationService = Depends(get_automation_service),
) -> StatusResponse:
    result = await svc.status()
    return StatusResponse(success=result.success, data=StatusData(**result.data))
