"""Config router — remote repository setup."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from commitpulse.api.deps import get_automation_service
from commitpulse.api.schemas.common import ErrorResponse
from commitpulse.api.schemas.execute import CommandResponse, RepositoryConfigRequest
from commitpulse.services.automation_service import AutomationService

router = APIRouter()


@router.post(
    "/repository",
    response_model=CommandResponse,
    responses={400: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def configure_repository(
    body: RepositoryConfigRequest,
    svc: AutomationService = Depends(get_automation_service),
) -> CommandResponse:
    result = await svc.execute("setup-remote", [body.url])
    return CommandResponse(**result.to_dict())
