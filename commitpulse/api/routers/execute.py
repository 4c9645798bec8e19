"""Execute router — whitelisted commands run through the automation service."""

from __future__ import annotations

from fastapi import APIRouter, Body, Depends

from commitpulse.api.deps import get_automation_service
from commitpulse.api.schemas.common import ErrorResponse
from commitpulse.api.schemas.execute import CommandResponse, ExecuteRequest
from commitpulse.services.automation_service import AutomationService

router = APIRouter()


@router.post(
    "/{command}",
    response_model=CommandResponse,
    responses={
        400: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
        504: {"model": ErrorResponse},
    },
)
async def execute_command(
    command: str,
    body: ExecuteRequest | None = Body(None),
    svc: AutomationService = Depends(get_automation_service),
) -> CommandResponse:
    body = body or ExecuteRequest()
    result = await svc.execute(command, body.args, push=body.push)
    return CommandResponse(**result.to_dict())
