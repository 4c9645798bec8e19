"""Unified error handling — CommitPulseError + RequestValidationError → JSON."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from commitpulse.exceptions import (
    CommandNotAllowedError,
    CommandTimeoutError,
    CommitPulseError,
    InvalidParametersError,
    RemoteConfigError,
    RepositoryUnavailableError,
)

_STATUS_MAP: dict[type[CommitPulseError], int] = {
    CommandNotAllowedError: 400,
    InvalidParametersError: 400,
    RemoteConfigError: 400,
    RepositoryUnavailableError: 503,
    CommandTimeoutError: 504,
}


async def _commitpulse_error_handler(_request: Request, exc: CommitPulseError) -> JSONResponse:
    status = 500
    for cls in type(exc).__mro__:
        if cls in _STATUS_MAP:
            status = _STATUS_MAP[cls]
            break
    return JSONResponse(status_code=status, content={"success": False, "error": str(exc)})


async def _validation_error_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    messages = []
    for err in exc.errors():
        loc = " → ".join(str(part) for part in err["loc"])
        messages.append(f"{loc}: {err['msg']}")
    return JSONResponse(
        status_code=422,
        content={"success": False, "error": "; ".join(messages)},
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register exception handlers on the app."""
    app.add_exception_handler(CommitPulseError, _commitpulse_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_error_handler)  # type: ignore[arg-type]
