"""
app/api/log_code.py

Purpose: Verification code intake from the website

- Validates the body (code required)
- Hands off to the submission service
- Always answers in the {ok, error} shape the web form reads
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from typing import Optional

from app.core.context import ServiceContext, get_context
from app.core.exceptions import ValidationError
from app.core.logging import get_logger
from app.schemas.submission import LogCodeRequest, LogCodeResponse
from app.services.submission_service import submit_code
from utils.constants import ERROR_INTERNAL

logger = get_logger(__name__)
router = APIRouter()


@router.post("/log-code", response_model=LogCodeResponse, response_model_exclude_none=True)
async def log_code(request: Optional[LogCodeRequest] = None, ctx: ServiceContext = Depends(get_context)):
    """
    Receives a verification code from the website.

    Body:
        code: verification code (required)
        tgUser: {id, username, first_name} (optional)

    Returns:
        200 {ok: true}, 400 {ok: false, error} on a missing code,
        500 {ok: false, error} on unexpected failure
    """
    try:
        await submit_code(ctx, request or LogCodeRequest())
        return LogCodeResponse(ok=True)

    except ValidationError as e:
        return JSONResponse(
            status_code=e.status_code,
            content=LogCodeResponse(ok=False, error=e.message).model_dump(exclude_none=True)
        )

    except Exception as e:
        logger.error(f"Error /api/log-code: {e}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content=LogCodeResponse(ok=False, error=ERROR_INTERNAL).model_dump(exclude_none=True)
        )
