"""
app/api/pages.py

Purpose: Plain routes

- Liveness text at /
- Redirects to the Telegram web app and the public website
- Health summary of in-memory state
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, PlainTextResponse, RedirectResponse

from app.core.context import ServiceContext, get_context
from utils.constants import ROOT_TEXT

router = APIRouter()


def redirect_or_error(url, name: str):
    if not url:
        return PlainTextResponse(f"{name} missing", status_code=500)
    return RedirectResponse(url, status_code=302)


@router.get("/", response_class=PlainTextResponse, tags=["Health"])
async def root():
    return ROOT_TEXT


@router.get("/webapp")
async def webapp(ctx: ServiceContext = Depends(get_context)):
    return redirect_or_error(ctx.settings.WEBAPP_URL, "WEBAPP_URL")


@router.get("/website")
async def website(ctx: ServiceContext = Depends(get_context)):
    return redirect_or_error(ctx.settings.WEBSITE_URL, "WEBSITE_URL")


@router.get("/health", tags=["Health"])
async def health_check(ctx: ServiceContext = Depends(get_context)):
    """
    Health check with counts of in-memory state.
    """
    return JSONResponse(content={
        "status": "healthy",
        "environment": ctx.settings.ENVIRONMENT,
        "telegram_mode": ctx.settings.TELEGRAM_MODE,
        "pending_submissions": len(ctx.submissions),
        "known_phones": len(ctx.phones),
        "active_timers": ctx.active_timers,
    })
