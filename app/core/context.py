"""
app/core/context.py

Purpose: Service context

- Owns every piece of volatile state (phones, submissions, timers)
- Built once per application and stored on app.state
- Injected into routes and bot handlers instead of module globals
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Request

from app.core.config import Settings
from app.services.expiry_service import ExpiryService
from app.services.phone_directory import PhoneDirectory
from app.services.presence_service import PresenceService
from app.services.scheduler import DeadlineScheduler, IntervalScheduler
from app.services.submission_store import SubmissionStore
from app.services.telegram_service import TelegramService


@dataclass
class ServiceContext:
    settings: Settings
    telegram: TelegramService
    phones: PhoneDirectory
    submissions: SubmissionStore
    deadlines: DeadlineScheduler
    intervals: IntervalScheduler
    presence: PresenceService
    expiry: ExpiryService

    @property
    def active_timers(self) -> int:
        return len(self.deadlines) + len(self.intervals)

    def cancel_timers(self) -> int:
        return self.deadlines.cancel_all() + self.intervals.cancel_all()

    async def shutdown_timers(self) -> int:
        """Cancels all timers and waits until none is still running."""
        return await self.deadlines.shutdown() + await self.intervals.shutdown()


def build_context(settings: Settings, telegram: Optional[TelegramService] = None) -> ServiceContext:
    """Wires the stores, schedulers and services for one application."""
    telegram = telegram or TelegramService(settings)
    deadlines = DeadlineScheduler("expiry")
    intervals = IntervalScheduler("presence")

    return ServiceContext(
        settings=settings,
        telegram=telegram,
        phones=PhoneDirectory(),
        submissions=SubmissionStore(),
        deadlines=deadlines,
        intervals=intervals,
        presence=PresenceService(intervals, telegram, settings.TYPING_INTERVAL_SECONDS),
        expiry=ExpiryService(deadlines, telegram, settings.MESSAGE_TTL_SECONDS),
    )


def get_context(request: Request) -> ServiceContext:
    """FastAPI dependency returning the application's ServiceContext."""
    return request.app.state.context
