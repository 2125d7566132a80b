"""
app/schemas/submission.py

Pydantic models for the code intake endpoint.
Missing codes are not rejected here: the endpoint answers 400 itself so the
response keeps the {ok, error} shape the web form expects.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, Union


class TelegramUserPayload(BaseModel):
    """Telegram identity forwarded by the web app (Telegram WebApp initData user)."""

    model_config = ConfigDict(extra="ignore")

    id: Optional[Union[int, str]] = Field(default=None, description="Telegram user id")
    username: Optional[str] = Field(default=None, description="Telegram @username")
    first_name: Optional[str] = Field(default=None, description="Telegram first name")

    @property
    def user_id(self) -> Optional[str]:
        if self.id is None or self.id == "" or self.id == 0:
            return None
        return str(self.id)


class LogCodeRequest(BaseModel):
    """Request schema for POST /api/log-code."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    code: Optional[str] = Field(default=None, description="Verification code typed on the website")
    tg_user: Optional[TelegramUserPayload] = Field(default=None, alias="tgUser")

    @field_validator("code", mode="before")
    @classmethod
    def coerce_code(cls, v):
        """Falsy values (None, "", 0) count as missing; other codes are kept as typed."""
        if not v or isinstance(v, bool):
            return None
        if isinstance(v, (int, float)):
            return str(v)
        return v


class LogCodeResponse(BaseModel):
    """Response schema for POST /api/log-code."""

    ok: bool = True
    error: Optional[str] = None
