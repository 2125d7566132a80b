"""
app/models/submission.py

Purpose: Submission record

- Verification code reported through the web form
- Telegram identity of the submitter, when known
- Phone number from the submitter's last phone-like message
- Lifecycle status (see app/flow/states.py)
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field

from app.flow.states import SubmissionStatus, is_valid_transition

UNKNOWN_PHONE = "Unknown phone"


class Submission(BaseModel):
    """A verification code waiting for the reviewer's decision."""

    submission_id: str = Field(..., description="<userId|unknown>_<epoch ms>")
    user_id: Optional[str] = Field(default=None, description="Telegram user id, if the form supplied one")
    code: str = Field(..., min_length=1, description="Submitted verification code")
    contact: Optional[str] = Field(default=None, description="Last phone-like message from the user")
    username: str = ""
    first_name: str = ""
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    status: SubmissionStatus = SubmissionStatus.PENDING

    @property
    def contact_display(self) -> str:
        return self.contact or UNKNOWN_PHONE

    @property
    def is_pending(self) -> bool:
        return self.status == SubmissionStatus.PENDING

    def transition_to(self, status: SubmissionStatus) -> None:
        """
        Moves the submission to a new status.

        Raises:
            ValueError: If the transition is not allowed
        """
        if not is_valid_transition(self.status, status):
            raise ValueError(f"Invalid submission transition: {self.status.value} -> {status.value}")
        self.status = status
