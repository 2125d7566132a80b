"""
app/services/submission_store.py

Purpose: Pending submissions keyed by submission id

- Created on code intake
- Retired (consumed) when the reviewer decides
- Optional age-based eviction for long-running deployments
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from app.core.exceptions import DuplicateSubmissionError
from app.core.logging import get_logger
from app.models.submission import Submission

logger = get_logger(__name__)


class SubmissionStore:
    """In-memory submission table."""

    def __init__(self):
        self._submissions: Dict[str, Submission] = {}

    def create(self, submission: Submission) -> Submission:
        """
        Stores a new submission.

        Raises:
            DuplicateSubmissionError: If the id is already present
        """
        if submission.submission_id in self._submissions:
            raise DuplicateSubmissionError(details={"submission_id": submission.submission_id})

        self._submissions[submission.submission_id] = submission
        return submission

    def get(self, submission_id: str) -> Optional[Submission]:
        return self._submissions.get(submission_id)

    def consume(self, submission_id: str) -> Optional[Submission]:
        """Removes and returns a submission; None if absent."""
        return self._submissions.pop(submission_id, None)

    def pending_for(self, user_id: Optional[str]) -> List[Submission]:
        """Pending submissions for one user, oldest first."""
        if user_id is None:
            return []
        return sorted(
            (s for s in self._submissions.values() if s.user_id == user_id and s.is_pending),
            key=lambda s: s.created_at
        )

    def purge_expired(self, ttl_seconds: float, now: Optional[datetime] = None) -> List[Submission]:
        """
        Evicts submissions created more than ttl_seconds ago.

        Returns:
            The evicted submissions
        """
        now = now or datetime.now(timezone.utc)
        cutoff = now - timedelta(seconds=ttl_seconds)

        expired = [s for s in self._submissions.values() if s.created_at < cutoff]
        for submission in expired:
            del self._submissions[submission.submission_id]

        if expired:
            logger.info(f"Evicted {len(expired)} expired submission(s)")

        return expired

    def __contains__(self, submission_id: str) -> bool:
        return submission_id in self._submissions

    def __len__(self) -> int:
        return len(self._submissions)
