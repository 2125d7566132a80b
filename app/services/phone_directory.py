"""
app/services/phone_directory.py

Purpose: Last phone number seen per Telegram user

- Written whenever a user sends phone-like text
- Read when a code submission arrives, to enrich the reviewer notification
- Last write wins; entries never expire
"""

from typing import Dict, Optional

from app.core.logging import get_logger

logger = get_logger(__name__)


class PhoneDirectory:
    """In-memory user id -> phone mapping."""

    def __init__(self):
        self._phones: Dict[str, str] = {}

    def set(self, user_id: str, contact: str) -> None:
        self._phones[str(user_id)] = contact
        logger.info("Phone saved", extra={"user_id": str(user_id)})

    def get(self, user_id: Optional[str]) -> Optional[str]:
        if user_id is None:
            return None
        return self._phones.get(str(user_id))

    def __contains__(self, user_id: str) -> bool:
        return str(user_id) in self._phones

    def __len__(self) -> int:
        return len(self._phones)
