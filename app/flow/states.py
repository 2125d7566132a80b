"""
app/flow/states.py

Purpose: Defines submission lifecycle states

- PENDING until the reviewer acts, then APPROVED or REJECTED
- Single source of truth for decision outcomes
- State transition validation
"""

from enum import Enum
from typing import Dict, List, Optional


class SubmissionStatus(str, Enum):
    """
    Lifecycle of a verification code submission.
    """

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class Decision(str, Enum):
    """
    Reviewer actions carried in inline button callback data.
    """

    APPROVE = "approve"
    REJECT = "reject"

    @property
    def resulting_status(self) -> SubmissionStatus:
        if self is Decision.APPROVE:
            return SubmissionStatus.APPROVED
        return SubmissionStatus.REJECTED


# Valid state transitions; terminal states have none
STATE_TRANSITIONS: Dict[SubmissionStatus, List[SubmissionStatus]] = {
    SubmissionStatus.PENDING: [
        SubmissionStatus.APPROVED,
        SubmissionStatus.REJECTED,
    ],
    SubmissionStatus.APPROVED: [],
    SubmissionStatus.REJECTED: [],
}


def is_valid_transition(from_state: SubmissionStatus, to_state: SubmissionStatus) -> bool:
    """
    Checks if a state transition is valid.

    Args:
        from_state: Current state
        to_state: Target state

    Returns:
        True if transition is allowed
    """
    return to_state in STATE_TRANSITIONS.get(from_state, [])


def parse_decision(value: str) -> Optional[Decision]:
    """Maps callback action text to a Decision, or None if unknown."""
    try:
        return Decision(value)
    except ValueError:
        return None
