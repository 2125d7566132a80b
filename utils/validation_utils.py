"""
utils/validation_utils.py

Purpose: Input classification

- Phone-number heuristic for inbound chat text
- Start-command payload parsing
- Decision callback parsing
"""

import re
from typing import Optional, Tuple

MIN_PHONE_DIGITS = 10
VERIFY_PAYLOAD_PREFIX = "verify_"
CALLBACK_PATTERN = re.compile(r"^(approve|reject):(.+)$", re.DOTALL)


def count_digits(text: str) -> int:
    """Number of digit characters in text."""
    return len(re.sub(r"\D", "", text or ""))


def looks_like_phone(text: str) -> bool:
    """
    Loose phone-number check for free text.

    A leading "+" or at least 10 digits anywhere counts as a phone.
    No real format validation; false positives are accepted.

    Examples:
        "+639171234567" -> True
        "09171234567"   -> True
        "123456"        -> False
    """
    if not text:
        return False

    text = text.strip()
    if text.startswith("+"):
        return True

    return count_digits(text) >= MIN_PHONE_DIGITS


def parse_start_payload(text: str) -> Optional[str]:
    """
    Extracts the deep-link payload from a /start command.

    "/start verify_123" -> "verify_123"
    "/start"            -> None
    """
    if not text:
        return None

    parts = text.strip().split(maxsplit=1)
    if not parts or not parts[0].split("@", 1)[0] == "/start":
        return None

    if len(parts) < 2:
        return None

    return parts[1].strip() or None


def extract_verify_code(payload: Optional[str]) -> Optional[str]:
    """Returns the code carried by a "verify_<code>" payload, or None."""
    if not payload or not payload.startswith(VERIFY_PAYLOAD_PREFIX):
        return None
    return payload[len(VERIFY_PAYLOAD_PREFIX):]


def parse_callback_data(data: str) -> Optional[Tuple[str, str]]:
    """
    Splits decision callback data.

    "approve:42_1700000000000" -> ("approve", "42_1700000000000")
    """
    if not data:
        return None
    match = CALLBACK_PATTERN.match(data)
    if not match:
        return None
    return match.group(1), match.group(2)
