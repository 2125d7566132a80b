"""
utils/constants.py

Purpose: Centralized static content

- All user-facing and reviewer-facing messages
- Button labels and callback prefixes
- Parse modes

(Prevents hardcoding across the codebase)
"""

PARSE_MODE_HTML = "HTML"

# ============================================================
# USER CHAT
# ============================================================

VERIFY_CODE_MESSAGE = "Verification code: <b>{code}</b>\n\nPaki-type ang Telegram phone number mo."

WELCOME_MESSAGE = "Welcome! Paki-send ang phone number or code."

PHONE_SAVED_MESSAGE = "Phone saved! Kung may code ka mula sa website, i-send lang dito."

CODE_RECEIVED_MESSAGE = "Code received."

# ============================================================
# REVIEWER CHAT
# ============================================================

NEW_SUBMISSION_MESSAGE = (
    "🔔 New verification request\n\n"
    "👤 User: {first_name} (@{username})\n"
    "🆔 ID: {user_id}\n"
    "📱 Phone: {contact}\n\n"
    "🔑 Code: {code}"
)

APPROVED_MESSAGE = (
    "Approved submission:\n"
    "User: {first_name} (@{username})\n"
    "Phone: {contact}\n"
    "Code: {code}"
)

REJECTED_MESSAGE = "❌ Rejected submission of user ID: {user_id}"

BUTTON_APPROVE = "✅ Approve"
BUTTON_REJECT = "❌ Reject"

# ============================================================
# CALLBACK ANSWERS
# ============================================================

CALLBACK_APPROVED = "Approved"
CALLBACK_REJECTED = "Rejected"
CALLBACK_NOT_FOUND = "Not found or expired"
CALLBACK_UNKNOWN = "Unknown action"

# ============================================================
# HTTP
# ============================================================

ROOT_TEXT = "Bot + API online"
ERROR_CODE_REQUIRED = "Code required"
ERROR_INTERNAL = "Internal server error"
UNKNOWN_USER_ID = "unknown"
