from typing import Optional, Any

class RelayError(Exception):
    """
    Base exception for the code relay application.
    """
    def __init__(self, message: str, code: str = "INTERNAL_ERROR", status_code: int = 500, details: Optional[Any] = None):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)

class ConfigurationError(RelayError):
    """
    Raised on startup when required configuration is missing or invalid.
    """
    def __init__(self, message: str = "Invalid configuration", details: Optional[Any] = None):
        super().__init__(message, code="CONFIGURATION_ERROR", status_code=500, details=details)

class ValidationError(RelayError):
    """
    Raised when input validation fails.
    """
    def __init__(self, message: str = "Validation error", details: Optional[Any] = None):
        super().__init__(message, code="VALIDATION_ERROR", status_code=400, details=details)

class SubmissionNotFoundError(RelayError):
    """
    Raised when a submission id is unknown, expired or already decided.
    """
    def __init__(self, message: str = "Not found or expired", details: Optional[Any] = None):
        super().__init__(message, code="NOT_FOUND", status_code=404, details=details)

class DuplicateSubmissionError(RelayError):
    """
    Raised when a submission id is already present in the store.
    """
    def __init__(self, message: str = "Submission already exists", details: Optional[Any] = None):
        super().__init__(message, code="DUPLICATE_SUBMISSION", status_code=409, details=details)

class TransportError(RelayError):
    """
    Raised when a caller escalates a failed Telegram call.
    """
    def __init__(self, message: str = "Telegram request failed", details: Optional[Any] = None):
        super().__init__(message, code="TRANSPORT_ERROR", status_code=502, details=details)
