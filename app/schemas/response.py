from pydantic import BaseModel
from typing import Optional, Any

class ErrorResponse(BaseModel):
    """
    Standard error response structure.
    """
    ok: bool = False
    error: str
    code: str
    details: Optional[Any] = None
