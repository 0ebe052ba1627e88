from pydantic import BaseModel
from typing import Optional, Any, Dict

class ErrorResponse(BaseModel):
    """
    Standard error response structure.
    """
    success: bool = False
    message: str
    code: str
    details: Optional[Any] = None

class MessageResponse(BaseModel):
    success: bool = True
    message: str

class UserResponse(MessageResponse):
    user: Dict[str, Any]

class OrderResponse(MessageResponse):
    order: Dict[str, Any]
