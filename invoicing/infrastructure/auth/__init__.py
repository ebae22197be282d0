"""
Authentication infrastructure module.
Handles JWT creation and validation for API requests.
"""

from .jwt_handler import JWTHandler
from .dependencies import get_current_user_id, get_current_user_payload

__all__ = [
    "JWTHandler",
    "get_current_user_id",
    "get_current_user_payload",
]
