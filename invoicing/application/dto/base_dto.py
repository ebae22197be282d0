"""
Base DTOs for the application layer.
Provides common patterns for request/response data transfer objects.
"""

from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict


class BaseDTO(BaseModel):
    """Base DTO with common configuration."""

    model_config = ConfigDict(
        # Allow population by field name or alias
        populate_by_name=True,
        # Convert enum values to their values
        use_enum_values=True,
        # Validate assignment
        validate_assignment=True,
        # Reject unknown fields
        extra="forbid",
    )


class RequestDTO(BaseDTO):
    """Base class for request DTOs."""
    pass


class OwnedRequestDTO(RequestDTO):
    """Request made on behalf of an authenticated owner."""

    owner_id: str = Field(..., min_length=1, description="ID of the user who owns the data")


class ResponseDTO(BaseDTO):
    """Base class for response DTOs."""

    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
