from __future__ import annotations

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    error: str = Field(..., description="Error kind, e.g. NotFound or BodyDecodeError")
    description: str = Field(..., description="Human readable error message")
