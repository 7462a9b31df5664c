"""
Response models for the HTTP API.

Request bodies for POST /brain are passed to the dispatcher untouched, so
only responses are modelled here.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, field_validator


class ValidationFieldError(BaseModel):
    field: str
    message: str


class ErrorResponse(BaseModel):
    error_type: str
    message: str


class ValidationErrorResponse(ErrorResponse):
    errors: List[ValidationFieldError]


class HealthResponse(BaseModel):
    status: str
    version: str
    store: str
    node_count: int


class EventSummary(BaseModel):
    id: str
    action: str
    status: Optional[str] = None
    input: Optional[Dict[str, Any]] = None
    output: Optional[Any] = None
    error: Optional[str] = None
    timestamp: Optional[str] = None
    created_at: str
    updated_at: str


class EventListResponse(BaseModel):
    events: List[EventSummary]
    count: int

    @field_validator('count')
    @classmethod
    def count_must_not_be_negative(cls, v):
        if v < 0:
            raise ValueError('count cannot be negative')
        return v
