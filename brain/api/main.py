"""
FastAPI application exposing the dispatcher.
"""

from typing import Any, Dict, Optional

from fastapi import Body, Depends, FastAPI, Query
from fastapi.responses import JSONResponse

from ..core.config import VERSION, debug_enabled
from ..core.errors import ActionValidationError, ResultValidationError
from ..util.logging import logger
from .schemas import (
    ErrorResponse,
    EventListResponse,
    EventSummary,
    HealthResponse,
    ValidationErrorResponse,
    ValidationFieldError,
)
from .service import DEFAULT_EVENT_LIMIT, BrainService, get_brain_service

# Initialize the FastAPI application
app = FastAPI(
    title="Brain Dispatcher API",
    version=VERSION,
    description="Schema-validated action dispatcher with audited node storage",
    docs_url="/docs" if debug_enabled() else None,
    redoc_url="/redoc" if debug_enabled() else None
)


@app.post("/brain", responses={422: {"model": ValidationErrorResponse}, 500: {"model": ErrorResponse}})
async def brain_endpoint(action: Any = Body(...), service: BrainService = Depends(get_brain_service)):
    """Dispatch one action and return its result."""
    try:
        return await service.handle_brain_request(action)
    except ResultValidationError as e:
        # Handler produced a malformed result
        logger.error(f"Action returned an invalid result: {e}")
        body = ErrorResponse(error_type="ACTION_FAILED", message=str(e))
        return JSONResponse(status_code=500, content=body.model_dump())
    except ActionValidationError as e:
        body = ValidationErrorResponse(
            error_type="VALIDATION_ERROR",
            message=str(e),
            errors=[ValidationFieldError(field=err.get("field", ""), message=err["message"]) for err in e.errors],
        )
        return JSONResponse(status_code=422, content=body.model_dump())
    except Exception as e:
        logger.error(f"Action failed: {e}")
        body = ErrorResponse(error_type="ACTION_FAILED", message=str(e) or e.__class__.__name__)
        return JSONResponse(status_code=500, content=body.model_dump())


@app.get("/health", response_model=HealthResponse)
async def health_check_endpoint(service: BrainService = Depends(get_brain_service)):
    """Check system health."""
    try:
        node_count = await service.count_nodes()
        status = "healthy"
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        node_count = 0
        status = "unhealthy"

    return HealthResponse(
        status=status,
        version=VERSION,
        store=service.store_name,
        node_count=node_count
    )


@app.get("/events", response_model=EventListResponse)
async def list_events_endpoint(
    status: Optional[str] = None,
    limit: int = Query(DEFAULT_EVENT_LIMIT, ge=1, le=1000),
    service: BrainService = Depends(get_brain_service),
):
    """List recent audit events, newest first."""
    events = await service.list_events(status=status, limit=limit)
    return EventListResponse(events=[EventSummary(**event) for event in events], count=len(events))


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Handle all unhandled exceptions."""
    logger.error(f"Unhandled exception: {exc}")
    content: Dict[str, Any] = {"error_type": "INTERNAL_ERROR", "message": "Internal server error"}
    if debug_enabled():
        content["debug"] = str(exc)
    return JSONResponse(status_code=500, content=content)
