"""
Action dispatcher.

Pipeline for every call: validate the raw action, open an audit event node,
route to the handler, validate the handler's result, close the audit event
with the outcome. Validation failures never reach the store; handler
failures are recorded on the event and re-raised unchanged.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, Type

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..actions import capture_thought, get_git_diffs, hello_action, query_nodes, vector_search
from ..util.logging import logger
from .errors import ActionValidationError, ResultValidationError, RoutingError
from .types import (
    ActionAdapter,
    BrainDependencies,
    CaptureThoughtOutput,
    GitDiffOutput,
    HelloOutput,
    Node,
    NodeInput,
    NodeUpdate,
    QueryNodesOutput,
    VectorSearchOutput,
)

EVENT_NODE_TYPE = "event"
STATUS_SUCCESS = "success"
STATUS_FAILURE = "failure"


@dataclass(frozen=True)
class ActionRoute:
    """Routing table entry: handler plus the result schema it must satisfy."""

    handler: Callable[[Any, BrainDependencies], Awaitable[Dict[str, Any]]]
    output_model: Type[BaseModel]
    description: str


ACTION_ROUTES: Dict[str, ActionRoute] = {
    "hello": ActionRoute(hello_action, HelloOutput, "Write a greeting node"),
    "capture_thought": ActionRoute(capture_thought, CaptureThoughtOutput, "Store an embedded thought with tags"),
    "query_nodes": ActionRoute(query_nodes, QueryNodesOutput, "List nodes matching a filter"),
    "vector_search": ActionRoute(vector_search, VectorSearchOutput, "Find nodes nearest to a query"),
    "git_diff": ActionRoute(get_git_diffs, GitDiffOutput, "Summarise unstaged git changes"),
}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _error_message(exc: BaseException) -> str:
    return str(exc) or exc.__class__.__name__


def validate_action(action: Any):
    """Validate raw input against the closed action union.

    Raises:
        ActionValidationError: listing every violated constraint
    """
    try:
        return ActionAdapter.validate_python(action)
    except PydanticValidationError as e:
        error = ActionValidationError.from_pydantic(e)
        logger.log_schema_validation_error("dispatch", error.errors)
        raise error from e


def validate_result(kind: str, output_model: Type[BaseModel], result: Any) -> Dict[str, Any]:
    """Check a handler result against its schema and return it as plain data."""
    try:
        output = output_model.model_validate(result)
    except PydanticValidationError as e:
        error = ResultValidationError.from_pydantic(e, prefix=f"Invalid {kind} result")
        logger.log_schema_validation_error(f"{kind}.result", error.errors)
        raise error from e

    # Optional fields left unset (e.g. search scores) are omitted
    return output.model_dump(exclude_none=True)


async def _close_audit_failure(deps: BrainDependencies, event: Node, error: str) -> None:
    """Record a failure on the event node. A failing write is logged, never raised."""
    try:
        await deps.store.update_node(event.id, NodeUpdate(metadata={
            **event.metadata,
            "error": error,
            "status": STATUS_FAILURE,
        }))
        logger.log_audit_write(event.id, "close")
    except Exception as audit_error:
        logger.log_audit_write(event.id, "close", status="failed", error=_error_message(audit_error))


async def brain(action: Any, deps: BrainDependencies) -> Dict[str, Any]:
    """
    Dispatch one untyped action.

    Args:
        action: Raw ``{"kind": ..., "payload": {...}}`` input
        deps: Store and text service for this call

    Returns:
        The validated, kind-specific result as a dict

    Raises:
        ActionValidationError: the action does not match its schema
        ResultValidationError: the handler's result does not match its schema
        RoutingError: the kind has no handler
        Exception: whatever the handler raised, unchanged
    """
    validated = validate_action(action)
    kind = validated.kind
    payload_input = validated.payload.model_dump(exclude_none=True)

    # Audit-open happens before the handler runs, whatever its outcome
    event = await deps.store.create_node(NodeInput(
        type=EVENT_NODE_TYPE,
        content=kind,
        metadata={
            "action": kind,
            "input": payload_input,
            "timestamp": _now(),
        },
    ))
    logger.log_audit_write(event.id, "open")
    logger.log_action_dispatch(kind, payload_input, event_id=event.id)

    try:
        route = ACTION_ROUTES.get(kind)
        if route is None:
            raise RoutingError(kind)

        result = await route.handler(validated.payload, deps)
        output = validate_result(kind, route.output_model, result)
    except Exception as e:
        message = _error_message(e)
        await _close_audit_failure(deps, event, message)
        logger.log_action_result(kind, event.id, status=STATUS_FAILURE, error=message)
        raise

    await deps.store.update_node(event.id, NodeUpdate(metadata={
        **event.metadata,
        "output": output,
        "status": STATUS_SUCCESS,
    }))
    logger.log_audit_write(event.id, "close")
    logger.log_action_result(kind, event.id)

    return output


dispatch = brain
