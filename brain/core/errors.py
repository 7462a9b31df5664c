"""
Exception taxonomy for the dispatcher and its stores.

Handler failures are not wrapped: whatever a handler (or a capability it
calls) raises reaches the caller of dispatch unchanged.
"""

from typing import Any, Dict, List

from pydantic import ValidationError as PydanticValidationError


class BrainError(Exception):
    """Base class for errors raised by the brain package."""


class ActionValidationError(BrainError):
    """An action, or a handler result, does not match its schema.

    Carries one entry per violated constraint in ``errors``.
    """

    def __init__(self, errors: List[Dict[str, Any]], prefix: str = "Invalid action"):
        self.errors = errors
        summary = "; ".join(f"{e['field']}: {e['message']}" if e.get('field') else e['message'] for e in errors)
        super().__init__(f"{prefix}: {summary}" if summary else prefix)

    @classmethod
    def from_pydantic(cls, exc: PydanticValidationError, prefix: str = "Invalid action") -> "ActionValidationError":
        """Build from a pydantic ValidationError, keeping every issue."""
        errors = []
        for issue in exc.errors():
            errors.append({
                "field": ".".join(str(part) for part in issue.get("loc", ())),
                "message": issue.get("msg", "invalid value"),
                "type": issue.get("type", "value_error"),
            })
        return cls(errors, prefix=prefix)


class ResultValidationError(ActionValidationError):
    """A handler returned a result that does not match its output schema."""


class RoutingError(BrainError):
    """A validated action kind has no entry in the routing table."""

    def __init__(self, kind: str):
        self.kind = kind
        super().__init__(f"Unknown action type: {kind}")


class StoreError(BrainError):
    """Base class for node store failures."""


class NodeNotFoundError(StoreError):
    """Raised when updating a node id the store does not hold."""

    def __init__(self, node_id: str):
        self.node_id = node_id
        super().__init__(f"Node {node_id} not found")


class StoreNotInitializedError(StoreError):
    """Raised when a store is used before connect()."""

    def __init__(self):
        super().__init__("Database not initialized")
