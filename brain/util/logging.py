"""
Structured logging for dispatch, validation, store and audit operations.
"""

import logging
import os
from typing import Any, Dict, List

DEFAULT_SENSITIVE_FIELDS = ['secret', 'password', 'token', 'api_key', 'embedding']


class StructuredLogger:
    """Structured logger for brain operations."""

    def __init__(self, name: str = "brain"):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())

        # Create handler if not already set
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def log_operation(self, operation: str, status: str, details: Dict[str, Any] = None, level: int = logging.INFO):
        """Log a structured operation."""
        message = f"Operation: {operation}, Status: {status}"
        if details:
            message += f", Details: {details}"

        self.logger.log(level, message)

    def log_action_dispatch(self, kind: str, payload: Dict[str, Any] = None, event_id: str = None):
        """Log the start of an action dispatch."""
        details = {"kind": kind}
        if event_id:
            details["event_id"] = event_id
        if payload is not None:
            details["payload"] = sanitize_payload(payload)

        self.log_operation(f"action.{kind}", "dispatched", details)

    def log_action_result(self, kind: str, event_id: str, status: str = "success", error: str = None):
        """Log the outcome of an action dispatch."""
        details = {"event_id": event_id}
        if error is not None:
            details["error"] = error[:200]

        level = logging.INFO if status == "success" else logging.WARNING
        self.log_operation(f"action.{kind}", status, details, level=level)

    def log_store_operation(self, operation: str, record_id: str = None, details: Dict[str, Any] = None, status: str = "success"):
        """Log a node/edge store operation."""
        log_details = {}
        if record_id is not None:
            log_details["record_id"] = record_id
        if details:
            log_details.update(details)

        self.log_operation(f"store.{operation}", status, log_details, level=logging.DEBUG)

    def log_audit_write(self, event_id: str, phase: str, status: str = "success", error: str = None):
        """Log an audit event write (phase is 'open' or 'close')."""
        details = {"event_id": event_id, "phase": phase}
        if error is not None:
            details["error"] = error[:200]

        level = logging.DEBUG if status == "success" else logging.ERROR
        self.log_operation("audit.write", status, details, level=level)

    def log_schema_validation_error(self, operation: str, errors: List[Any]):
        """Log schema validation errors with sanitized details."""
        sanitized_errors = []
        for error in errors:
            if isinstance(error, dict):
                sanitized_error = error.copy()
                # Offending input values may carry user content
                if 'value' in sanitized_error:
                    sanitized_error['value'] = "[REDACTED]"
                sanitized_errors.append(sanitized_error)
            else:
                sanitized_errors.append(str(error)[:100])

        log_details = {
            "operation": operation,
            "errors": sanitized_errors,
            "error_count": len(sanitized_errors)
        }
        self.log_operation("schema_validation.error", "rejected", log_details, level=logging.WARNING)

    # Standard logging methods for compatibility
    def info(self, message: str) -> None:
        """Log an info message."""
        self.logger.info(message)

    def warning(self, message: str) -> None:
        """Log a warning message."""
        self.logger.warning(message)

    def error(self, message: str) -> None:
        """Log an error message."""
        self.logger.error(message)

    def debug(self, message: str) -> None:
        """Log a debug message."""
        self.logger.debug(message)

    def exception(self, message: str) -> None:
        """Log an error message with the active traceback."""
        self.logger.exception(message)


# Global logger instance
logger = StructuredLogger()


def sanitize_payload(payload: Any, reveal_sensitive: bool = False, sensitive_fields: List[str] = None) -> Any:
    """Sanitize payloads for logging: redact sensitive keys, truncate long strings and lists."""
    if sensitive_fields is None:
        sensitive_fields = DEFAULT_SENSITIVE_FIELDS

    if isinstance(payload, dict):
        sanitized = {}
        for k, v in payload.items():
            if reveal_sensitive or k not in sensitive_fields:
                sanitized[k] = sanitize_payload(v, reveal_sensitive, sensitive_fields)
            else:
                sanitized[k] = "[REDACTED]"
        return sanitized
    elif isinstance(payload, str):
        # Truncate long strings
        return payload[:100] + "..." if len(payload) > 100 else payload
    elif isinstance(payload, list):
        items = [sanitize_payload(item, reveal_sensitive, sensitive_fields) for item in payload[:20]]
        if len(payload) > 20:
            items.append(f"... ({len(payload) - 20} more)")
        return items
    else:
        return payload
