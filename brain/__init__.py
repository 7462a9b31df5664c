"""
Brain - schema-validated action dispatcher over a node/vector store.

Every dispatched action is recorded as an audit event node before its handler
runs and closed with the outcome afterwards.
"""

from .core.config import VERSION
from .core.dispatcher import BrainDependencies, brain, dispatch
from .core.errors import (
    ActionValidationError,
    BrainError,
    NodeNotFoundError,
    ResultValidationError,
    RoutingError,
    StoreError,
    StoreNotInitializedError,
)

__version__ = VERSION

__all__ = [
    'ActionValidationError',
    'BrainDependencies',
    'BrainError',
    'NodeNotFoundError',
    'ResultValidationError',
    'RoutingError',
    'StoreError',
    'StoreNotInitializedError',
    'brain',
    'dispatch',
    '__version__',
]
