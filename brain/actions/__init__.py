"""
Built-in action handlers. Each takes a validated payload and the injected
dependencies and returns a plain result dict.
"""

from .capture import capture_thought
from .git_diff import get_git_diffs
from .hello import hello_action
from .query import query_nodes
from .vector_search import vector_search

__all__ = [
    'capture_thought',
    'get_git_diffs',
    'hello_action',
    'query_nodes',
    'vector_search',
]
