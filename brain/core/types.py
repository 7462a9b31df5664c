"""
Schemas for store records, dispatched actions and action results.

Actions form a closed discriminated union on ``kind``; each variant carries
its own payload model. Result models are checked by the dispatcher after
the handler returns.
"""

import uuid
from dataclasses import dataclass
from typing import TYPE_CHECKING, Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field, JsonValue, StrictFloat, StrictInt, TypeAdapter, field_validator

if TYPE_CHECKING:
    from ..store.base import NodeStore
    from ..vector.text_service import TextService

Number = Union[StrictInt, StrictFloat]
Metadata = Dict[str, JsonValue]

ACTION_KINDS = ["hello", "capture_thought", "query_nodes", "vector_search", "git_diff"]


def _check_uuid(value: str) -> str:
    try:
        uuid.UUID(value)
    except (ValueError, AttributeError, TypeError):
        raise ValueError(f"'{value}' is not a valid uuid")
    return value


# Store records

class Node(BaseModel):
    id: str
    type: str
    content: str
    metadata: Metadata = Field(default_factory=dict)
    embedding: List[float] = Field(default_factory=list)
    created_at: str
    updated_at: str


class NodeInput(BaseModel):
    type: str
    content: str
    metadata: Optional[Metadata] = None
    embedding: Optional[List[float]] = None


class NodeUpdate(BaseModel):
    """Merge-patch for a node: unset fields are left unchanged."""
    content: Optional[str] = None
    metadata: Optional[Metadata] = None
    embedding: Optional[List[float]] = None


class Edge(BaseModel):
    id: str
    from_id: str
    to_id: str
    type: str
    metadata: Metadata = Field(default_factory=dict)
    created_at: str


class AiSuggestion(BaseModel):
    suggestion: str
    confidence: float = Field(ge=0, le=1)


# Action payloads

class HelloPayload(BaseModel):
    name: Optional[str] = None


class CaptureThoughtPayload(BaseModel):
    text: str
    tags: Optional[List[str]] = None

    @field_validator('text')
    @classmethod
    def text_must_not_be_empty(cls, v):
        if not v:
            raise ValueError('text cannot be empty')
        return v


class QueryNodesPayload(BaseModel):
    filter: Optional[Dict[str, Any]] = None
    limit: Optional[Number] = None

    @field_validator('limit')
    @classmethod
    def limit_must_be_positive(cls, v):
        if v is not None and v <= 0:
            raise ValueError('limit must be positive')
        return v


class VectorSearchPayload(BaseModel):
    query: str
    limit: Number = 10

    @field_validator('query')
    @classmethod
    def query_must_not_be_empty(cls, v):
        if not v:
            raise ValueError('query cannot be empty')
        return v

    @field_validator('limit')
    @classmethod
    def limit_must_be_positive(cls, v):
        if v <= 0:
            raise ValueError('limit must be positive')
        return v


class GitDiffPayload(BaseModel):
    pass


# Actions

class HelloAction(BaseModel):
    kind: Literal["hello"]
    payload: HelloPayload


class CaptureThoughtAction(BaseModel):
    kind: Literal["capture_thought"]
    payload: CaptureThoughtPayload


class QueryNodesAction(BaseModel):
    kind: Literal["query_nodes"]
    payload: QueryNodesPayload


class VectorSearchAction(BaseModel):
    kind: Literal["vector_search"]
    payload: VectorSearchPayload


class GitDiffAction(BaseModel):
    kind: Literal["git_diff"]
    payload: GitDiffPayload


Action = Annotated[
    Union[HelloAction, CaptureThoughtAction, QueryNodesAction, VectorSearchAction, GitDiffAction],
    Field(discriminator="kind"),
]

ActionAdapter = TypeAdapter(Action)


# Action results

class HelloOutput(BaseModel):
    message: str
    node_id: str

    @field_validator('node_id')
    @classmethod
    def node_id_must_be_uuid(cls, v):
        return _check_uuid(v)


class CaptureThoughtOutput(BaseModel):
    node_id: str
    message: str

    @field_validator('node_id')
    @classmethod
    def node_id_must_be_uuid(cls, v):
        return _check_uuid(v)


class NodeSummary(BaseModel):
    id: str
    type: str
    content: str
    created_at: str

    @field_validator('id')
    @classmethod
    def id_must_be_uuid(cls, v):
        return _check_uuid(v)


class QueryNodesOutput(BaseModel):
    nodes: List[NodeSummary]
    count: int = Field(ge=0)


class SearchHit(BaseModel):
    id: str
    content: str
    score: Optional[float] = None

    @field_validator('id')
    @classmethod
    def id_must_be_uuid(cls, v):
        return _check_uuid(v)


class VectorSearchOutput(BaseModel):
    results: List[SearchHit]
    count: int = Field(ge=0)


class GitDiffFile(BaseModel):
    filename: str
    status: Literal["added", "modified", "deleted"]
    additions: int
    deletions: int
    patch: str


class GitDiffOutput(BaseModel):
    files: List[GitDiffFile]
    total_files: int
    total_additions: int
    total_deletions: int


ActionOutput = Union[HelloOutput, CaptureThoughtOutput, QueryNodesOutput, VectorSearchOutput, GitDiffOutput]


@dataclass
class BrainDependencies:
    """Capabilities handed to every dispatch call."""

    store: "NodeStore"
    """Node/edge store with vector lookup"""

    text_service: "TextService"
    """Embedding (and suggestion/refinement) provider"""
