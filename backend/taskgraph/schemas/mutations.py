"""Mutation Schemas — request bodies and responses for node/edge/request writes.

Invariants:
    - RequestCreate enforces user XOR team targeting at the API boundary
    - Text inputs are stripped and must be non-empty
    - Graph invariants (cycles, duplicates, claims) are NOT checked here; they
      need the snapshot and live in core/enforce_*

Design Decisions:
    - field_validator for side-effect-free transforms (strip): keeps models pure
    - Responses carry the ids of nodes whose status changed so the caller can
      trigger notifications without recomputing
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from taskgraph.core.domain_types import (
    ComputedStatus, EdgeRelation, ManualStatus, NodeType, RequestStatus,
)


def _strip_non_empty(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("cannot be empty or whitespace")
    return v


# --- Nodes --------------------------------------------------------------------

class NodeCreate(BaseModel):
    title: str = Field(min_length=1, max_length=500)
    type: NodeType = NodeType.TASK
    manual_status: ManualStatus = ManualStatus.TODO
    priority: int = Field(0, ge=0, le=10)
    due_at: datetime | None = None
    owner_id: str | None = None
    owner_ids: list[str] = []
    team_ids: list[str] = []

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        return _strip_non_empty(v)


class NodeUpdate(BaseModel):
    """Partial update; omitted fields are left untouched."""
    title: str | None = Field(None, min_length=1, max_length=500)
    manual_status: ManualStatus | None = None
    priority: int | None = Field(None, ge=0, le=10)
    due_at: datetime | None = None
    owner_id: str | None = None
    owner_ids: list[str] | None = None
    team_ids: list[str] | None = None


class StatusChangeOut(BaseModel):
    node_id: str
    before: ComputedStatus
    after: ComputedStatus


class NodeUpdated(BaseModel):
    id: str
    manual_status: ManualStatus
    status_changes: list[StatusChangeOut] = []
    unblocked_node_ids: list[str] = []


# --- Edges --------------------------------------------------------------------

class EdgeCreate(BaseModel):
    from_node_id: str
    to_node_id: str
    relation: EdgeRelation


class EdgeUpdate(BaseModel):
    relation: EdgeRelation


class EdgeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    project_id: str
    from_node_id: str
    to_node_id: str
    relation: EdgeRelation
    created_at: datetime


class EdgeDeleted(BaseModel):
    success: bool = True
    unblocked_node_ids: list[str] = []


# --- Requests -----------------------------------------------------------------

class RequestCreate(BaseModel):
    """Targets exactly one of to_user_id / to_team."""
    linked_node_id: str
    question: str = Field(min_length=1, max_length=5000)
    to_user_id: str | None = None
    to_team: str | None = Field(None, max_length=100)

    @field_validator("question")
    @classmethod
    def strip_question(cls, v: str) -> str:
        return _strip_non_empty(v)

    @model_validator(mode="after")
    def exactly_one_target(self) -> "RequestCreate":
        if bool(self.to_user_id) == bool(self.to_team):
            raise ValueError("exactly one of to_user_id or to_team must be set")
        return self


class RespondBody(BaseModel):
    response_draft: str = Field(min_length=1, max_length=10_000)

    @field_validator("response_draft")
    @classmethod
    def strip_draft(cls, v: str) -> str:
        return _strip_non_empty(v)


class ApproveBody(BaseModel):
    """If response_final is omitted the current draft is finalised."""
    response_final: str | None = Field(None, max_length=10_000)


class RequestResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    project_id: str
    linked_node_id: str
    question: str
    from_user_id: str
    to_user_id: str | None = None
    to_team: str | None = None
    claimed_from_team: str | None = None
    status: RequestStatus
    response_draft: str | None = None
    response_final: str | None = None
    approved_by_id: str | None = None
    approved_at: datetime | None = None
    claimed_at: datetime | None = None
    created_at: datetime
    unblocked_node_ids: list[str] = []
