"""Request Routes — question/approval lifecycle and team claims.

Invariants:
    - Creation rejects ambiguous targeting (both or neither of user/team) with 400
    - Claim: first eligible member wins (200); later claimants get 409
      REQUEST_ALREADY_CLAIMED; non-members get 400 REQUEST_NOT_TEAM_MEMBER
    - Transitions out of CLOSED are rejected with 400

Design Decisions:
    - PATCH per action (claim/respond/approve/close) instead of a generic status
      PATCH: each action has its own preconditions
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskgraph.api.deps import get_current_user_id
from taskgraph.core.domain_types import NodeId, ProjectId, UserId
from taskgraph.infrastructure.database import get_db
from taskgraph.models.request import InfoRequest
from taskgraph.schemas.mutations import (
    ApproveBody, RequestCreate, RequestResponse, RespondBody,
)
from taskgraph.services.request_workflow import RequestWorkflow

router = APIRouter(prefix="/api/v1", tags=["requests"])


def _response(row: InfoRequest, unblocked: list[str] | None = None) -> RequestResponse:
    return RequestResponse.model_validate(row).model_copy(
        update={"unblocked_node_ids": list(unblocked or [])},
    )


@router.post(
    "/projects/{project_id}/requests", response_model=RequestResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_request(
    project_id: str,
    body: RequestCreate,
    user_id: UserId = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    row = await RequestWorkflow(db).create_request(
        ProjectId(project_id),
        NodeId(body.linked_node_id),
        body.question,
        from_user_id=user_id,
        to_user_id=UserId(body.to_user_id) if body.to_user_id else None,
        to_team=body.to_team,
    )
    return _response(row)


@router.patch("/requests/{request_id}/claim", response_model=RequestResponse)
async def claim_request(
    request_id: str,
    user_id: UserId = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Claim a team request for the caller."""
    row, unblocked = await RequestWorkflow(db).claim(request_id, user_id)
    return _response(row, unblocked)


@router.patch("/requests/{request_id}/respond", response_model=RequestResponse)
async def respond_request(
    request_id: str,
    body: RespondBody,
    user_id: UserId = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    row, unblocked = await RequestWorkflow(db).respond(request_id, body.response_draft)
    return _response(row, unblocked)


@router.patch("/requests/{request_id}/approve", response_model=RequestResponse)
async def approve_request(
    request_id: str,
    body: ApproveBody,
    user_id: UserId = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    row, unblocked = await RequestWorkflow(db).approve(
        request_id, user_id, body.response_final,
    )
    return _response(row, unblocked)


@router.patch("/requests/{request_id}/close", response_model=RequestResponse)
async def close_request(
    request_id: str,
    user_id: UserId = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    row, unblocked = await RequestWorkflow(db).close(request_id)
    return _response(row, unblocked)
