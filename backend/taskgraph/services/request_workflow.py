"""Request Workflow — create, claim, respond, approve and close requests.

Invariants:
    - Every state change locks the request row (SELECT ... FOR UPDATE), re-reads
      it, re-runs the pure check, then writes and commits in one transaction
    - Two members claiming the same team request: exactly one wins, the other
      gets ConflictError REQUEST_ALREADY_CLAIMED
    - Field changes are computed by core.enforce_requests.apply_* and copied
      onto the row; the service never edits request fields by hand
    - Each transition reports nodes it unblocked (e.g. approval clearing WAITING)

Design Decisions:
    - Authorization (who may respond/approve/close) is enforced by the caller;
      only claim eligibility (team membership) is a graph rule checked here
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskgraph.core.domain_types import NodeId, ProjectId, UserId, OrgId
from taskgraph.core.errors import (
    ConflictError, ErrorContext, InvalidMutationError, ResourceNotFoundError,
)
from taskgraph.core.graph_model import GraphSnapshot, Request as CoreRequest
from taskgraph.core.compute_status import compute_all_statuses
from taskgraph.core.enforce_requests import (
    check_request_target, check_claim,
    validate_response, validate_approval, validate_close,
    apply_claim, apply_response, apply_approval, apply_close,
)
from taskgraph.core.status_transitions import newly_unblocked
from taskgraph.models.node import Node
from taskgraph.models.request import InfoRequest
from taskgraph.services.graph_snapshot import SqlSnapshotLoader, to_core_request

logger = logging.getLogger(__name__)

_CONFLICT_CODES = frozenset({"REQUEST_ALREADY_CLAIMED"})

# Core fields written back to the row after a pure transition.
_WRITABLE_FIELDS = (
    "status", "to_user_id", "to_team", "claimed_from_team", "claimed_at",
    "response_draft", "response_final", "approved_by_id", "approved_at",
)


class RequestWorkflow:
    """Request lifecycle for one request-scoped session."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.loader = SqlSnapshotLoader(db)

    async def create_request(
        self,
        project_id: ProjectId,
        linked_node_id: NodeId,
        question: str,
        from_user_id: UserId,
        to_user_id: UserId | None = None,
        to_team: str | None = None,
    ) -> InfoRequest:
        context = ErrorContext(project_id=project_id, node_id=linked_node_id)
        rejection = check_request_target(to_user_id, to_team)
        if rejection:
            raise InvalidMutationError.from_rejection(rejection, context)

        node = await self.db.get(Node, linked_node_id)
        if not node or node.project_id != project_id:
            raise ResourceNotFoundError("Node", linked_node_id, context)

        request = InfoRequest(
            org_id=node.org_id,
            project_id=project_id,
            linked_node_id=linked_node_id,
            question=question,
            from_user_id=from_user_id,
            to_user_id=to_user_id,
            to_team=to_team,
        )
        self.db.add(request)
        await self.db.commit()
        await self.db.refresh(request)
        logger.info(
            "Request created",
            extra={"request_id": request.id, "node_id": linked_node_id},
        )
        return request

    async def claim(
        self, request_id: str, claimant_id: UserId,
    ) -> tuple[InfoRequest, list[NodeId]]:
        row = await self._lock(request_id)
        teams = await self.loader.team_names_for_user(OrgId(row.org_id), claimant_id)
        current = to_core_request(row)
        self._reject_if(check_claim(current, claimant_id, teams), row)
        return await self._write(
            row, apply_claim(current, claimant_id, _now()), "claimed",
        )

    async def respond(
        self, request_id: str, response_draft: str,
    ) -> tuple[InfoRequest, list[NodeId]]:
        row = await self._lock(request_id)
        current = to_core_request(row)
        self._reject_if(validate_response(current), row)
        return await self._write(
            row, apply_response(current, response_draft), "responded",
        )

    async def approve(
        self, request_id: str, approver_id: UserId, response_final: str | None = None,
    ) -> tuple[InfoRequest, list[NodeId]]:
        row = await self._lock(request_id)
        current = to_core_request(row)
        self._reject_if(validate_approval(current, response_final), row)
        return await self._write(
            row, apply_approval(current, approver_id, response_final, _now()), "approved",
        )

    async def close(self, request_id: str) -> tuple[InfoRequest, list[NodeId]]:
        row = await self._lock(request_id)
        current = to_core_request(row)
        self._reject_if(validate_close(current), row)
        return await self._write(row, apply_close(current), "closed")

    # ─── Internals ───────────────────────────────────────────────

    async def _lock(self, request_id: str) -> InfoRequest:
        result = await self.db.execute(
            select(InfoRequest)
            .where(InfoRequest.id == request_id)
            .with_for_update()
            .execution_options(populate_existing=True),
        )
        row = result.scalar_one_or_none()
        if not row:
            raise ResourceNotFoundError("Request", request_id)
        return row

    def _reject_if(self, rejection: dict | None, row: InfoRequest) -> None:
        if not rejection:
            return
        context = ErrorContext(
            project_id=row.project_id, node_id=row.linked_node_id, request_id=row.id,
        )
        logger.info(
            f"Request change rejected: {rejection['error_code']}",
            extra={"request_id": row.id, "error_code": rejection["error_code"]},
        )
        if rejection["error_code"] in _CONFLICT_CODES:
            raise ConflictError(
                rejection["message"].removeprefix("ERROR: "),
                rejection["error_code"], context,
            )
        raise InvalidMutationError.from_rejection(rejection, context)

    async def _write(
        self, row: InfoRequest, updated: CoreRequest, action: str,
    ) -> tuple[InfoRequest, list[NodeId]]:
        before = await self.loader.load_project(ProjectId(row.project_id))
        after = GraphSnapshot.of(
            before.nodes,
            before.edges,
            (updated if r.id == updated.id else r for r in before.requests),
        )

        for name in _WRITABLE_FIELDS:
            value = getattr(updated, name)
            setattr(row, name, value.value if name == "status" else value)
        await self.db.commit()
        await self.db.refresh(row)

        unblocked = newly_unblocked(
            compute_all_statuses(before.nodes, before.edges, before.requests),
            compute_all_statuses(after.nodes, after.edges, after.requests),
        )
        logger.info(
            f"Request {action}",
            extra={"request_id": row.id, "node_id": row.linked_node_id},
        )
        return row, unblocked


def _now() -> datetime:
    return datetime.now(timezone.utc)
