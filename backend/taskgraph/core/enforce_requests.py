"""Request Enforcement — targeting, lifecycle transitions and team claims.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - check_* return error dict on violation, None on success
    - apply_* return a NEW Request (dataclasses.replace), input untouched
    - A request targets a user XOR a team
    - Lifecycle: OPEN -> RESPONDED -> APPROVED -> CLOSED; CLOSED is terminal
      and reachable from every other state; RESPONDED may be re-drafted
    - Claim converts a team request into a user request in one step:
      to_user_id = claimant, to_team cleared, claimed_from_team recorded

Design Decisions:
    - claimed_from_team kept after a claim: lets a second claimant see
      "already claimed" instead of "not a team request"
    - Membership passed in as team names: the storage layer resolves teams,
      the core only compares
"""

from dataclasses import replace
from datetime import datetime
from typing import Iterable

from taskgraph.core.domain_types import UserId, RequestStatus
from taskgraph.core.graph_model import Request

ALLOWED_TRANSITIONS: dict[RequestStatus, frozenset[RequestStatus]] = {
    RequestStatus.OPEN: frozenset({
        RequestStatus.RESPONDED, RequestStatus.APPROVED, RequestStatus.CLOSED,
    }),
    RequestStatus.RESPONDED: frozenset({
        RequestStatus.RESPONDED, RequestStatus.APPROVED, RequestStatus.CLOSED,
    }),
    RequestStatus.APPROVED: frozenset({RequestStatus.CLOSED}),
    RequestStatus.CLOSED: frozenset(),
}


def check_request_target(
    to_user_id: UserId | None, to_team: str | None,
) -> dict | None:
    """Exactly one of user/team must be set."""
    if to_user_id and to_team:
        return _error(
            "REQUEST_TARGET_AMBIGUOUS",
            "A request targets either a user or a team, not both.",
        )
    if not to_user_id and not to_team:
        return _error(
            "REQUEST_TARGET_MISSING",
            "A request must target a user or a team.",
        )
    return None


def check_transition(
    current: RequestStatus, target: RequestStatus,
) -> dict | None:
    if target not in ALLOWED_TRANSITIONS[current]:
        return _error(
            "REQUEST_INVALID_TRANSITION",
            f"Cannot move request from {current.value} to {target.value}.",
        )
    return None


def check_claim(
    request: Request, claimant_id: UserId, claimant_teams: Iterable[str],
) -> dict | None:
    """Claim eligibility. Re-run inside the write transaction."""
    if request.status == RequestStatus.CLOSED:
        return _error("REQUEST_CLOSED", "Request is closed.")
    if request.claimed_from_team is not None:
        return _error("REQUEST_ALREADY_CLAIMED", "Request already claimed.")
    if not request.is_team_targeted:
        return _error("REQUEST_NOT_TEAM", "This is not a team request.")
    if request.to_team not in set(claimant_teams):
        return _error(
            "REQUEST_NOT_TEAM_MEMBER",
            "You are not a member of this request's team.",
        )
    return None


def check_response_available(
    request: Request, response_final: str | None,
) -> dict | None:
    """Approval needs an explicit final response or an existing draft."""
    if not (response_final or request.response_draft):
        return _error(
            "REQUEST_NO_RESPONSE",
            "No response available to approve. Please respond first.",
        )
    return None


# --- Composite validators -----------------------------------------------------

def validate_response(request: Request) -> dict | None:
    return check_transition(request.status, RequestStatus.RESPONDED)


def validate_approval(request: Request, response_final: str | None) -> dict | None:
    return (
        check_transition(request.status, RequestStatus.APPROVED)
        or check_response_available(request, response_final)
    )


def validate_close(request: Request) -> dict | None:
    return check_transition(request.status, RequestStatus.CLOSED)


# --- Pure transitions ---------------------------------------------------------

def apply_claim(request: Request, claimant_id: UserId, now: datetime) -> Request:
    return replace(
        request,
        to_user_id=claimant_id,
        to_team=None,
        claimed_from_team=request.to_team,
        claimed_at=now,
    )


def apply_response(request: Request, response_draft: str) -> Request:
    return replace(
        request, response_draft=response_draft, status=RequestStatus.RESPONDED,
    )


def apply_approval(
    request: Request,
    approver_id: UserId,
    response_final: str | None,
    now: datetime,
) -> Request:
    return replace(
        request,
        status=RequestStatus.APPROVED,
        response_final=response_final or request.response_draft,
        approved_by_id=approver_id,
        approved_at=now,
    )


def apply_close(request: Request) -> Request:
    return replace(request, status=RequestStatus.CLOSED)


# --- Helper -------------------------------------------------------------------

def _error(code: str, message: str) -> dict:
    """Construct a standard error dict."""
    return {
        "status": "error",
        "error_code": code,
        "message": f"ERROR: {message}",
    }
