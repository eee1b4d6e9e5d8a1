"""Request enforcement tests — targeting, transitions, claims and pure updates."""

from datetime import datetime, timezone

from taskgraph.core.domain_types import RequestStatus
from taskgraph.core.graph_model import Request
from taskgraph.core.enforce_requests import (
    ALLOWED_TRANSITIONS,
    check_request_target,
    check_transition,
    check_claim,
    validate_response,
    validate_approval,
    validate_close,
    apply_claim,
    apply_response,
    apply_approval,
    apply_close,
)

NOW = datetime(2026, 1, 1, tzinfo=timezone.utc)


def _code(error):
    return error["error_code"] if error else None


# --- Targeting ----------------------------------------------------------------

def test_target_exactly_one():
    assert check_request_target("u1", None) is None
    assert check_request_target(None, "legal") is None
    assert _code(check_request_target("u1", "legal")) == "REQUEST_TARGET_AMBIGUOUS"
    assert _code(check_request_target(None, None)) == "REQUEST_TARGET_MISSING"
    assert _code(check_request_target("", "")) == "REQUEST_TARGET_MISSING"


# --- Transitions --------------------------------------------------------------

def test_closed_is_terminal():
    assert ALLOWED_TRANSITIONS[RequestStatus.CLOSED] == frozenset()
    for target in RequestStatus:
        assert _code(check_transition(RequestStatus.CLOSED, target)) == "REQUEST_INVALID_TRANSITION"


def test_every_open_state_can_close():
    for status in (RequestStatus.OPEN, RequestStatus.RESPONDED, RequestStatus.APPROVED):
        assert validate_close(Request("r1", "n1", status)) is None


def test_responded_can_be_redrafted():
    assert validate_response(Request("r1", "n1", RequestStatus.RESPONDED)) is None


def test_approved_cannot_be_responded_again():
    error = validate_response(Request("r1", "n1", RequestStatus.APPROVED))
    assert _code(error) == "REQUEST_INVALID_TRANSITION"


def test_approval_needs_a_response():
    request = Request("r1", "n1")
    assert _code(validate_approval(request, None)) == "REQUEST_NO_RESPONSE"
    assert validate_approval(request, "final answer") is None
    drafted = Request("r1", "n1", RequestStatus.RESPONDED, response_draft="draft")
    assert validate_approval(drafted, None) is None


# --- Claims -------------------------------------------------------------------

def test_member_can_claim_team_request():
    request = Request("r1", "n1", to_team="legal")
    assert check_claim(request, "u1", ["legal", "ops"]) is None


def test_non_member_cannot_claim():
    request = Request("r1", "n1", to_team="legal")
    assert _code(check_claim(request, "u1", ["ops"])) == "REQUEST_NOT_TEAM_MEMBER"


def test_user_request_cannot_be_claimed():
    request = Request("r1", "n1", to_user_id="u2")
    assert _code(check_claim(request, "u1", ["legal"])) == "REQUEST_NOT_TEAM"


def test_closed_request_cannot_be_claimed():
    request = Request("r1", "n1", RequestStatus.CLOSED, to_team="legal")
    assert _code(check_claim(request, "u1", ["legal"])) == "REQUEST_CLOSED"


def test_second_claim_reports_already_claimed():
    request = Request("r1", "n1", to_team="legal")
    claimed = apply_claim(request, "u1", NOW)
    assert _code(check_claim(claimed, "u2", ["legal"])) == "REQUEST_ALREADY_CLAIMED"


# --- Pure transitions ---------------------------------------------------------

def test_apply_claim_converts_to_user_request():
    request = Request("r1", "n1", to_team="legal")
    claimed = apply_claim(request, "u1", NOW)
    assert claimed.to_user_id == "u1"
    assert claimed.to_team is None
    assert claimed.claimed_from_team == "legal"
    assert claimed.claimed_at == NOW
    assert claimed.status == RequestStatus.OPEN
    assert request.to_team == "legal"


def test_apply_response_sets_draft():
    responded = apply_response(Request("r1", "n1"), "here you go")
    assert responded.status == RequestStatus.RESPONDED
    assert responded.response_draft == "here you go"


def test_apply_approval_falls_back_to_draft():
    drafted = Request("r1", "n1", RequestStatus.RESPONDED, response_draft="draft")
    approved = apply_approval(drafted, "boss", None, NOW)
    assert approved.status == RequestStatus.APPROVED
    assert approved.response_final == "draft"
    assert approved.approved_by_id == "boss"
    assert approved.approved_at == NOW

    explicit = apply_approval(drafted, "boss", "final", NOW)
    assert explicit.response_final == "final"


def test_apply_close():
    assert apply_close(Request("r1", "n1")).status == RequestStatus.CLOSED
