"""View Routes — project graph, "now" view and org action center.

Scenario used throughout:
    A (alice) DEPENDS_ON B (bob); C (alice) is free; D (alice) waits on a request
"""

from uuid import uuid4

import pytest

from tests.services.graph_helpers import as_user, create_edge, create_node, create_request


@pytest.fixture
async def scenario(client, seed):
    a = await create_node(client, seed, "A")
    b = await create_node(client, seed, "B", owner=seed.bob)
    c = await create_node(client, seed, "C", manual_status="DOING")
    d = await create_node(client, seed, "D")
    await create_edge(client, seed, a, b)
    await create_request(client, seed, d, to_team="legal")
    return {"A": a, "B": b, "C": c, "D": d}


async def test_graph_has_computed_statuses(client, seed, scenario):
    res = await client.get(f"/api/v1/projects/{seed.project_id}/graph")

    assert res.status_code == 200
    data = res.json()
    statuses = {n["id"]: n["computed_status"] for n in data["nodes"]}
    assert statuses == {
        scenario["A"]: "BLOCKED",
        scenario["B"]: "TODO",
        scenario["C"]: "DOING",
        scenario["D"]: "WAITING",
    }
    owners = {n["id"]: n["owner_name"] for n in data["nodes"]}
    assert owners[scenario["B"]] == "Bob"
    assert [(e["from_node_id"], e["to_node_id"]) for e in data["edges"]] == [
        (scenario["A"], scenario["B"]),
    ]


async def test_graph_unknown_project_returns_404(client, seed):
    res = await client.get(f"/api/v1/projects/{uuid4()}/graph")
    assert res.status_code == 404


async def test_now_view_for_owner(client, seed, scenario):
    res = await client.get(
        f"/api/v1/projects/{seed.project_id}/now", headers=as_user(seed.alice),
    )
    data = res.json()
    assert [n["id"] for n in data["my_todos"]] == [scenario["C"]]
    assert {n["id"] for n in data["my_waiting"]} == {scenario["A"], scenario["D"]}
    assert data["im_blocking"] == []


async def test_now_view_for_blocker(client, seed, scenario):
    res = await client.get(
        f"/api/v1/projects/{seed.project_id}/now", headers=as_user(seed.bob),
    )
    data = res.json()
    assert [n["id"] for n in data["my_todos"]] == [scenario["B"]]
    [pair] = data["im_blocking"]
    assert pair["blocked_node"]["id"] == scenario["A"]
    assert pair["waiting_on_my_node"]["id"] == scenario["B"]


async def test_now_view_requires_user(client, seed):
    res = await client.get(f"/api/v1/projects/{seed.project_id}/now")
    assert res.status_code == 401


async def test_action_center_reasons(client, seed, scenario):
    res = await client.get(
        f"/api/v1/orgs/{seed.org_id}/action-center", headers=as_user(seed.alice),
    )

    assert res.status_code == 200
    data = res.json()
    assert [n["id"] for n in data["my_actions"]] == [scenario["C"]]
    reasons = {w["node"]["id"]: (w["reason"], w["responsible"]) for w in data["waiting"]}
    assert reasons == {
        scenario["A"]: ("Blocked by 1 task", ["Bob"]),
        scenario["D"]: ("Waiting for response", ["legal"]),
    }


async def test_action_center_blocking_summary(client, seed, scenario):
    res = await client.get(
        f"/api/v1/orgs/{seed.org_id}/action-center", headers=as_user(seed.bob),
    )
    [summary] = res.json()["blocking"]
    assert summary["node"]["id"] == scenario["B"]
    assert summary["blocked_count"] == 1
    assert summary["affected_project_ids"] == [seed.project_id]


async def test_action_center_unknown_org_returns_404(client, seed):
    res = await client.get(
        "/api/v1/orgs/no-such-org/action-center", headers=as_user(seed.alice),
    )
    assert res.status_code == 404
