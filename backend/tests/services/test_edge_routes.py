"""Edge Routes — creation guards, relation changes and unblock reporting.

Invariants:
    - Self-loops, duplicates and DEPENDS_ON cycles → 400, nothing written
    - Cycle rejections carry the offending path in error.details.cycle
    - Deleting an edge reports the nodes it unblocked
"""

from uuid import uuid4

from tests.services.graph_helpers import as_user, create_edge, create_node


async def _edge_count(client, seed) -> int:
    res = await client.get(f"/api/v1/projects/{seed.project_id}/graph")
    return len(res.json()["edges"])


async def test_create_edge_returns_201(client, seed):
    a = await create_node(client, seed, "A")
    b = await create_node(client, seed, "B")

    res = await create_edge(client, seed, a, b)

    assert res.status_code == 201
    data = res.json()
    assert data["from_node_id"] == a
    assert data["to_node_id"] == b
    assert data["relation"] == "DEPENDS_ON"
    assert data["project_id"] == seed.project_id


async def test_cycle_rejected_with_path(client, seed):
    a = await create_node(client, seed, "A")
    b = await create_node(client, seed, "B")
    c = await create_node(client, seed, "C")
    await create_edge(client, seed, a, b)
    await create_edge(client, seed, b, c)

    res = await create_edge(client, seed, c, a)

    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "EDGE_CYCLE"
    assert error["details"]["cycle"] == [a, b, c]
    assert await _edge_count(client, seed) == 2


async def test_back_edge_of_other_relation_allowed(client, seed):
    a = await create_node(client, seed, "A")
    b = await create_node(client, seed, "B")
    await create_edge(client, seed, a, b)

    res = await create_edge(client, seed, b, a, relation="HANDOFF_TO")
    assert res.status_code == 201


async def test_self_loop_rejected(client, seed):
    a = await create_node(client, seed, "A")
    res = await create_edge(client, seed, a, a, relation="HANDOFF_TO")
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "EDGE_SELF_LOOP"


async def test_duplicate_rejected(client, seed):
    a = await create_node(client, seed, "A")
    b = await create_node(client, seed, "B")
    await create_edge(client, seed, a, b, relation="NEEDS_INFO_FROM")

    res = await create_edge(client, seed, a, b, relation="NEEDS_INFO_FROM")
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "EDGE_DUPLICATE"


async def test_unknown_endpoint_rejected(client, seed):
    a = await create_node(client, seed, "A")
    ghost = str(uuid4())
    res = await create_edge(client, seed, a, ghost)
    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "EDGE_NODE_NOT_FOUND"
    assert error["details"]["missing"] == [ghost]


async def test_unknown_project_returns_404(client, seed):
    res = await client.post(
        f"/api/v1/projects/{uuid4()}/edges",
        json={"from_node_id": "x", "to_node_id": "y", "relation": "DEPENDS_ON"},
        headers=as_user(seed.alice),
    )
    assert res.status_code == 404


async def test_invalid_relation_is_validation_error(client, seed):
    a = await create_node(client, seed, "A")
    b = await create_node(client, seed, "B")
    res = await create_edge(client, seed, a, b, relation="BLOCKS")
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_change_relation(client, seed):
    a = await create_node(client, seed, "A")
    b = await create_node(client, seed, "B")
    edge = (await create_edge(client, seed, a, b, relation="HANDOFF_TO")).json()

    res = await client.patch(
        f"/api/v1/edges/{edge['id']}",
        json={"relation": "DEPENDS_ON"}, headers=as_user(seed.alice),
    )
    assert res.status_code == 200
    assert res.json()["relation"] == "DEPENDS_ON"


async def test_change_relation_into_cycle_rejected(client, seed):
    a = await create_node(client, seed, "A")
    b = await create_node(client, seed, "B")
    await create_edge(client, seed, a, b)
    back = (await create_edge(client, seed, b, a, relation="HANDOFF_TO")).json()

    res = await client.patch(
        f"/api/v1/edges/{back['id']}",
        json={"relation": "DEPENDS_ON"}, headers=as_user(seed.alice),
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "EDGE_CYCLE"


async def test_change_relation_into_duplicate_rejected(client, seed):
    a = await create_node(client, seed, "A")
    b = await create_node(client, seed, "B")
    await create_edge(client, seed, a, b, relation="APPROVAL_BY")
    other = (await create_edge(client, seed, a, b, relation="HANDOFF_TO")).json()

    res = await client.patch(
        f"/api/v1/edges/{other['id']}",
        json={"relation": "APPROVAL_BY"}, headers=as_user(seed.alice),
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "EDGE_DUPLICATE"


async def test_delete_edge_reports_unblocked(client, seed):
    a = await create_node(client, seed, "A")
    b = await create_node(client, seed, "B")
    edge = (await create_edge(client, seed, a, b)).json()

    res = await client.delete(f"/api/v1/edges/{edge['id']}", headers=as_user(seed.alice))

    assert res.status_code == 200
    assert res.json() == {"success": True, "unblocked_node_ids": [a]}
    assert await _edge_count(client, seed) == 0


async def test_delete_unknown_edge_returns_404(client, seed):
    res = await client.delete(f"/api/v1/edges/{uuid4()}", headers=as_user(seed.alice))
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_mutation_requires_user_header(client, seed):
    res = await client.post(
        f"/api/v1/projects/{seed.project_id}/edges",
        json={"from_node_id": "x", "to_node_id": "y", "relation": "DEPENDS_ON"},
    )
    assert res.status_code == 401
