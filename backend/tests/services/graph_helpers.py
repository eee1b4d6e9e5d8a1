"""Shared helpers for route tests: seeded ids, auth header, API shortcuts."""

from dataclasses import dataclass


@dataclass
class Seed:
    org_id: str
    project_id: str
    alice: str
    bob: str
    carol: str
    team_id: str


def as_user(user_id: str) -> dict:
    return {"X-User-Id": user_id}


async def create_node(client, seed: Seed, title: str, owner=None, **fields) -> str:
    """Create a node through the API; returns its id."""
    body = {"title": title, "owner_id": owner or seed.alice, **fields}
    res = await client.post(
        f"/api/v1/projects/{seed.project_id}/nodes",
        json=body, headers=as_user(seed.alice),
    )
    assert res.status_code == 201, res.text
    return res.json()["id"]


async def create_edge(client, seed: Seed, from_id: str, to_id: str, relation="DEPENDS_ON"):
    return await client.post(
        f"/api/v1/projects/{seed.project_id}/edges",
        json={"from_node_id": from_id, "to_node_id": to_id, "relation": relation},
        headers=as_user(seed.alice),
    )


async def create_request(client, seed: Seed, node_id: str, **target):
    return await client.post(
        f"/api/v1/projects/{seed.project_id}/requests",
        json={"linked_node_id": node_id, "question": "Can you confirm?", **target},
        headers=as_user(seed.alice),
    )
