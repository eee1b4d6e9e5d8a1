"""Route Dependencies — caller identity resolved at the boundary.

Invariants:
    - Every mutating or per-user endpoint receives the caller id via get_current_user_id
    - Missing identity is a 401, never an anonymous default

Design Decisions:
    - Authentication happens upstream (gateway / session layer); this service
      trusts the X-User-Id header it forwards
"""

from fastapi import Header, HTTPException, status

from taskgraph.core.domain_types import UserId


async def get_current_user_id(
    x_user_id: str | None = Header(None, alias="X-User-Id"),
) -> UserId:
    if not x_user_id:
        raise HTTPException(
            status.HTTP_401_UNAUTHORIZED,
            detail={"error": {"code": "UNAUTHENTICATED", "message": "Missing X-User-Id"}},
        )
    return UserId(x_user_id)
