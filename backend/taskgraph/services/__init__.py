"""Services Layer — imperative shell around the pure core.

Invariants:
    - Services load a snapshot, call core, then persist what core decided
    - Every check-then-write runs inside one transaction with the scope row locked

Design Decisions:
    - One service class per aggregate (nodes, edges, requests) for locality
"""
