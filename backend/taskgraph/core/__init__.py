"""Core Layer — pure graph/status logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - All functions are pure and deterministic over the snapshot they receive

Design Decisions:
    - Functional core separated from imperative shell: the shell loads a
      snapshot, calls core, then persists whatever core decided
"""
