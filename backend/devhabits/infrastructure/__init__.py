"""Infrastructure Layer — database access, repositories, clock and logging.

Invariants:
    - Infrastructure imports core/ types and protocols, never the other way round
    - All database failures surface as core.errors.DatabaseError

Design Decisions:
    - Repositories live here: they are the shell side of core/repository_protocols.py
"""
