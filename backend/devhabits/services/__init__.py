"""Services Layer — imperative shell: load, decide with the core, persist.

Invariants:
    - One service per aggregate (HabitService, TagService), built per request
    - Services own the transaction: repositories flush, services commit

Design Decisions:
    - Rejections from core predicates become DevHabitsError subclasses here, never in core/
"""
