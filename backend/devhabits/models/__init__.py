"""ORM Models — SQLAlchemy declarative models for habits, logs and tags.

Invariants:
    - All models inherit from Base (db/base.py)
    - Habit is the aggregate root; logs and tag links scoped by habit_id

Design Decisions:
    - One file per entity for locality; Tag and HabitTag share a file (link has no behaviour)
    - All models imported here so Base.metadata is complete before create_all / autogenerate
"""

from devhabits.models.habit import Habit  # noqa: F401
from devhabits.models.habit_log import HabitLog  # noqa: F401
from devhabits.models.tag import Tag, HabitTag  # noqa: F401
