"""Tag Entity — user-defined label attachable to many habits.

Invariants:
    - name is unique across tags (enforced by the shell at write time)
    - Tags and habits are linked many-to-many; a link dies with either side
"""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import uuid4

from devhabits.core.domain_types import TagId


MAX_TAG_NAME_LENGTH: int = 50


@dataclass
class Tag:
    """Label with optional description."""
    name: str
    created_at_utc: datetime
    id: TagId = field(default_factory=lambda: TagId(uuid4()))
    description: str | None = None
    updated_at_utc: datetime | None = None

    def touch(self, now: datetime) -> None:
        self.updated_at_utc = now
