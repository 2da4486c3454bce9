"""Customer entity."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID, uuid4


@dataclass
class Customer:
    """
    A customer account that may be determined to be in default.

    ``is_default`` is only ever changed by an approved default
    application or an approved rebirth.
    """

    name: str
    industry: str
    region: str
    is_default: bool = False
    latest_ext_grade: Optional[str] = None
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

