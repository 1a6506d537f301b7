from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class UserSnapshot:
    """Display data for a customer; never used for authorization."""

    id: int
    name: Optional[str] = None
    email: Optional[str] = None
