"""Strongly typed identifiers for review domain entities.

Using NewType for strong typing prevents mixing up different entity IDs
and makes the code more self-documenting.
"""

from typing import NewType
from uuid import UUID

ReviewId = NewType("ReviewId", UUID)
UserId = NewType("UserId", UUID)
