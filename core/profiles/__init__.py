"""
Profile storage.

Implementations of the ProfileRepository contract used by the bio
translation pipeline.
"""

from .models import ProfileRecord
from .repository import InMemoryProfileRepository, SQLProfileRepository

__all__ = [
    "ProfileRecord",
    "SQLProfileRepository",
    "InMemoryProfileRepository",
]
