"""
ProfileRepository protocol: the storage contract the pipeline relies on.

The pipeline never touches storage directly; it reads a fresh snapshot
with get_by_id(), changes it, and writes it back with save().
"""

from __future__ import annotations

from typing import List, Optional, Protocol, runtime_checkable

from .models import TranslatableProfile


@runtime_checkable
class ProfileRepository(Protocol):
    """Access to profiles owning a translatable bio."""

    def get_by_id(self, profile_id: str) -> Optional[TranslatableProfile]: ...

    def save(self, profile: TranslatableProfile) -> TranslatableProfile: ...

    def list_profiles(self) -> List[TranslatableProfile]: ...

    def delete(self, profile_id: str) -> bool: ...
