"""
Bio Translation Custom Exceptions
"""

from typing import Optional


class BioTranslationError(Exception):
    """Base exception for the bio translation pipeline"""
    pass


class ProviderError(BioTranslationError):
    """A translation provider call failed.

    Raised inside provider adapters only; the provider chain converts it
    into a recorded ``TranslationError`` and never lets it escape.
    """
    def __init__(self, kind, message: str, provider: Optional[str] = None):
        self.kind = kind
        self.message = message
        self.provider = provider
        super().__init__(message)


class InvalidTransitionError(BioTranslationError):
    """Illegal per-target state change"""
    def __init__(self, target: str, current: str, requested: str):
        self.target = target
        self.current = current
        self.requested = requested
        super().__init__(f"[{target}] cannot move from {current} to {requested}")


class ProfileNotFoundError(BioTranslationError):
    """Profile does not exist in the repository"""
    def __init__(self, profile_id: str):
        self.profile_id = profile_id
        super().__init__(f"Profile {profile_id} not found")


class EmptyBioError(BioTranslationError):
    """Operation needs a non-empty bio"""
    def __init__(self, profile_id: str):
        self.profile_id = profile_id
        super().__init__(f"Profile {profile_id} has an empty bio")
