"""
Profile Bio Translation Pipeline

Background translation of profile biographies into the supported target
languages: fingerprinting, per-target state, provider fallback, job
deduplication and non-blocking status reads.

Key components:
- BioTranslationService: entry points for the HTTP boundary
- BioTranslationScheduler: runs deduplicated background jobs
- ProviderChain: ordered remote translation providers with a result cache
"""

from .cache import TranslationCache
from .config import BioTranslationConfig
from .exceptions import (
    BioTranslationError,
    EmptyBioError,
    InvalidTransitionError,
    ProfileNotFoundError,
    ProviderError,
)
from .fingerprint import ensure_seeded, fingerprint, normalize_language, reseed
from .job_registry import JobRegistry, job_key
from .models import (
    ErrorKind,
    TranslatableProfile,
    TranslationEntry,
    TranslationError,
    TranslationStatus,
)
from .protocol import ProfileRepository
from .provider_chain import ChainResult, ProviderChain
from .scheduler import BioTranslationScheduler, JobResult
from .service import BioTranslationService
from .status import display_text, is_complete, translation_status

__all__ = [
    # Service
    "BioTranslationService",
    "BioTranslationScheduler",
    "JobResult",
    "JobRegistry",
    "job_key",
    # Providers
    "ProviderChain",
    "ChainResult",
    "TranslationCache",
    # Models
    "BioTranslationConfig",
    "ErrorKind",
    "TranslatableProfile",
    "TranslationEntry",
    "TranslationError",
    "TranslationStatus",
    "ProfileRepository",
    # Functions
    "fingerprint",
    "normalize_language",
    "reseed",
    "ensure_seeded",
    "is_complete",
    "display_text",
    "translation_status",
    # Errors
    "BioTranslationError",
    "EmptyBioError",
    "InvalidTransitionError",
    "ProfileNotFoundError",
    "ProviderError",
]
