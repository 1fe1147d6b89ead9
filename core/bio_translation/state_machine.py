"""
Per-target translation state machine.

    pending --claim--> processing --complete--> done
                           |
                           +------fail------> failed --claim--> processing

``done`` is terminal for a fingerprint. A failed entry may be claimed
again while it is under its retry limit; once the limit is reached it is
frozen at ``failed``.
"""

from dataclasses import replace

from .config import BioTranslationConfig
from .exceptions import InvalidTransitionError
from .models import TranslationEntry, TranslationError, TranslationStatus, utcnow


def retry_limit(entry: TranslationEntry, config: BioTranslationConfig) -> int:
    """Attempt cap for an entry, extended after provider outages."""
    if (
        entry.status == TranslationStatus.FAILED
        and entry.error is not None
        and entry.error.kind.is_unavailability
    ):
        return config.max_attempts + config.retry_bonus
    return config.max_attempts


def is_exhausted(entry: TranslationEntry, config: BioTranslationConfig) -> bool:
    """True when the entry may not be attempted again for this fingerprint."""
    if entry.is_done:
        return False
    return entry.attempts >= retry_limit(entry, config)


def needs_work(entry: TranslationEntry, config: BioTranslationConfig) -> bool:
    return not entry.is_done and not is_exhausted(entry, config)


def claim(target: str, entry: TranslationEntry, config: BioTranslationConfig) -> TranslationEntry:
    """pending/failed/processing -> processing; counts the attempt."""
    if entry.is_done:
        raise InvalidTransitionError(target, entry.status.value, TranslationStatus.PROCESSING.value)
    if is_exhausted(entry, config):
        raise InvalidTransitionError(target, f"{entry.status.value} (exhausted)", TranslationStatus.PROCESSING.value)
    # A processing entry left behind by a crashed job is re-claimed
    return replace(
        entry,
        status=TranslationStatus.PROCESSING,
        attempts=entry.attempts + 1,
        updated_at=utcnow(),
        error=None,
    )


def complete(target: str, entry: TranslationEntry, text: str) -> TranslationEntry:
    """processing -> done"""
    if entry.status != TranslationStatus.PROCESSING:
        raise InvalidTransitionError(target, entry.status.value, TranslationStatus.DONE.value)
    if not text or not text.strip():
        raise InvalidTransitionError(target, entry.status.value, "done (empty text)")
    return replace(
        entry,
        text=text.strip(),
        status=TranslationStatus.DONE,
        updated_at=utcnow(),
        error=None,
    )


def fail(target: str, entry: TranslationEntry, error: TranslationError) -> TranslationEntry:
    """processing -> failed"""
    if entry.status != TranslationStatus.PROCESSING:
        raise InvalidTransitionError(target, entry.status.value, TranslationStatus.FAILED.value)
    return replace(
        entry,
        status=TranslationStatus.FAILED,
        updated_at=utcnow(),
        error=error,
    )


def freeze(entry: TranslationEntry) -> TranslationEntry:
    """Pin an exhausted entry at failed, keeping its attempts and error."""
    return replace(entry, status=TranslationStatus.FAILED, updated_at=utcnow())
