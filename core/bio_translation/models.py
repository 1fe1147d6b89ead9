"""
Bio Translation Data Models

Per-target translation state for a profile biography.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterable, Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    return None


class TranslationStatus(str, Enum):
    """Lifecycle of one (profile, target language) pair"""
    PENDING = "pending"
    PROCESSING = "processing"
    DONE = "done"
    FAILED = "failed"


class ErrorKind(str, Enum):
    """Classification of a failed translation attempt"""
    PROVIDER_UNAVAILABLE = "provider_unavailable"  # network, timeout, 5xx, 408, 429
    QUOTA_EXCEEDED = "quota_exceeded"
    REJECTED = "rejected"                          # other 4xx
    INVALID_RESPONSE = "invalid_response"          # empty or malformed payload

    @property
    def is_unavailability(self) -> bool:
        """Outage-type failures earn the extended retry budget."""
        return self in (ErrorKind.PROVIDER_UNAVAILABLE, ErrorKind.QUOTA_EXCEEDED)


@dataclass
class TranslationError:
    """Structured record of the last failure for a target"""
    kind: ErrorKind
    message: str
    provider: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "provider": self.provider,
        }

    @classmethod
    def from_value(cls, value: Any) -> Optional["TranslationError"]:
        """Accept a stored dict or a legacy error string."""
        if isinstance(value, dict):
            try:
                kind = ErrorKind(value.get("kind"))
            except ValueError:
                kind = ErrorKind.INVALID_RESPONSE
            message = value.get("message")
            return cls(
                kind=kind,
                message=message if isinstance(message, str) else kind.value,
                provider=value.get("provider") if isinstance(value.get("provider"), str) else None,
            )
        if isinstance(value, str) and value.strip():
            message = value.strip()
            # Legacy rows stored a bare message; the prefix carried the class
            if message.startswith("translate_failed"):
                kind = ErrorKind.PROVIDER_UNAVAILABLE
            elif message.startswith("mymemory_quota"):
                kind = ErrorKind.QUOTA_EXCEEDED
            else:
                kind = ErrorKind.INVALID_RESPONSE
            return cls(kind=kind, message=message)
        return None


@dataclass
class TranslationEntry:
    """Translation state for one target language"""
    text: str = ""
    status: TranslationStatus = TranslationStatus.PENDING
    attempts: int = 0
    updated_at: Optional[datetime] = None
    error: Optional[TranslationError] = None

    @property
    def is_done(self) -> bool:
        return self.status == TranslationStatus.DONE and bool(self.text)

    @classmethod
    def pending(cls) -> "TranslationEntry":
        return cls(updated_at=utcnow())

    @classmethod
    def identity(cls, source_text: str) -> "TranslationEntry":
        """Entry for the target that matches the source language."""
        return cls(text=source_text, status=TranslationStatus.DONE, updated_at=utcnow())

    def to_dict(self) -> dict:
        return {
            "text": self.text,
            "status": self.status.value,
            "attempts": self.attempts,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
            "error": self.error.to_dict() if self.error else None,
        }

    @classmethod
    def from_value(cls, value: Any) -> Optional["TranslationEntry"]:
        """
        Normalize a stored entry.

        Bare strings are read as finished translations; dicts with missing
        or unknown status fall back to ``done`` when they carry text and
        ``pending`` otherwise. Returns None for anything unusable.
        """
        if isinstance(value, TranslationEntry):
            return value
        if isinstance(value, str):
            text = value.strip()
            if not text:
                return None
            return cls(text=text, status=TranslationStatus.DONE, updated_at=utcnow())
        if isinstance(value, dict):
            text = value.get("text").strip() if isinstance(value.get("text"), str) else ""
            try:
                status = TranslationStatus(str(value.get("status", "")).strip())
            except ValueError:
                status = TranslationStatus.DONE if text else TranslationStatus.PENDING
            if status == TranslationStatus.DONE and not text:
                status = TranslationStatus.PENDING
            attempts = value.get("attempts")
            if isinstance(attempts, bool) or not isinstance(attempts, (int, float)):
                attempts = 0
            return cls(
                text=text,
                status=status,
                attempts=max(0, int(attempts)),
                updated_at=_parse_timestamp(value.get("updated_at", value.get("updatedAt"))),
                error=TranslationError.from_value(value.get("error")),
            )
        return None


TranslationSet = Dict[str, TranslationEntry]


def normalize_translation_set(value: Any, targets: Optional[Iterable[str]] = None) -> TranslationSet:
    """Keep usable entries (only supported targets, if given); keys lower-cased."""
    if not isinstance(value, dict):
        return {}
    allowed = set(targets) if targets is not None else None
    normalized: TranslationSet = {}
    for key, raw in value.items():
        lang = key.strip().lower() if isinstance(key, str) else ""
        if not lang or (allowed is not None and lang not in allowed):
            continue
        entry = TranslationEntry.from_value(raw)
        if entry is not None:
            normalized[lang] = entry
    return normalized


@dataclass
class TranslatableProfile:
    """A marketplace profile owning a translatable biography"""
    id: str
    bio: str = ""
    bio_language: Optional[str] = None
    bio_hash: Optional[str] = None
    bio_translations: TranslationSet = field(default_factory=dict)

    # Listing fields stored alongside the bio
    display_name: str = ""
    city: Optional[str] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @property
    def source_text(self) -> str:
        return (self.bio or "").strip()

    def entry(self, target: str) -> TranslationEntry:
        """Entry for a target; a missing entry reads as pending."""
        return self.bio_translations.get(target) or TranslationEntry()

    def touch(self) -> None:
        self.updated_at = utcnow()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "bio": self.bio,
            "bio_language": self.bio_language,
            "bio_hash": self.bio_hash,
            "bio_translations": {
                lang: entry.to_dict() for lang, entry in self.bio_translations.items()
            },
            "display_name": self.display_name,
            "city": self.city,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
