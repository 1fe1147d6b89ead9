"""
Profile Database Models
SQLAlchemy model for marketplace profiles and their bio translations.
"""
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import JSON, DateTime, String, Text
from sqlalchemy.orm import Mapped, declarative_base, mapped_column

from core.bio_translation.models import (
    TranslatableProfile,
    normalize_translation_set,
    utcnow,
)

Base = declarative_base()


def _aware(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite returns naive datetimes; everything here is UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class ProfileRecord(Base):
    """
    Stored profile row.

    ``bio_translations`` is a JSON object keyed by target language, each
    value a serialized TranslationEntry.
    """

    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)

    # Listing info
    display_name: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    city: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # Bio and translations
    bio: Mapped[str] = mapped_column(Text, default="", nullable=False)
    bio_language: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)
    bio_hash: Mapped[Optional[str]] = mapped_column(String(40), nullable=True)
    bio_translations: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    def __repr__(self):
        return f"<Profile {self.id} ({self.display_name})>"

    def to_entity(self) -> TranslatableProfile:
        """Detached domain object; legacy translation payloads are normalized."""
        return TranslatableProfile(
            id=self.id,
            bio=self.bio or "",
            bio_language=self.bio_language,
            bio_hash=self.bio_hash,
            bio_translations=normalize_translation_set(self.bio_translations),
            display_name=self.display_name or "",
            city=self.city,
            created_at=_aware(self.created_at) or utcnow(),
            updated_at=_aware(self.updated_at) or utcnow(),
        )

    def apply(self, profile: TranslatableProfile) -> None:
        """Copy a domain object onto this row."""
        self.display_name = profile.display_name
        self.city = profile.city
        self.bio = profile.bio
        self.bio_language = profile.bio_language
        self.bio_hash = profile.bio_hash
        self.bio_translations = {
            lang: entry.to_dict() for lang, entry in profile.bio_translations.items()
        }
        self.created_at = profile.created_at
        self.updated_at = profile.updated_at
