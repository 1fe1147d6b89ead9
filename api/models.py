"""Pydantic schemas for the profile and translation API"""
from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel, Field

from core.bio_translation.models import TranslatableProfile, TranslationEntry


# ============ Profile Models ============

class ProfileCreate(BaseModel):
    """Create a profile"""
    id: Optional[str] = Field(None, description="Profile ID (generated when omitted)")
    display_name: str = Field(default="", max_length=255)
    city: Optional[str] = None
    bio: str = Field(default="", description="Free-text biography")
    bio_language: Optional[str] = Field(None, description="Language of the bio, if known")


class ProfileUpdate(BaseModel):
    """Partial profile update"""
    display_name: Optional[str] = Field(None, max_length=255)
    city: Optional[str] = None
    bio: Optional[str] = None
    bio_language: Optional[str] = None
    reset_translations: bool = Field(
        default=False, description="Discard stored translations and translate again"
    )


class TranslationErrorResponse(BaseModel):
    kind: str
    message: str
    provider: Optional[str] = None


class TranslationEntryResponse(BaseModel):
    """One target language"""
    text: str
    status: str
    attempts: int
    updated_at: Optional[datetime] = None
    error: Optional[TranslationErrorResponse] = None

    @classmethod
    def from_entry(cls, entry: TranslationEntry) -> "TranslationEntryResponse":
        return cls.model_validate(entry.to_dict())


class ProfileResponse(BaseModel):
    """Profile as served to clients"""
    id: str
    display_name: str
    city: Optional[str] = None
    bio: str
    bio_language: Optional[str] = None
    bio_display: Optional[str] = Field(None, description="Bio in the requested language, or the source bio")
    bio_translations: Dict[str, TranslationEntryResponse] = Field(default_factory=dict)
    translations_complete: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_profile(
        cls,
        profile: TranslatableProfile,
        complete: bool,
        bio_display: Optional[str] = None,
    ) -> "ProfileResponse":
        return cls(
            id=profile.id,
            display_name=profile.display_name,
            city=profile.city,
            bio=profile.bio,
            bio_language=profile.bio_language,
            bio_display=bio_display,
            bio_translations={
                lang: TranslationEntryResponse.from_entry(entry)
                for lang, entry in profile.bio_translations.items()
            },
            translations_complete=complete,
            created_at=profile.created_at,
            updated_at=profile.updated_at,
        )


# ============ Translation Models ============

class TargetStatus(BaseModel):
    status: str
    attempts: int
    updated_at: Optional[datetime] = None
    error: Optional[TranslationErrorResponse] = None
    exhausted: bool


class TranslationStatusResponse(BaseModel):
    """Polling view of a profile's bio translations"""
    profile_id: str
    source_language: Optional[str] = None
    bio_hash: Optional[str] = None
    complete: bool
    job_running: bool = False
    targets: Dict[str, TargetStatus]


class RetranslateRequest(BaseModel):
    """Operator retranslation"""
    force: bool = Field(
        default=False, description="Reset finished translations too, not only pending/failed ones"
    )


class TranslateRequest(BaseModel):
    """Ad-hoc text translation"""
    text: str
    target: str


class TranslateResponse(BaseModel):
    ok: bool = True
    translated_text: str = ""
    detected_language: Optional[str] = None
    cached: bool = False
