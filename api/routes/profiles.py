"""
Profile read/write endpoints.

Every read serves the stored profile as-is and, when its bio translations
are incomplete, schedules a background job before responding.
"""

import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from api.deps import get_translation_service
from api.models import (
    ProfileCreate,
    ProfileResponse,
    ProfileUpdate,
    TranslationStatusResponse,
)
from config.logging_config import get_logger
from core.bio_translation import BioTranslationService, TranslatableProfile, job_key
from core.bio_translation.fingerprint import normalize_language

logger = get_logger(__name__)

router = APIRouter(prefix="/api/profiles", tags=["Profiles"])


def _to_response(
    service: BioTranslationService,
    profile: TranslatableProfile,
    lang: Optional[str] = None,
) -> ProfileResponse:
    return ProfileResponse.from_profile(
        profile,
        complete=service.is_complete(profile),
        bio_display=service.display_text(profile, lang) if lang else None,
    )


@router.get("", response_model=List[ProfileResponse])
async def list_profiles(
    lang: Optional[str] = Query(None, description="Language for bio_display"),
    city: Optional[str] = Query(None, description="Filter by city (substring)"),
    service: BioTranslationService = Depends(get_translation_service),
):
    """List profiles; schedules translation for any with incomplete bios."""
    profiles = service.repository.list_profiles()
    if city:
        query = city.strip().lower()
        profiles = [p for p in profiles if query in (p.city or "").lower()]

    for profile in profiles:
        service.on_profile_read(profile)

    return [_to_response(service, p, lang) for p in profiles]


@router.get("/{profile_id}", response_model=ProfileResponse)
async def get_profile(
    profile_id: str,
    lang: Optional[str] = Query(None, description="Language for bio_display"),
    service: BioTranslationService = Depends(get_translation_service),
):
    """Get one profile; never waits for translation."""
    profile = service.repository.get_by_id(profile_id)
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")

    service.on_profile_read(profile)
    return _to_response(service, profile, lang)


@router.get("/{profile_id}/translations", response_model=TranslationStatusResponse)
async def get_translation_status(
    profile_id: str,
    service: BioTranslationService = Depends(get_translation_service),
):
    """
    Poll bio translation progress.

    Returns per-language status, attempts and last error, plus whether a
    job for the current bio is running right now.
    """
    profile = service.repository.get_by_id(profile_id)
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")

    service.on_profile_read(profile)
    status = service.translation_status(profile)
    running = False
    if profile.bio_hash:
        running = service.scheduler.registry.is_running(job_key(profile.id, profile.bio_hash))
    return TranslationStatusResponse(job_running=running, **status)


@router.post("", response_model=ProfileResponse, status_code=201)
async def create_profile(
    data: ProfileCreate,
    service: BioTranslationService = Depends(get_translation_service),
):
    """Create a profile and start translating its bio."""
    profile_id = data.id or uuid.uuid4().hex[:21]
    if service.repository.get_by_id(profile_id):
        raise HTTPException(status_code=409, detail="Profile already exists")

    profile = TranslatableProfile(
        id=profile_id,
        display_name=data.display_name,
        city=data.city,
        bio=data.bio.strip(),
        bio_language=normalize_language(data.bio_language),
    )
    saved = service.on_bio_saved(profile)
    return _to_response(service, saved)


@router.patch("/{profile_id}", response_model=ProfileResponse)
async def update_profile(
    profile_id: str,
    data: ProfileUpdate,
    service: BioTranslationService = Depends(get_translation_service),
):
    """
    Update a profile.

    A changed bio invalidates its translations. A changed bio language, or
    ``reset_translations``, discards finished translations as well.
    """
    profile = service.repository.get_by_id(profile_id)
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")

    if data.display_name is not None:
        profile.display_name = data.display_name
    if data.city is not None:
        profile.city = data.city

    bio_changed = data.bio is not None and data.bio.strip() != profile.source_text
    if data.bio is not None:
        profile.bio = data.bio.strip()

    language_changed = False
    if data.bio_language is not None:
        new_language = normalize_language(data.bio_language)
        language_changed = new_language != normalize_language(profile.bio_language)
        profile.bio_language = new_language

    profile.touch()
    if bio_changed or language_changed or data.reset_translations:
        saved = service.on_bio_saved(profile, force=language_changed or data.reset_translations)
    else:
        saved = service.repository.save(profile)

    return _to_response(service, saved)
