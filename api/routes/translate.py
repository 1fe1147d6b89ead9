"""
Translation endpoints: ad-hoc text translation and operator actions.
"""

from fastapi import APIRouter, Depends, HTTPException, Request, Response

from api.deps import get_translation_service
from api.models import ProfileResponse, RetranslateRequest, TranslateRequest, TranslateResponse
from api.rate_limiter import limiter, rate_limit_config
from config.logging_config import get_logger
from config.settings import settings
from core.bio_translation import (
    BioTranslationService,
    EmptyBioError,
    ProfileNotFoundError,
)
from core.bio_translation.fingerprint import normalize_language

logger = get_logger(__name__)

router = APIRouter(tags=["Translation"])


@router.post("/api/translate", response_model=TranslateResponse)
@limiter.limit(rate_limit_config.get_limit("translate"))
async def translate_text(
    request: Request,
    payload: TranslateRequest,
    service: BioTranslationService = Depends(get_translation_service),
):
    """
    Translate a short text through the provider chain.

    Provider failures are not reported: the response then carries an
    empty ``translated_text`` and the client keeps showing the original.
    """
    text = payload.text.strip()
    target = normalize_language(payload.target)
    if not text or not target:
        raise HTTPException(status_code=400, detail="invalid_payload")

    text = text[: settings.translate_max_chars]
    result = await service.scheduler.chain.translate(text, None, target)
    if not result.success:
        logger.info("Ad-hoc translation to %s failed: %s", target, result.error.message)
        return TranslateResponse(translated_text="")

    return TranslateResponse(translated_text=result.text, cached=result.cached)


@router.post("/api/admin/profiles/{profile_id}/translate", response_model=ProfileResponse)
@limiter.limit(rate_limit_config.get_limit("admin"))
async def retranslate_profile(
    request: Request,
    profile_id: str,
    payload: RetranslateRequest = RetranslateRequest(),
    service: BioTranslationService = Depends(get_translation_service),
):
    """
    Operator action: reset a profile's bio translations and schedule a job.

    - **force**: also discard translations that already finished
    """
    try:
        profile = service.retranslate_by_id(profile_id, force=payload.force)
    except ProfileNotFoundError:
        raise HTTPException(status_code=404, detail="Profile not found")
    except EmptyBioError:
        raise HTTPException(status_code=400, detail="Bio is empty")

    return ProfileResponse.from_profile(profile, complete=service.is_complete(profile))


@router.delete("/api/admin/profiles/{profile_id}", status_code=204)
@limiter.limit(rate_limit_config.get_limit("admin"))
async def delete_profile(
    request: Request,
    profile_id: str,
    service: BioTranslationService = Depends(get_translation_service),
):
    """Operator action: delete a profile and its translations."""
    try:
        service.delete_profile(profile_id)
    except ProfileNotFoundError:
        raise HTTPException(status_code=404, detail="Profile not found")
    return Response(status_code=204)
