"""
Content fingerprinting and translation-set invalidation.

A profile stores ``bio_hash`` next to its bio. When the stored hash no
longer matches the bio, every non-identity translation is stale.
"""

import hashlib
import logging
from typing import Iterable, Optional

from .models import TranslatableProfile, TranslationEntry, TranslationSet, utcnow

logger = logging.getLogger(__name__)


def fingerprint(text: str) -> str:
    """SHA-1 of the trimmed text."""
    return hashlib.sha1((text or "").strip().encode("utf-8")).hexdigest()


def normalize_language(code: Optional[str]) -> Optional[str]:
    """'pt-BR ' -> 'pt'; blank or non-string -> None."""
    if not isinstance(code, str):
        return None
    value = code.strip().lower().replace("_", "-")
    if not value:
        return None
    return value.split("-")[0] or None


def build_seed(source_text: str, source_lang: Optional[str], targets: Iterable[str]) -> TranslationSet:
    """Fresh translation set: identity target done, everything else pending."""
    seed: TranslationSet = {}
    for target in targets:
        if source_lang and target == source_lang:
            seed[target] = TranslationEntry.identity(source_text)
        else:
            seed[target] = TranslationEntry.pending()
    return seed


def is_stale(profile: TranslatableProfile) -> bool:
    """True when the stored hash does not describe the current bio."""
    if not profile.source_text:
        return bool(profile.bio_translations) or profile.bio_hash is not None
    return profile.bio_hash != fingerprint(profile.source_text)


def reseed(profile: TranslatableProfile, targets: Iterable[str], force: bool = False) -> TranslatableProfile:
    """
    Rebuild the translation set for the profile's current bio.

    Finished translations survive when the fingerprint is unchanged and
    ``force`` is False. Pending/failed entries restart with zero attempts.
    Mutates and returns ``profile``.
    """
    source_text = profile.source_text
    if not source_text:
        profile.bio_translations = {}
        profile.bio_hash = None
        profile.touch()
        return profile

    source_lang = normalize_language(profile.bio_language)
    new_hash = fingerprint(source_text)
    unchanged = profile.bio_hash == new_hash

    translations: TranslationSet = {}
    for target in targets:
        if source_lang and target == source_lang:
            translations[target] = TranslationEntry.identity(source_text)
            continue
        existing = profile.bio_translations.get(target)
        if not force and unchanged and existing is not None and existing.is_done:
            if existing.updated_at is None:
                existing.updated_at = utcnow()
            translations[target] = existing
        else:
            translations[target] = TranslationEntry.pending()

    if not unchanged:
        logger.debug("Profile %s bio changed, translations invalidated", profile.id)

    profile.bio_translations = translations
    profile.bio_hash = new_hash
    profile.touch()
    return profile


def ensure_seeded(profile: TranslatableProfile, targets: Iterable[str]) -> bool:
    """
    Make the translation set trustworthy before a job reads it.

    A stale or empty set is replaced by a fresh seed. Otherwise only missing
    targets are filled in, so failed entries keep their attempt counts.
    Returns True when the profile was modified.
    """
    targets = list(targets)
    source_text = profile.source_text
    if not source_text:
        return False

    if is_stale(profile) or not profile.bio_translations:
        profile.bio_translations = build_seed(
            source_text, normalize_language(profile.bio_language), targets
        )
        profile.bio_hash = fingerprint(source_text)
        profile.touch()
        return True

    missing = [t for t in targets if t not in profile.bio_translations]
    if not missing:
        return False
    seed = build_seed(source_text, normalize_language(profile.bio_language), missing)
    profile.bio_translations.update(seed)
    profile.touch()
    return True
