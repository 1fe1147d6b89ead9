"""
Status read helpers for translated bios.

Reads never block on translation: whatever is not finished yet falls
back to the source bio.
"""

from typing import Iterable, Optional

from . import state_machine
from .config import BioTranslationConfig
from .fingerprint import fingerprint, normalize_language
from .models import TranslatableProfile


def is_complete(profile: TranslatableProfile, targets: Iterable[str]) -> bool:
    """True when there is nothing left to translate for the current bio."""
    source_text = profile.source_text
    if not source_text:
        return True
    if profile.bio_hash != fingerprint(source_text):
        return False
    return all(profile.entry(target).is_done for target in targets)


def display_text(profile: TranslatableProfile, target_lang: Optional[str]) -> str:
    """Best text to show for a language: translation if ready, source otherwise."""
    source_text = profile.source_text
    if not source_text:
        return ""
    target = normalize_language(target_lang)
    if not target or target == normalize_language(profile.bio_language):
        return source_text
    # Entries written for an older bio must not leak through
    if profile.bio_hash != fingerprint(source_text):
        return source_text
    entry = profile.bio_translations.get(target)
    if entry is not None and entry.is_done:
        return entry.text
    return source_text


def translation_status(profile: TranslatableProfile, config: BioTranslationConfig) -> dict:
    """Per-target snapshot for pollers and operators."""
    targets = {}
    for target in config.targets:
        entry = profile.entry(target)
        targets[target] = {
            "status": entry.status.value,
            "attempts": entry.attempts,
            "updated_at": entry.updated_at.isoformat() if entry.updated_at else None,
            "error": entry.error.to_dict() if entry.error else None,
            "exhausted": state_machine.is_exhausted(entry, config),
        }
    return {
        "profile_id": profile.id,
        "source_language": normalize_language(profile.bio_language),
        "bio_hash": profile.bio_hash,
        "complete": is_complete(profile, config.targets),
        "targets": targets,
    }
