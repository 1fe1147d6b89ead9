"""
Bio Translation Service
Entry points used by the HTTP boundary.
"""
import logging
from typing import Optional

from . import state_machine
from .config import BioTranslationConfig
from .exceptions import EmptyBioError, ProfileNotFoundError
from .fingerprint import fingerprint, is_stale, reseed
from .models import TranslatableProfile
from .protocol import ProfileRepository
from .scheduler import BioTranslationScheduler
from .status import display_text, is_complete, translation_status

logger = logging.getLogger(__name__)


class BioTranslationService:
    """
    Service layer for profile bio translations.

    Wires the repository, the scheduler and the status helpers together so
    routes only deal with profiles.
    """

    def __init__(
        self,
        repository: ProfileRepository,
        scheduler: BioTranslationScheduler,
        config: BioTranslationConfig,
    ):
        self.repository = repository
        self.scheduler = scheduler
        self.config = config

    # ==================== READS ====================

    def is_complete(self, profile: TranslatableProfile) -> bool:
        return is_complete(profile, self.config.targets)

    def display_text(self, profile: TranslatableProfile, target_lang: Optional[str]) -> str:
        return display_text(profile, target_lang)

    def translation_status(self, profile: TranslatableProfile) -> dict:
        return translation_status(profile, self.config)

    def has_pending_work(self, profile: TranslatableProfile) -> bool:
        """False once every target is done or frozen for the current bio."""
        if self.is_complete(profile):
            return False
        if is_stale(profile):
            return True
        return any(
            state_machine.needs_work(profile.entry(target), self.config)
            for target in self.config.targets
        )

    def on_profile_read(self, profile: TranslatableProfile) -> bool:
        """Kick off translation when something is left to do; never blocks."""
        if not self.has_pending_work(profile):
            return False
        return self.scheduler.schedule_translations(profile.id, profile.source_text)

    # ==================== WRITES ====================

    def on_bio_saved(self, profile: TranslatableProfile, force: bool = False) -> TranslatableProfile:
        """
        Invalidate translations after an edit and schedule a job.

        Reseeds only when the bio fingerprint changed (or ``force``), so
        unrelated profile updates keep finished translations. The profile
        is saved either way.
        """
        source_text = profile.source_text
        current_hash = fingerprint(source_text) if source_text else None
        if force or profile.bio_hash != current_hash:
            reseed(profile, self.config.targets, force=force)
        profile = self.repository.save(profile)
        if source_text:
            self.scheduler.schedule_translations(profile.id, source_text)
        return profile

    def force_retranslate(self, profile: TranslatableProfile, force: bool = True) -> TranslatableProfile:
        """
        Operator action: restart translation of a profile bio.

        With ``force`` every non-identity target goes back to pending;
        without it only unfinished targets are reset.
        """
        if not profile.source_text:
            raise EmptyBioError(profile.id)
        reseed(profile, self.config.targets, force=force)
        saved = self.repository.save(profile)
        scheduled = self.scheduler.schedule_translations(saved.id, saved.source_text)
        logger.info("Retranslation requested for %s (force=%s, scheduled=%s)", saved.id, force, scheduled)
        return saved

    def retranslate_by_id(self, profile_id: str, force: bool = True) -> TranslatableProfile:
        profile = self.repository.get_by_id(profile_id)
        if profile is None:
            raise ProfileNotFoundError(profile_id)
        return self.force_retranslate(profile, force=force)

    def delete_profile(self, profile_id: str) -> None:
        """Operator action: remove a profile; a running job stops at its next write."""
        if not self.repository.delete(profile_id):
            raise ProfileNotFoundError(profile_id)
        logger.info("Deleted profile %s", profile_id)
