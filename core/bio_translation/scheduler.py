"""
Bio translation job scheduler.

One job drives every supported target of one profile, for one bio
fingerprint, through the state machine. Jobs are detached asyncio tasks
started from read paths; the registry guarantees at most one job per
``<profile_id>:<fingerprint>``.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from . import state_machine
from .config import BioTranslationConfig
from .fingerprint import ensure_seeded, fingerprint, normalize_language
from .job_registry import JobRegistry, job_key
from .models import TranslatableProfile, TranslationEntry, TranslationStatus
from .protocol import ProfileRepository
from .provider_chain import ProviderChain

logger = logging.getLogger(__name__)


@dataclass
class JobResult:
    """What one job run did"""
    key: str
    aborted: bool = False
    translated: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)


class BioTranslationScheduler:
    """
    Schedules and runs bio translation jobs.

    Usage:
        scheduler = BioTranslationScheduler(repository, chain, config)
        scheduler.schedule_translations(profile.id)   # returns immediately
        await scheduler.drain()                       # shutdown / tests
    """

    def __init__(
        self,
        repository: ProfileRepository,
        chain: ProviderChain,
        config: BioTranslationConfig,
        registry: Optional[JobRegistry] = None,
    ):
        self.repository = repository
        self.chain = chain
        self.config = config
        self.registry = registry if registry is not None else JobRegistry()

    # ==================== SCHEDULING ====================

    def schedule_translations(self, profile_id: str, bio: Optional[str] = None) -> bool:
        """
        Start a background job for the profile's current bio.

        Fire-and-forget and idempotent: returns False without doing anything
        when the bio is empty, the profile is unknown, or a job for the same
        fingerprint is already running. Must be called from a running loop.
        """
        if bio is None:
            profile = self.repository.get_by_id(profile_id)
            if profile is None:
                return False
            bio = profile.source_text

        source_text = (bio or "").strip()
        if not source_text:
            return False

        content_hash = fingerprint(source_text)
        key = job_key(profile_id, content_hash)
        if not self.registry.claim(key):
            logger.debug("Bio translation job %s already running", key)
            return False

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self.registry.release(key)
            logger.warning("No running event loop, cannot schedule bio translation %s", key)
            return False

        task = loop.create_task(self._run_detached(profile_id, content_hash, key), name=f"bio-translation:{key}")
        self.registry.attach(key, task)
        logger.debug("Scheduled bio translation job %s", key)
        return True

    async def _run_detached(self, profile_id: str, content_hash: str, key: str) -> None:
        result = None
        try:
            result = await self.run_job(profile_id, content_hash)
        except Exception:
            logger.exception("Bio translation job %s crashed", key)
        finally:
            self.registry.release(key)
        # A reset that kept the fingerprint was deduplicated against this job
        if result is not None and result.aborted:
            current = self._load_current(profile_id, content_hash)
            if current is not None:
                self.schedule_translations(profile_id, current.source_text)

    async def drain(self) -> None:
        """Wait for every in-flight job to finish."""
        await self.registry.wait_all()

    # ==================== JOB ====================

    async def run_job(self, profile_id: str, content_hash: str) -> JobResult:
        """
        Drive every supported target for one fingerprint, in order.

        Each transition is persisted on a freshly loaded profile, and only
        while the stored entry is still the one this job read or claimed.
        The job aborts as soon as the stored bio no longer matches
        ``content_hash``, its language changed, or an entry was reset
        under it.
        """
        result = JobResult(key=job_key(profile_id, content_hash))

        profile = self._load_current(profile_id, content_hash)
        if profile is None:
            result.aborted = True
            return result
        if ensure_seeded(profile, self.config.targets):
            profile = self.repository.save(profile)

        scope = _JobScope(profile_id, content_hash, normalize_language(profile.bio_language))
        called_provider = False
        for target in self.config.targets:
            outcome = await self._process_target(scope, target, throttle=called_provider)
            if outcome is None:
                result.aborted = True
                logger.info("Bio translation job %s aborted at %s", result.key, target)
                return result
            if outcome == "translated":
                result.translated.append(target)
            elif outcome == "failed":
                result.failed.append(target)
            else:
                result.skipped.append(target)
            if outcome in ("translated", "failed"):
                called_provider = True

        logger.info(
            "Bio translation job %s finished: %d translated, %d failed, %d skipped",
            result.key, len(result.translated), len(result.failed), len(result.skipped),
        )
        return result

    async def _process_target(self, scope: "_JobScope", target: str, throttle: bool = False) -> Optional[str]:
        """
        One state-machine step for a target.

        Returns "translated", "failed" or "skipped", or None when the job
        must abort because the profile changed under it.
        """
        profile = self._load_scoped(scope)
        if profile is None:
            return None
        if ensure_seeded(profile, self.config.targets):
            profile = self.repository.save(profile)

        entry = profile.entry(target)
        if entry.is_done:
            return "skipped"

        if state_machine.is_exhausted(entry, self.config):
            if entry.status != TranslationStatus.FAILED:
                if not self._persist_entry(scope, target, state_machine.freeze(entry), expected=entry):
                    return None
            return "skipped"

        source_text = profile.source_text

        if throttle and self.config.inter_target_delay > 0:
            await asyncio.sleep(self.config.inter_target_delay)

        claimed = state_machine.claim(target, entry, self.config)
        if not self._persist_entry(scope, target, claimed, expected=entry):
            return None

        if scope.source_lang and target == scope.source_lang:
            finished = state_machine.complete(target, claimed, source_text)
            return "translated" if self._persist_entry(scope, target, finished, expected=claimed) else None

        chain_result = await self.chain.translate(source_text, scope.source_lang, target)
        if chain_result.success:
            finished = state_machine.complete(target, claimed, chain_result.text)
            outcome = "translated"
        else:
            finished = state_machine.fail(target, claimed, chain_result.error)
            outcome = "failed"
            logger.warning(
                "Bio translation %s -> %s failed (attempt %d): %s",
                scope.profile_id, target, claimed.attempts, chain_result.error.message,
            )

        if not self._persist_entry(scope, target, finished, expected=claimed):
            return None
        return outcome

    # ==================== PERSISTENCE ====================

    def _load_current(self, profile_id: str, content_hash: str) -> Optional[TranslatableProfile]:
        """Fresh profile snapshot, or None if it vanished or its bio changed."""
        profile = self.repository.get_by_id(profile_id)
        if profile is None:
            logger.debug("Profile %s disappeared, dropping bio translation job", profile_id)
            return None
        if not profile.source_text or fingerprint(profile.source_text) != content_hash:
            logger.debug("Profile %s bio changed since job %s was scheduled", profile_id, content_hash[:10])
            return None
        return profile

    def _load_scoped(self, scope: "_JobScope") -> Optional[TranslatableProfile]:
        """Like _load_current, also rejecting a changed bio language."""
        profile = self._load_current(scope.profile_id, scope.content_hash)
        if profile is not None and normalize_language(profile.bio_language) != scope.source_lang:
            logger.debug("Profile %s bio language changed during job %s", scope.profile_id, scope.content_hash[:10])
            return None
        return profile

    def _persist_entry(
        self, scope: "_JobScope", target: str, entry: TranslationEntry, expected: TranslationEntry
    ) -> bool:
        """
        Read-modify-write a single target entry.

        Returns False, writing nothing, when the profile changed or the
        stored entry is no longer ``expected``.
        """
        profile = self._load_scoped(scope)
        if profile is None:
            return False
        if profile.bio_translations.get(target) != expected:
            logger.debug("Bio translation %s -> %s was reset during the job", scope.profile_id, target)
            return False
        profile.bio_translations[target] = entry
        profile.touch()
        self.repository.save(profile)
        return True


@dataclass(frozen=True)
class _JobScope:
    """What a running job was started for"""
    profile_id: str
    content_hash: str
    source_lang: Optional[str]
