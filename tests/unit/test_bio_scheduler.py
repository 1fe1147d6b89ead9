"""Tests for the bio translation scheduler and job deduplication."""

import asyncio

import pytest

from core.bio_translation import (
    BioTranslationConfig,
    BioTranslationScheduler,
    ErrorKind,
    JobRegistry,
    ProviderChain,
    ProviderError,
    TranslatableProfile,
    TranslationCache,
    TranslationEntry,
    TranslationError,
    TranslationStatus,
    fingerprint,
    is_complete,
    job_key,
    reseed,
)
from core.bio_translation.state_machine import is_exhausted

from tests.fakes import FakeProvider, RecordingRepository


class TestJobRun:
    """One job run against an always-succeeding provider."""

    @pytest.mark.asyncio
    async def test_scenario_m1(self, scheduler, repository, provider, config, m1):
        result = await scheduler.run_job("m1", fingerprint("Hello"))

        profile = repository.get_by_id("m1")
        en, pt, es = (profile.entry(t) for t in ("en", "pt", "es"))
        assert (en.status, en.text) == (TranslationStatus.DONE, "Hello")
        assert (pt.status, pt.text) == (TranslationStatus.DONE, "pt:Hello")
        assert (es.status, es.text) == (TranslationStatus.DONE, "es:Hello")
        assert is_complete(profile, config.targets)
        assert result.translated == ["pt", "es"]
        assert result.skipped == ["en"]
        assert not result.aborted

    @pytest.mark.asyncio
    async def test_identity_target_never_calls_provider(self, scheduler, provider, m1):
        await scheduler.run_job("m1", fingerprint("Hello"))

        assert all(target != "en" for _, _, target in provider.calls)
        assert len(provider.calls) == 2

    @pytest.mark.asyncio
    async def test_unknown_source_language_uses_auto(self, scheduler, repository, provider, config):
        repository.save(TranslatableProfile(id="m2", bio="Oi, tudo bem?"))

        await scheduler.run_job("m2", fingerprint("Oi, tudo bem?"))

        assert len(provider.calls) == 3
        assert {source for _, source, _ in provider.calls} == {"auto"}
        assert is_complete(repository.get_by_id("m2"), config.targets)

    @pytest.mark.asyncio
    async def test_targets_processed_in_configured_order(self, scheduler, provider, repository):
        repository.save(TranslatableProfile(id="m3", bio="Ciao", bio_language="it"))

        await scheduler.run_job("m3", fingerprint("Ciao"))

        assert [target for _, _, target in provider.calls] == ["en", "pt", "es"]

    @pytest.mark.asyncio
    async def test_done_targets_are_not_translated_again(self, scheduler, provider, m1):
        await scheduler.run_job("m1", fingerprint("Hello"))
        provider.calls.clear()

        result = await scheduler.run_job("m1", fingerprint("Hello"))

        assert provider.calls == []
        assert result.skipped == ["en", "pt", "es"]

    @pytest.mark.asyncio
    async def test_missing_profile_aborts(self, scheduler):
        result = await scheduler.run_job("ghost", fingerprint("Hello"))
        assert result.aborted

    @pytest.mark.asyncio
    async def test_persists_after_every_transition(self, scheduler, repository, m1):
        saves_before = len(repository.history)

        await scheduler.run_job("m1", fingerprint("Hello"))

        # seed + (processing, done) for pt and es
        assert len(repository.history) - saves_before == 5
        statuses = [p.entry("pt").status for p in repository.history[saves_before:]]
        assert statuses[:3] == [
            TranslationStatus.PENDING,
            TranslationStatus.PROCESSING,
            TranslationStatus.DONE,
        ]


class TestScheduling:
    """schedule_translations() fire-and-forget semantics."""

    @pytest.mark.asyncio
    async def test_concurrent_triggers_run_one_job(self, scheduler, provider, m1):
        provider.delay = 0.01

        started = [scheduler.schedule_translations("m1") for _ in range(10)]
        await asyncio.gather(*(asyncio.sleep(0) for _ in range(5)))
        started += [scheduler.schedule_translations("m1") for _ in range(10)]
        await scheduler.drain()

        assert started.count(True) == 1
        assert len(provider.calls) == 2

    @pytest.mark.asyncio
    async def test_returns_immediately(self, scheduler, repository, provider, m1):
        provider.delay = 0.05

        assert scheduler.schedule_translations("m1") is True
        # Nothing ran yet; the caller was not blocked
        assert provider.calls == []
        assert repository.get_by_id("m1").bio_translations == {}

        await scheduler.drain()
        assert len(provider.calls) == 2

    @pytest.mark.asyncio
    async def test_job_key_released_after_completion(self, scheduler, m1):
        scheduler.schedule_translations("m1")
        key = job_key("m1", fingerprint("Hello"))
        assert scheduler.registry.is_running(key)

        await scheduler.drain()

        assert not scheduler.registry.is_running(key)
        assert len(scheduler.registry) == 0

    @pytest.mark.asyncio
    async def test_empty_bio_is_not_scheduled(self, scheduler, repository):
        repository.save(TranslatableProfile(id="blank", bio="   "))
        assert scheduler.schedule_translations("blank") is False
        assert scheduler.schedule_translations("missing") is False

    def test_no_running_loop(self, scheduler, m1):
        assert scheduler.schedule_translations("m1") is False
        assert len(scheduler.registry) == 0

    @pytest.mark.asyncio
    async def test_crashing_job_releases_key(self, config, m1, repository):
        class BrokenChain(ProviderChain):
            async def translate(self, text, source_lang, target_lang):
                raise RuntimeError("boom")

        scheduler = BioTranslationScheduler(repository, BrokenChain([]), config, registry=JobRegistry())
        assert scheduler.schedule_translations("m1")
        await scheduler.drain()
        assert len(scheduler.registry) == 0


class TestInvalidation:
    """Bio edits while translations exist or are in flight."""

    @pytest.mark.asyncio
    async def test_edit_resets_targets_and_reschedules(self, service, scheduler, repository, config, m1):
        await scheduler.run_job("m1", fingerprint("Hello"))
        assert is_complete(repository.get_by_id("m1"), config.targets)

        profile = repository.get_by_id("m1")
        profile.bio = "Good morning"
        service.on_bio_saved(profile)

        edited = repository.get_by_id("m1")
        assert edited.entry("en").status == TranslationStatus.DONE
        assert edited.entry("en").text == "Good morning"
        for target in ("pt", "es"):
            entry = edited.entry(target)
            assert entry.status == TranslationStatus.PENDING
            assert entry.attempts == 0
            assert entry.text == ""

        await scheduler.drain()
        refreshed = repository.get_by_id("m1")
        assert refreshed.entry("pt").text == "pt:Good morning"
        assert refreshed.entry("es").text == "es:Good morning"

    @pytest.mark.asyncio
    async def test_stale_job_does_not_overwrite_new_bio(self, service, scheduler, repository, provider, m1):
        edited = {"done": False}
        original = provider.responder

        def edit_mid_flight(text, source, target):
            if not edited["done"]:
                edited["done"] = True
                profile = repository.get_by_id("m1")
                profile.bio = "Bye"
                service.on_bio_saved(profile)
            return original(text, source, target)

        provider.responder = edit_mid_flight

        result = await scheduler.run_job("m1", fingerprint("Hello"))
        await scheduler.drain()

        assert result.aborted
        profile = repository.get_by_id("m1")
        assert profile.entry("pt").text == "pt:Bye"
        assert profile.entry("es").text == "es:Bye"
        written = [p.entry("pt").text for p in repository.history]
        assert "pt:Hello" not in written

    @pytest.mark.asyncio
    async def test_changed_bio_before_start_aborts(self, scheduler, repository, provider, m1):
        profile = repository.get_by_id("m1")
        profile.bio = "Something else"
        repository.save(profile)

        result = await scheduler.run_job("m1", fingerprint("Hello"))

        assert result.aborted
        assert provider.calls == []

    @pytest.mark.asyncio
    async def test_language_change_mid_flight_discards_running_translation(self, service, scheduler, repository, provider):
        provider.responder = lambda text, source, target: f"{target}<-{source}:{text}"
        provider.delay = 0.05
        repository.save(TranslatableProfile(id="m4", bio="Ciao", bio_language="it"))

        assert scheduler.schedule_translations("m4")
        await asyncio.sleep(0.01)
        assert repository.get_by_id("m4").entry("en").status == TranslationStatus.PROCESSING

        profile = repository.get_by_id("m4")
        profile.bio_language = "pt"
        service.on_bio_saved(profile, force=True)
        assert repository.get_by_id("m4").entry("en").status == TranslationStatus.PENDING

        await scheduler.drain()

        profile = repository.get_by_id("m4")
        assert profile.entry("en").text == "en<-pt:Ciao"
        assert profile.entry("en").attempts == 1
        assert profile.entry("pt").text == "Ciao"
        assert profile.entry("es").text == "es<-pt:Ciao"
        written = [p.entry("en").text for p in repository.history]
        assert "en<-it:Ciao" not in written
        assert len(scheduler.registry) == 0

    @pytest.mark.asyncio
    async def test_forced_reset_mid_flight_restores_retry_budget(self, service, scheduler, repository, provider, config, m1):
        profile = repository.get_by_id("m1")
        reseed(profile, config.targets)
        profile.bio_translations["pt"] = TranslationEntry(
            status=TranslationStatus.FAILED,
            attempts=2,
            error=TranslationError(ErrorKind.REJECTED, "translate_failed_400"),
        )
        repository.save(profile)
        provider.delay = 0.05

        assert scheduler.schedule_translations("m1")
        await asyncio.sleep(0.01)
        assert repository.get_by_id("m1").entry("pt").attempts == 3

        service.force_retranslate(repository.get_by_id("m1"))
        await scheduler.drain()

        pt = repository.get_by_id("m1").entry("pt")
        assert pt.status == TranslationStatus.DONE
        assert pt.attempts == 1
        assert pt.error is None
        assert not any(p.entry("pt").is_done and p.entry("pt").attempts == 3 for p in repository.history)

    @pytest.mark.asyncio
    async def test_reset_entry_is_not_overwritten(self, scheduler, repository, provider, m1):
        original = provider.responder

        def reset_mid_flight(text, source, target):
            profile = repository.get_by_id("m1")
            profile.bio_translations[target] = TranslationEntry.pending()
            repository.save(profile)
            return original(text, source, target)

        provider.responder = reset_mid_flight

        result = await scheduler.run_job("m1", fingerprint("Hello"))

        assert result.aborted
        entry = repository.get_by_id("m1").entry("pt")
        assert entry.status == TranslationStatus.PENDING
        assert entry.attempts == 0


class TestRetryBudget:
    """Attempts and freezing of failed targets."""

    def _scheduler(self, config, repository, error):
        failing = FakeProvider("down", error=error)
        chain = ProviderChain([failing], cache=TranslationCache(10), timeout=1.0)
        cfg = BioTranslationConfig(
            targets=["en", "pt"],
            max_attempts=config.max_attempts,
            retry_bonus=config.retry_bonus,
            inter_target_delay=0.0,
        )
        return BioTranslationScheduler(repository, chain, cfg, registry=JobRegistry()), failing, cfg

    @pytest.mark.asyncio
    async def test_unavailable_provider_gets_bonus_attempts(self, config, repository, m1):
        error = ProviderError(ErrorKind.PROVIDER_UNAVAILABLE, "translate_failed_503", "down")
        scheduler, failing, cfg = self._scheduler(config, repository, error)
        cap = cfg.max_attempts + cfg.retry_bonus

        for run in range(1, cap + 3):
            await scheduler.run_job("m1", fingerprint("Hello"))
            entry = repository.get_by_id("m1").entry("pt")
            assert entry.status == TranslationStatus.FAILED
            assert entry.attempts == min(run, cap)

        entry = repository.get_by_id("m1").entry("pt")
        assert entry.error.kind == ErrorKind.PROVIDER_UNAVAILABLE
        assert len(failing.calls) == cap

    @pytest.mark.asyncio
    async def test_not_exhausted_before_cap(self, config, repository, m1):
        error = ProviderError(ErrorKind.PROVIDER_UNAVAILABLE, "translate_failed_502", "down")
        scheduler, _, cfg = self._scheduler(config, repository, error)

        for _ in range(cfg.max_attempts + cfg.retry_bonus - 1):
            await scheduler.run_job("m1", fingerprint("Hello"))
            assert not is_exhausted(repository.get_by_id("m1").entry("pt"), cfg)

        await scheduler.run_job("m1", fingerprint("Hello"))
        assert is_exhausted(repository.get_by_id("m1").entry("pt"), cfg)

    @pytest.mark.asyncio
    async def test_rejected_content_stops_at_max_attempts(self, config, repository, m1):
        error = ProviderError(ErrorKind.REJECTED, "translate_failed_400:bad language", "down")
        scheduler, failing, cfg = self._scheduler(config, repository, error)

        for _ in range(cfg.max_attempts + cfg.retry_bonus + 1):
            await scheduler.run_job("m1", fingerprint("Hello"))

        entry = repository.get_by_id("m1").entry("pt")
        assert entry.attempts == cfg.max_attempts
        assert len(failing.calls) == cfg.max_attempts

    @pytest.mark.asyncio
    async def test_failure_does_not_abort_other_targets(self, repository, m1):
        def flaky(text, source, target):
            if target == "pt":
                raise ProviderError(ErrorKind.PROVIDER_UNAVAILABLE, "translate_failed_500", "p")
            return f"{target}:{text}"

        provider = FakeProvider("p", responder=flaky)
        chain = ProviderChain([provider], cache=TranslationCache(10))
        cfg = BioTranslationConfig(targets=["en", "pt", "es"], inter_target_delay=0.0)
        scheduler = BioTranslationScheduler(repository, chain, cfg)

        result = await scheduler.run_job("m1", fingerprint("Hello"))

        assert result.failed == ["pt"]
        assert result.translated == ["es"]
        assert repository.get_by_id("m1").entry("es").status == TranslationStatus.DONE


class TestFallbackChain:

    @pytest.mark.asyncio
    async def test_second_provider_result_written_once(self, m1):
        repository = RecordingRepository([m1])
        first = FakeProvider("first", error=ProviderError(ErrorKind.PROVIDER_UNAVAILABLE, "translate_failed_502", "first"))
        second = FakeProvider("second", responder=lambda text, s, t: "Olá")
        chain = ProviderChain([first, second], cache=TranslationCache(10))
        cfg = BioTranslationConfig(targets=["en", "pt"], inter_target_delay=0.0)
        scheduler = BioTranslationScheduler(repository, chain, cfg)

        await scheduler.run_job("m1", fingerprint("Hello"))

        entry = repository.get_by_id("m1").entry("pt")
        assert entry.status == TranslationStatus.DONE
        assert entry.text == "Olá"
        assert entry.attempts == 1
        assert entry.error is None
        done_writes = [p for p in repository.history if p.entry("pt").status == TranslationStatus.DONE]
        assert len(done_writes) == 1
        assert len(first.calls) == 1 and len(second.calls) == 1
