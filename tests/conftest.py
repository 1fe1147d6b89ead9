"""
Pytest Configuration and Fixtures
"""

import pytest

from core.bio_translation import (
    BioTranslationConfig,
    BioTranslationScheduler,
    BioTranslationService,
    JobRegistry,
    ProviderChain,
    TranslatableProfile,
    TranslationCache,
)

from tests.fakes import FakeProvider, RecordingRepository


@pytest.fixture
def config():
    """Three targets, no throttling"""
    return BioTranslationConfig(
        targets=["en", "pt", "es"],
        primary_urls=["https://lt.test"],
        max_attempts=3,
        retry_bonus=2,
        inter_target_delay=0.0,
        provider_timeout=1.0,
    )


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def repository():
    return RecordingRepository()


@pytest.fixture
def chain(provider):
    return ProviderChain([provider], cache=TranslationCache(100), timeout=1.0)


@pytest.fixture
def scheduler(repository, chain, config):
    return BioTranslationScheduler(repository, chain, config, registry=JobRegistry())


@pytest.fixture
def service(repository, scheduler, config):
    return BioTranslationService(repository, scheduler, config)


@pytest.fixture
def m1(repository):
    """Stored profile with an English bio and no translations yet"""
    profile = TranslatableProfile(id="m1", bio="Hello", bio_language="en", display_name="Ana")
    repository.save(profile)
    return profile
