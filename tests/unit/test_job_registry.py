"""Tests for the in-flight job registry."""

import asyncio
from concurrent.futures import ThreadPoolExecutor

import pytest

from core.bio_translation import JobRegistry, job_key


class TestJobRegistry:

    def test_job_key(self):
        assert job_key("m1", "abc") == "m1:abc"

    def test_claim_once(self):
        registry = JobRegistry()
        assert registry.claim("m1:abc") is True
        assert registry.claim("m1:abc") is False
        assert registry.claim("m1:def") is True
        assert len(registry) == 2

    def test_release_allows_new_claim(self):
        registry = JobRegistry()
        registry.claim("m1:abc")
        registry.release("m1:abc")

        assert not registry.is_running("m1:abc")
        assert registry.started_at("m1:abc") is None
        assert registry.claim("m1:abc") is True

    def test_concurrent_claims_from_threads(self):
        registry = JobRegistry()

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda _: registry.claim("m1:abc"), range(50)))

        assert results.count(True) == 1

    def test_started_at(self):
        registry = JobRegistry()
        registry.claim("m1:abc")
        assert registry.started_at("m1:abc").tzinfo is not None
        assert registry.keys() == ["m1:abc"]

    @pytest.mark.asyncio
    async def test_wait_all(self):
        registry = JobRegistry()
        done = []

        async def job(key):
            await asyncio.sleep(0.01)
            done.append(key)
            registry.release(key)

        for key in ("a:1", "b:2"):
            registry.claim(key)
            registry.attach(key, asyncio.get_running_loop().create_task(job(key)))

        await registry.wait_all()

        assert sorted(done) == ["a:1", "b:2"]
        assert len(registry) == 0

    @pytest.mark.asyncio
    async def test_wait_all_with_nothing_running(self):
        await JobRegistry().wait_all()
