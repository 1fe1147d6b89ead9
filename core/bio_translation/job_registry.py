"""In-memory registry of running bio translation jobs"""
import asyncio
import threading
from datetime import datetime, timezone
from typing import Dict, List, Optional


def job_key(profile_id: str, content_hash: str) -> str:
    return f"{profile_id}:{content_hash}"


class JobRegistry:
    """
    Tracks in-flight jobs by ``<profile_id>:<fingerprint>``.

    ``claim()`` is an atomic test-and-set: of any number of concurrent
    callers for the same key exactly one gets True until ``release()``.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._jobs: Dict[str, Optional[asyncio.Task]] = {}
        self._started_at: Dict[str, datetime] = {}

    def claim(self, key: str) -> bool:
        """Register a job key; False if one is already running"""
        with self._lock:
            if key in self._jobs:
                return False
            self._jobs[key] = None
            self._started_at[key] = datetime.now(timezone.utc)
            return True

    def attach(self, key: str, task: asyncio.Task) -> None:
        """Keep a reference to the task running a claimed key"""
        with self._lock:
            if key in self._jobs:
                self._jobs[key] = task

    def release(self, key: str) -> None:
        with self._lock:
            self._jobs.pop(key, None)
            self._started_at.pop(key, None)

    def is_running(self, key: str) -> bool:
        with self._lock:
            return key in self._jobs

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._jobs)

    def started_at(self, key: str) -> Optional[datetime]:
        with self._lock:
            return self._started_at.get(key)

    def __len__(self) -> int:
        with self._lock:
            return len(self._jobs)

    async def wait_all(self) -> None:
        """Wait until every currently attached task has finished"""
        while True:
            with self._lock:
                tasks = [t for t in self._jobs.values() if t is not None and not t.done()]
            if not tasks:
                return
            await asyncio.gather(*tasks, return_exceptions=True)
