# job_store.py
import time, threading
from abc import ABC, abstractmethod
from collections import OrderedDict
from dataclasses import dataclass, field, replace
from typing import Callable, Optional


@dataclass(frozen=True)
class GenerationJob:
    internal_id: str
    provider_id: str
    created_at: float = field(default_factory=time.time)


class JobStore(ABC):
    """Handle -> provider job map. Entries are immutable once put."""

    @abstractmethod
    def put(self, job: GenerationJob) -> None: ...

    @abstractmethod
    def get(self, internal_id: str) -> Optional[GenerationJob]: ...


class InMemoryJobStore(JobStore):
    """
    Process-local store. Optional bounds:
      ttl_sec      -> entries older than this are dropped on access
      max_entries  -> oldest entries are evicted past this size
    """

    def __init__(self, ttl_sec: int = 0, max_entries: int = 0, clock: Callable[[], float] = time.time):
        self._jobs: "OrderedDict[str, GenerationJob]" = OrderedDict()
        self._lock = threading.Lock()
        self._ttl = ttl_sec
        self._max = max_entries
        self._clock = clock

    def _expired(self, job: GenerationJob) -> bool:
        return bool(self._ttl) and self._clock() - job.created_at > self._ttl

    def _evict(self):
        # insertion order == age order since entries are never updated
        while self._jobs:
            oldest = next(iter(self._jobs.values()))
            if not self._expired(oldest):
                break
            self._jobs.popitem(last=False)
        if self._max:
            while len(self._jobs) > self._max:
                self._jobs.popitem(last=False)

    def put(self, job: GenerationJob) -> None:
        with self._lock:
            if job.internal_id in self._jobs:
                raise KeyError(f"handle already issued: {job.internal_id}")
            # created_at always comes from the store clock
            self._jobs[job.internal_id] = replace(job, created_at=self._clock())
            self._evict()

    def get(self, internal_id: str) -> Optional[GenerationJob]:
        with self._lock:
            self._evict()
            return self._jobs.get(internal_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._jobs)
