# tracker.py
# ------------------------------------------------------------------------------------
#  Job Tracker: owns the handle -> provider id map and answers status polls.
#  - image kind: id is a handle issued by track(); unknown handles are forwarded
#                to the provider unchanged
#  - video kind: id is the provider's own id, never translated
#  Status is always re-fetched from the provider and relayed as-is.
# ------------------------------------------------------------------------------------

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Optional

from job_store import GenerationJob, JobStore
from provider_client import ProviderClient, ProviderError
from styles import JobKind

logger = logging.getLogger(__name__)


class LookupFailed(Exception):
    pass


@dataclass(frozen=True)
class JobStatus:
    status: str
    output: Optional[Any] = None   # URL string, list of URLs, or whatever the model returns
    error: Optional[Any] = None


class JobTracker:
    def __init__(self, provider: ProviderClient, store: JobStore):
        self.provider = provider
        self.store = store

    def track(self, provider_id: str) -> str:
        """Mint a fresh handle aliasing ``provider_id`` and return it."""
        handle = uuid.uuid4().hex
        self.store.put(GenerationJob(internal_id=handle, provider_id=provider_id))
        logger.info("issued handle %s for prediction %s", handle, provider_id)
        return handle

    def provider_id_for(self, job_id: str, kind: JobKind) -> str:
        if JobKind(kind) is JobKind.VIDEO:
            return job_id
        job = self.store.get(job_id)
        if job is None:
            logger.warning("handle %s not tracked, querying provider with it directly", job_id)
            return job_id
        return job.provider_id

    async def resolve_status(self, job_id: str, kind: JobKind) -> JobStatus:
        provider_id = self.provider_id_for(job_id, kind)
        try:
            pred = await self.provider.get_prediction(provider_id)
        except ProviderError as e:
            raise LookupFailed(str(e)) from e
        return JobStatus(status=pred["status"], output=pred.get("output"), error=pred.get("error"))
