"""Shared pytest fixtures for the gateway tests.

The upstream predictions API is replaced by :class:`FakeProvider`, an
``httpx.MockTransport`` handler that records every request and keeps an
in-memory table of predictions, so no network access happens.
"""

import json
from typing import Any, Dict, List

import httpx
import pytest
from fastapi.testclient import TestClient

from job_store import InMemoryJobStore
from main import create_app
from provider_client import ProviderClient
from settings import Settings
from submitter import JobSubmitter
from tracker import JobTracker


class FakeProvider:
    """In-memory stand-in for the predictions API."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.predictions: Dict[str, Dict[str, Any]] = {}
        self.create_status = 201
        self.create_body: Any = None
        self._counter = 0

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method == "POST":
            if self.create_status >= 300:
                return httpx.Response(self.create_status, text="upstream exploded")
            if self.create_body is not None:
                return httpx.Response(self.create_status, json=self.create_body)
            self._counter += 1
            pred_id = f"pred{self._counter}"
            self.predictions[pred_id] = {"id": pred_id, "status": "starting", "output": None, "error": None}
            return httpx.Response(201, json={"id": pred_id, "status": "starting"})

        pred_id = request.url.path.rsplit("/", 1)[-1]
        if pred_id not in self.predictions:
            return httpx.Response(404, json={"detail": "Not found."})
        return httpx.Response(200, json=self.predictions[pred_id])

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def created(self) -> List[Dict[str, Any]]:
        """Return the JSON bodies of every create call, oldest first."""
        return [json.loads(r.content) for r in self.requests if r.method == "POST"]

    def polled_paths(self) -> List[str]:
        return [r.url.path for r in self.requests if r.method == "GET"]


@pytest.fixture
def test_settings() -> Settings:
    """Settings pointing at a fake provider host with unbounded job storage.

    Returns:
        Settings instance for testing
    """
    return Settings(
        replicate_api_token="test-token",
        replicate_api_base="https://provider.test/v1",
        image_model="acme/img2img",
        video_model="acme/i2v",
        video_dance_model="acme/i2v-dance",
        job_ttl_sec=0,
        job_max_entries=0,
        max_upload_bytes=1024,
        debug=False,
    )


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def provider_client(test_settings: Settings, fake_provider: FakeProvider) -> ProviderClient:
    return ProviderClient.from_settings(test_settings, transport=fake_provider.transport)


@pytest.fixture
def store() -> InMemoryJobStore:
    return InMemoryJobStore()


@pytest.fixture
def tracker(provider_client: ProviderClient, store: InMemoryJobStore) -> JobTracker:
    return JobTracker(provider_client, store)


@pytest.fixture
def submitter(provider_client: ProviderClient, tracker: JobTracker, test_settings: Settings) -> JobSubmitter:
    return JobSubmitter(provider_client, tracker, test_settings)


@pytest.fixture
def test_client(test_settings: Settings, provider_client: ProviderClient, store: InMemoryJobStore) -> TestClient:
    """FastAPI TestClient wired to the fake provider.

    Args:
        test_settings: Settings from fixture
        provider_client: Provider client using the mock transport
        store: Job store shared with the app

    Returns:
        TestClient for the gateway app
    """
    app = create_app(settings=test_settings, provider=provider_client, store=store)
    return TestClient(app)


@pytest.fixture
def png_bytes() -> bytes:
    """A tiny fake PNG payload; the gateway never decodes it."""
    return b"\x89PNG\r\n\x1a\n" + b"\x00" * 32
