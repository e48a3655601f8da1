# provider_client.py
import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from settings import Settings

logger = logging.getLogger(__name__)


class ProviderError(Exception):
    pass


class UpstreamUnavailable(ProviderError):
    """Network failure, timeout, missing credentials or a non-2xx answer."""


class MalformedUpstreamResponse(ProviderError):
    """The provider answered 2xx but the body is not the expected JSON object."""


class ProviderClient:
    """
    Thin async wrapper around the predictions API:
      POST {base}/predictions        {"version": model, "input": {...}} -> {"id": ...}
      GET  {base}/predictions/{id}   -> {"status": ..., "output": ..., "error": ...}
    One request per call, no retries.
    """

    def __init__(
        self,
        api_token: str,
        base_url: str = "https://api.replicate.com/v1",
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_token = api_token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "ProviderClient":
        return cls(
            api_token=settings.replicate_api_token,
            base_url=settings.replicate_api_base,
            timeout=settings.provider_timeout_sec,
            **kwargs,
        )

    def _headers(self) -> Dict[str, str]:
        if not self.api_token:
            raise UpstreamUnavailable("REPLICATE_API_TOKEN not set")
        return {
            "Authorization": f"Bearer {self.api_token}",
            "Content-Type": "application/json",
        }

    def _client(self) -> httpx.AsyncClient:
        timeout = httpx.Timeout(self.timeout, connect=min(self.timeout, 10.0)) if self.timeout else None
        return httpx.AsyncClient(headers=self._headers(), timeout=timeout, transport=self._transport)

    async def _request(self, method: str, url: str, **kwargs) -> Dict[str, Any]:
        try:
            async with self._client() as client:
                r = await client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("provider %s %s failed: %s", method, url, e.__class__.__name__)
            raise UpstreamUnavailable(f"{method} {url}: {e}") from e

        if r.status_code >= 300:
            logger.warning("provider %s %s answered %s", method, url, r.status_code)
            raise UpstreamUnavailable(f"{method} {url}: {r.status_code} {r.text[:500]}")

        try:
            data = r.json()
        except ValueError as e:
            raise MalformedUpstreamResponse(f"{method} {url}: body is not JSON") from e
        if not isinstance(data, dict):
            raise MalformedUpstreamResponse(f"{method} {url}: expected an object, got {type(data).__name__}")
        return data

    async def create_prediction(self, model: str, input: Dict[str, Any]) -> str:
        """Start a prediction and return the provider-assigned id."""
        if not model:
            raise UpstreamUnavailable("model is not configured")
        data = await self._request(
            "POST",
            f"{self.base_url}/predictions",
            json={"version": model, "input": input},
        )
        pred_id = data.get("id")
        if not isinstance(pred_id, str) or not pred_id:
            raise MalformedUpstreamResponse("create response has no id")
        return pred_id

    async def get_prediction(self, prediction_id: str) -> Dict[str, Any]:
        data = await self._request("GET", f"{self.base_url}/predictions/{quote(prediction_id, safe='')}")
        if not isinstance(data.get("status"), str):
            raise MalformedUpstreamResponse("status response has no status")
        return data
