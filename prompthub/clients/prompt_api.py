from __future__ import annotations

import logging
from time import perf_counter
from typing import Any, Dict, Optional

import httpx
from opentelemetry import trace
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from prompthub.domain.errors import AuthenticationError, PromptFetchError, PromptNotFoundError, TransientHTTPError
from prompthub.telemetry.metrics import prompt_fetch_latency_ms

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

USER_AGENT = "prompthub-client/0.1.0"


class PromptApiClient:
	def __init__(
		self,
		api_key: str,
		project_id: str,
		base_url: str,
		timeout: httpx.Timeout | float = 15.0,
		max_retry: int = 3,
		retry_backoff: float = 0.5,
		transport: Optional[httpx.AsyncBaseTransport] = None,
	):
		self._api_key = api_key
		self._project_id = project_id
		self._base_url = base_url.rstrip("/")
		self._timeout = timeout
		self._max_retry = max_retry
		self._retry_backoff = retry_backoff
		self._transport = transport
		self._client: httpx.AsyncClient | None = None

	def _headers(self) -> Dict[str, str]:
		return {
			"Authorization": f"Bearer {self._api_key}",
			"X-Project-Id": self._project_id,
			"Accept": "application/json",
			"User-Agent": USER_AGENT,
		}

	def _ensure_client(self) -> httpx.AsyncClient:
		if self._client is None:
			self._client = httpx.AsyncClient(
				base_url=self._base_url,
				timeout=self._timeout,
				headers=self._headers(),
				transport=self._transport,
			)
		return self._client

	async def aclose(self) -> None:
		if self._client is not None:
			await self._client.aclose()
			self._client = None

	async def fetch_version(self, name: str, version: str) -> Dict[str, Any]:
		path = f"/prompts/{name}/versions/{version}"
		with tracer.start_as_current_span("prompt.fetch") as span:
			span.set_attribute("prompt.name", name)
			span.set_attribute("prompt.version", version)
			async for attempt in AsyncRetrying(
				stop=stop_after_attempt(self._max_retry),
				wait=wait_exponential(multiplier=self._retry_backoff, min=self._retry_backoff, max=4),
				retry=retry_if_exception_type(TransientHTTPError),
				reraise=True,
			):
				with attempt:
					n = attempt.retry_state.attempt_number
					if n > 1:
						logger.info("prompt_fetch_retry", extra={"prompt": f"{name}@{version}", "attempt": n})
					return await self._get(path)
		raise AssertionError("unreachable")

	async def _get(self, path: str) -> Dict[str, Any]:
		client = self._ensure_client()
		start = perf_counter()
		try:
			r = await client.get(path)
		except httpx.TimeoutException as e:
			raise TransientHTTPError(f"Timeout: {e}") from e
		except httpx.TransportError as e:
			raise TransientHTTPError(f"Transport error: {e}") from e
		finally:
			prompt_fetch_latency_ms.observe((perf_counter() - start) * 1000)

		if r.status_code in (401, 403):
			raise AuthenticationError(f"prompt service rejected credentials ({r.status_code})", status_code=r.status_code)
		if r.status_code == 404:
			raise PromptNotFoundError(f"prompt not found: {path}", status_code=404)
		if r.status_code >= 500:
			raise TransientHTTPError(f"Upstream {r.status_code}: {r.text[:200]}", status_code=r.status_code)
		if r.status_code >= 400:
			raise PromptFetchError(f"prompt service error {r.status_code}: {r.text[:200]}", status_code=r.status_code)
		try:
			return r.json()
		except ValueError as e:
			raise PromptFetchError(f"prompt service returned invalid JSON for {path}") from e
