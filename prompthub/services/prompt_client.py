from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from prompthub.cache import MemoryPromptCache, PromptCache, RedisPromptCache
from prompthub.catalog import PromptCatalog
from prompthub.clients.prompt_api import PromptApiClient
from prompthub.config.base import ClientConfig, get_client_config
from prompthub.domain.errors import PromptFetchError, PromptNotFoundError, TransientHTTPError
from prompthub.domain.prompt import Prompt
from prompthub.domain.schemas import PromptReference, PromptResolvedDTO
from prompthub.storage.local_store import LocalPromptStore
from prompthub.telemetry.metrics import prompt_cache_hit, prompt_cache_miss, prompt_fetch_total

logger = logging.getLogger(__name__)


def _mask(secret: str) -> str:
	if len(secret) <= 8:
		return "***"
	return f"{secret[:4]}...{secret[-4:]}"


class PromptClient:
	"""Fetches named, versioned prompts for one project.

	Construction is purely local: credentials are stored as given and only
	sent with the first fetch, so bad credentials surface from
	:meth:`get_prompt` as :class:`AuthenticationError`.
	"""

	def __init__(
		self,
		api_key: str,
		project_id: str,
		*,
		config: Optional[ClientConfig] = None,
		catalog: Optional[PromptCatalog] = None,
		cache: Optional[PromptCache] = None,
		local_store: Optional[LocalPromptStore] = None,
		transport: Optional[httpx.AsyncBaseTransport] = None,
		retry_backoff: float = 0.5,
	):
		self._config = config or get_client_config()
		self._api_key = api_key
		self._project_id = project_id
		self._catalog = catalog
		self._cache: PromptCache = cache if cache is not None else self._default_cache(self._config)
		if local_store is None and self._config.prompts_dir:
			local_store = LocalPromptStore(Path(self._config.prompts_dir))
		self._local_store = local_store
		if self._config.fetch_strategy in ("local-first", "local-only") and self._local_store is None:
			raise ValueError(f"fetch strategy {self._config.fetch_strategy!r} needs a local prompt store")
		self._api = PromptApiClient(
			api_key,
			project_id,
			base_url=self._config.base_url,
			timeout=self._config.http_timeout.to_httpx_timeout(),
			max_retry=self._config.max_retry,
			retry_backoff=retry_backoff,
			transport=transport,
		)

	@staticmethod
	def _default_cache(config: ClientConfig) -> PromptCache:
		if config.redis_url:
			return RedisPromptCache(config.redis_url, config.cache_ttl_seconds, config.stale_ttl_seconds)
		return MemoryPromptCache(config.cache_ttl_seconds)

	@classmethod
	def from_env(cls, **kwargs: Any) -> "PromptClient":
		config = kwargs.pop("config", None) or ClientConfig.from_env()
		return cls(config.api_key or "", config.project_id or "", config=config, **kwargs)

	@property
	def project_id(self) -> str:
		return self._project_id

	@property
	def config(self) -> ClientConfig:
		return self._config

	async def __aenter__(self) -> "PromptClient":
		return self

	async def __aexit__(self, *exc_info) -> None:
		await self.aclose()

	async def aclose(self) -> None:
		await self._api.aclose()
		await self._cache.aclose()

	def __repr__(self) -> str:
		return f"PromptClient(api_key={_mask(self._api_key)!r}, project_id={self._project_id!r})"

	async def get_prompt(self, reference: str) -> Prompt:
		ref = PromptReference.parse(reference)
		strategy = self._config.fetch_strategy

		if strategy == "local-only":
			return self._from_local(ref, reference)
		if strategy == "local-first":
			try:
				return self._from_local(ref, reference)
			except PromptNotFoundError:
				logger.debug("prompt_local_miss", extra={"prompt": str(ref)})

		cached = await self._from_cache(ref, reference)
		if cached is not None:
			return cached

		try:
			return await self._from_remote(ref, reference)
		except TransientHTTPError:
			if strategy == "remote-only":
				raise
			fallback = await self._fallback(ref, reference, try_local=strategy == "remote-first")
			if fallback is None:
				raise
			return fallback

	def _cache_key(self, ref: PromptReference) -> str:
		return f"{self._project_id}:{ref}"

	def _build(self, payload: Dict[str, Any], ref: PromptReference, requested: str, source: str, stale: bool = False) -> Prompt:
		try:
			resolved = PromptResolvedDTO.model_validate(payload)
		except ValidationError as exc:
			raise PromptFetchError(f"malformed prompt payload for {ref}: {exc}") from exc
		got = resolved.reference
		if got.name != ref.name or (ref.pinned and got.version != ref.version):
			raise PromptFetchError(f"prompt service returned {got} for {ref}")
		schema = self._catalog.schema_for(got) if self._catalog is not None else None
		prompt_fetch_total.labels(source=source, outcome="stale" if stale else "ok").inc()
		return Prompt(resolved, requested=requested, source=source, stale=stale, schema=schema)

	def _from_local(self, ref: PromptReference, requested: str) -> Prompt:
		payload = self._local_store.load(ref)
		logger.debug("prompt_local_hit", extra={"prompt": str(ref)})
		return self._build(payload, ref, requested, source="local")

	async def _from_cache(self, ref: PromptReference, requested: str) -> Optional[Prompt]:
		payload = await self._cache.get(self._cache_key(ref))
		if payload is None:
			prompt_cache_miss.inc()
			return None
		prompt_cache_hit.inc()
		logger.debug("prompt_cache_hit", extra={"prompt": str(ref)})
		return self._build(payload, ref, requested, source="cache")

	async def _from_remote(self, ref: PromptReference, requested: str) -> Prompt:
		try:
			payload = await self._api.fetch_version(ref.name, ref.version)
		except PromptFetchError as exc:
			prompt_fetch_total.labels(source="remote", outcome=type(exc).__name__).inc()
			raise
		prompt = self._build(payload, ref, requested, source="remote")
		await self._cache.set(self._cache_key(ref), payload)
		if not ref.pinned:
			await self._cache.set(self._cache_key(prompt.reference), payload)
		logger.info("prompt_fetch_ok", extra={"prompt": str(prompt.reference), "requested": requested})
		return prompt

	async def _fallback(self, ref: PromptReference, requested: str, try_local: bool) -> Optional[Prompt]:
		payload = await self._cache.get_stale(self._cache_key(ref))
		if payload is not None:
			logger.warning("prompt_serving_stale", extra={"prompt": str(ref)})
			return self._build(payload, ref, requested, source="cache", stale=True)
		if try_local and self._local_store is not None:
			try:
				prompt = self._from_local(ref, requested)
			except PromptNotFoundError:
				return None
			logger.warning("prompt_serving_local_fallback", extra={"prompt": str(ref)})
			return prompt
		return None
