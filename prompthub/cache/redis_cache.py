import json
from typing import Optional, Dict, Any
import redis.asyncio as redis


class RedisPromptCache:
	def __init__(self, url: str, ttl_seconds: int = 300, stale_ttl_seconds: int = 86400, client=None):
		self.client = client if client is not None else redis.from_url(url, decode_responses=True)
		self._ttl = ttl_seconds
		self._stale_ttl = max(stale_ttl_seconds, ttl_seconds)

	def key(self, ref: str) -> str:
		return f"prompt:{ref}"

	async def get(self, ref: str) -> Optional[Dict[str, Any]]:
		val = await self.client.get(self.key(ref))
		return json.loads(val) if val else None

	async def get_stale(self, ref: str) -> Optional[Dict[str, Any]]:
		val = await self.client.get(f"{self.key(ref)}:stale")
		return json.loads(val) if val else None

	async def set(self, ref: str, data: Dict[str, Any]) -> None:
		body = json.dumps(data)
		await self.client.set(self.key(ref), body, ex=self._ttl)
		await self.client.set(f"{self.key(ref)}:stale", body, ex=self._stale_ttl)

	async def invalidate(self, ref: str) -> None:
		await self.client.delete(self.key(ref), f"{self.key(ref)}:stale")

	async def aclose(self) -> None:
		await self.client.aclose()
