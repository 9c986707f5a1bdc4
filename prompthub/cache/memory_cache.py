from __future__ import annotations

import time
from typing import Any, Callable, Dict, Optional, Tuple


class MemoryPromptCache:
	def __init__(self, ttl_seconds: int = 300, clock: Callable[[], float] = time.monotonic):
		self._ttl = ttl_seconds
		self._clock = clock
		self._store: Dict[str, Tuple[float, Dict[str, Any]]] = {}

	async def get(self, key: str) -> Optional[Dict[str, Any]]:
		cached = self._store.get(key)
		if cached and cached[0] > self._clock():
			return cached[1]
		return None

	async def get_stale(self, key: str) -> Optional[Dict[str, Any]]:
		cached = self._store.get(key)
		return cached[1] if cached else None

	async def set(self, key: str, payload: Dict[str, Any]) -> None:
		self._store[key] = (self._clock() + self._ttl, payload)

	async def invalidate(self, key: str) -> None:
		self._store.pop(key, None)

	async def aclose(self) -> None:
		self._store.clear()
