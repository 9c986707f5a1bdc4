from typing import Any, Dict, Optional, Protocol

from .memory_cache import MemoryPromptCache
from .redis_cache import RedisPromptCache


class PromptCache(Protocol):
	async def get(self, key: str) -> Optional[Dict[str, Any]]: ...

	async def get_stale(self, key: str) -> Optional[Dict[str, Any]]: ...

	async def set(self, key: str, payload: Dict[str, Any]) -> None: ...

	async def invalidate(self, key: str) -> None: ...

	async def aclose(self) -> None: ...


__all__ = ["PromptCache", "MemoryPromptCache", "RedisPromptCache"]
