import os
from dataclasses import dataclass, field
from typing import Optional

from .timeout_config import HTTPTimeoutConfig

DEFAULT_BASE_URL = "https://api.prompthub.dev/v1"

FETCH_STRATEGIES = ("remote-first", "local-first", "remote-only", "local-only")


@dataclass(frozen=True)
class ClientConfig:
	base_url: str = DEFAULT_BASE_URL
	api_key: Optional[str] = None
	project_id: Optional[str] = None
	fetch_strategy: str = "remote-first"
	cache_ttl_seconds: int = 300
	stale_ttl_seconds: int = 86400
	max_retry: int = 3
	prompts_dir: Optional[str] = None
	redis_url: Optional[str] = None
	http_timeout: HTTPTimeoutConfig = field(default_factory=lambda: HTTPTimeoutConfig.from_env("PROMPTHUB"))

	def __post_init__(self) -> None:
		if self.fetch_strategy not in FETCH_STRATEGIES:
			raise ValueError(
				f"invalid fetch strategy {self.fetch_strategy!r}, expected one of {', '.join(FETCH_STRATEGIES)}"
			)
		if self.max_retry < 1:
			raise ValueError("max_retry must be >= 1")

	@staticmethod
	def from_env() -> "ClientConfig":
		return ClientConfig(
			base_url=os.getenv("PROMPTHUB_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
			api_key=os.getenv("PROMPTHUB_API_KEY") or None,
			project_id=os.getenv("PROMPTHUB_PROJECT_ID") or None,
			fetch_strategy=os.getenv("PROMPTHUB_FETCH_STRATEGY", "remote-first"),
			cache_ttl_seconds=int(os.getenv("PROMPTHUB_CACHE_TTL_SECONDS", "300")),
			stale_ttl_seconds=int(os.getenv("PROMPTHUB_STALE_TTL_SECONDS", "86400")),
			max_retry=int(os.getenv("PROMPTHUB_MAX_RETRY", "3")),
			prompts_dir=os.getenv("PROMPTHUB_PROMPTS_DIR") or None,
			redis_url=os.getenv("PROMPTHUB_REDIS_URL") or None,
			http_timeout=HTTPTimeoutConfig.from_env("PROMPTHUB"),
		)


_config_instance: Optional[ClientConfig] = None


def get_client_config() -> ClientConfig:
	global _config_instance
	if _config_instance is None:
		_config_instance = ClientConfig.from_env()
	return _config_instance


def reset_client_config() -> None:
	global _config_instance
	_config_instance = None
