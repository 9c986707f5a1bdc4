import os
from dataclasses import dataclass, fields

import httpx


@dataclass(frozen=True)
class HTTPTimeoutConfig:
	"""Timeouts (seconds) for calls to the prompt service."""

	connect: float = 5.0
	read: float = 15.0
	write: float = 15.0
	total: float = 15.0

	def __post_init__(self) -> None:
		for f in fields(self):
			if getattr(self, f.name) <= 0:
				raise ValueError(f"{f.name} timeout must be positive")

	@staticmethod
	def from_env(prefix: str = "") -> "HTTPTimeoutConfig":
		env_prefix = f"{prefix}_" if prefix else ""
		defaults = HTTPTimeoutConfig()
		return HTTPTimeoutConfig(
			connect=float(os.getenv(f"{env_prefix}HTTP_CONNECT_TIMEOUT", defaults.connect)),
			read=float(os.getenv(f"{env_prefix}HTTP_READ_TIMEOUT", defaults.read)),
			write=float(os.getenv(f"{env_prefix}HTTP_WRITE_TIMEOUT", defaults.write)),
			total=float(os.getenv(f"{env_prefix}HTTP_TOTAL_TIMEOUT", defaults.total)),
		)

	def to_httpx_timeout(self) -> httpx.Timeout:
		# httpx applies `timeout` to any phase not given explicitly (pool)
		return httpx.Timeout(self.total, connect=self.connect, read=self.read, write=self.write)
