from .base import ClientConfig, DEFAULT_BASE_URL, FETCH_STRATEGIES, get_client_config, reset_client_config
from .timeout_config import HTTPTimeoutConfig

__all__ = [
	"ClientConfig",
	"DEFAULT_BASE_URL",
	"FETCH_STRATEGIES",
	"get_client_config",
	"reset_client_config",
	"HTTPTimeoutConfig",
]
