from .catalog import PromptCatalog
from .config import ClientConfig, get_client_config
from .domain.errors import (
	AuthenticationError,
	InvalidPromptReferenceError,
	InvalidVariablesError,
	MissingVariablesError,
	PromptCompileError,
	PromptFetchError,
	PromptHubError,
	PromptNotFoundError,
	TemplateRenderError,
	TransientHTTPError,
	UnknownVariablesError,
)
from .domain.prompt import Prompt
from .domain.schemas import PromptReference, VariableSpec
from .services.prompt_client import PromptClient

__version__ = "0.1.0"

__all__ = [
	"PromptClient",
	"Prompt",
	"PromptCatalog",
	"PromptReference",
	"VariableSpec",
	"ClientConfig",
	"get_client_config",
	"PromptHubError",
	"InvalidPromptReferenceError",
	"PromptFetchError",
	"AuthenticationError",
	"PromptNotFoundError",
	"TransientHTTPError",
	"PromptCompileError",
	"MissingVariablesError",
	"UnknownVariablesError",
	"InvalidVariablesError",
	"TemplateRenderError",
]
