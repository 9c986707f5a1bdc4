import re
from typing import Any, Dict, List, Optional

import httpx
import pytest

from prompthub.config import ClientConfig, HTTPTimeoutConfig
from prompthub.domain.schemas import PromptResolvedDTO, semver_key
from prompthub.services.prompt_client import PromptClient

API_KEY = "sdk_e1EtiLj1LSPIb227Qx3lKpP4l58wh6oK"
PROJECT_ID = "99505f38-e30d-45ec-ad43-8bca8a605687"
BASE_URL = "https://prompts.test/v1"

VERSION_PATH = re.compile(r"/prompts/([^/]+)/versions/([^/]+)$")


def build_payload(name: str, version: str, template: str, required=(), optional=(), description: Optional[str] = None) -> Dict[str, Any]:
	return {
		"prompt": {"id": f"p-{name}", "name": name, "description": description, "tags": None},
		"version": {
			"id": f"v-{name}-{version}",
			"version": version,
			"template": template,
			"variables": {"required": list(required), "optional": list(optional)},
			"created_at": "2025-01-01T00:00:00+00:00",
		},
	}


def build_resolved(template: str, required=(), optional=(), name: str = "hello-world", version: str = "0.0.1") -> PromptResolvedDTO:
	return PromptResolvedDTO.model_validate(build_payload(name, version, template, required, optional))


class FakePromptService:
	def __init__(self) -> None:
		self.prompts: Dict[str, Dict[str, Dict[str, Any]]] = {}
		self.requests: List[httpx.Request] = []
		# queued failures served before normal handling: status codes or exceptions
		self.failures: List[Any] = []

	def add(self, name: str, version: str, template: str, required=(), optional=()) -> None:
		self.prompts.setdefault(name, {})[version] = build_payload(name, version, template, required, optional)

	def fail(self, *failures: Any) -> None:
		self.failures.extend(failures)

	def handler(self, request: httpx.Request) -> httpx.Response:
		self.requests.append(request)
		if self.failures:
			failure = self.failures.pop(0)
			if isinstance(failure, type) and issubclass(failure, Exception):
				raise failure("injected failure", request=request)
			return httpx.Response(failure, json={"detail": "injected"})

		m = VERSION_PATH.search(request.url.path)
		if not m:
			return httpx.Response(400, json={"detail": "bad path"})
		name, version = m.group(1), m.group(2)
		versions = self.prompts.get(name)
		if not versions:
			return httpx.Response(404, json={"detail": "prompt not found"})
		if version == "latest":
			version = max(versions, key=semver_key)
		payload = versions.get(version)
		if payload is None:
			return httpx.Response(404, json={"detail": "prompt version not found"})
		return httpx.Response(200, json=payload)

	def transport(self) -> httpx.MockTransport:
		return httpx.MockTransport(self.handler)


@pytest.fixture
def service() -> FakePromptService:
	svc = FakePromptService()
	svc.add("hello-world", "0.0.1", "Hello, {{ name }}!", required=["name"])
	return svc


@pytest.fixture
def config() -> ClientConfig:
	return ClientConfig(
		base_url=BASE_URL,
		max_retry=3,
		http_timeout=HTTPTimeoutConfig(connect=1.0, read=1.0, write=1.0, total=1.0),
	)


@pytest.fixture
def make_client(service, config):
	def _make(**kwargs) -> PromptClient:
		kwargs.setdefault("config", config)
		kwargs.setdefault("transport", service.transport())
		return PromptClient(API_KEY, PROJECT_ID, retry_backoff=0, **kwargs)
	return _make
