from __future__ import annotations

import re
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import InvalidPromptReferenceError

LATEST = "latest"

NAME_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.\-]*$")
SEMVER_PATTERN = re.compile(r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)$")


def semver_key(version: str) -> Tuple[int, int, int]:
	m = SEMVER_PATTERN.match(version)
	if not m:
		raise InvalidPromptReferenceError(f"not a semantic version: {version!r}")
	return int(m.group(1)), int(m.group(2)), int(m.group(3))


class PromptReference(BaseModel):
	"""A ``name@version`` key identifying one version of a named prompt.

	``version`` is either ``MAJOR.MINOR.PATCH`` or ``latest``; a bare name
	parses as ``name@latest``.
	"""

	model_config = ConfigDict(frozen=True)

	name: str
	version: str = LATEST

	@classmethod
	def parse(cls, ref: str) -> "PromptReference":
		if not isinstance(ref, str):
			raise InvalidPromptReferenceError(f"prompt reference must be a string, got {type(ref).__name__}")
		if ref != ref.strip():
			raise InvalidPromptReferenceError(f"invalid prompt reference {ref!r}: surrounding whitespace")
		if ref.count("@") > 1:
			raise InvalidPromptReferenceError(f"invalid prompt reference {ref!r}: more than one '@'")
		name, sep, version = ref.partition("@")
		if not sep:
			version = LATEST
		elif not version:
			raise InvalidPromptReferenceError(f"invalid prompt reference {ref!r}: empty version")
		if not name or not NAME_PATTERN.match(name):
			raise InvalidPromptReferenceError(f"invalid prompt reference {ref!r}: bad name")
		if version != LATEST and not SEMVER_PATTERN.match(version):
			raise InvalidPromptReferenceError(f"invalid prompt reference {ref!r}: version must be semver or 'latest'")
		return cls(name=name, version=version)

	@property
	def pinned(self) -> bool:
		return self.version != LATEST

	def __str__(self) -> str:
		return f"{self.name}@{self.version}"


class VariableSpec(BaseModel):
	required: List[str] = Field(default_factory=list)
	optional: List[str] = Field(default_factory=list)

	@property
	def declared(self) -> set[str]:
		return set(self.required) | set(self.optional)


class PromptDTO(BaseModel):
	id: Optional[str] = None
	name: str
	description: Optional[str] = None
	tags: Optional[List[str]] = None


class PromptVersionDTO(BaseModel):
	id: Optional[str] = None
	version: str
	template: str
	variables: VariableSpec = Field(default_factory=VariableSpec)
	created_at: Optional[str] = None

	@field_validator("version")
	@classmethod
	def _semver(cls, v: str) -> str:
		semver_key(v)
		return v

	@field_validator("variables", mode="before")
	@classmethod
	def _none_is_empty(cls, v: Any) -> Any:
		return v if v is not None else {}


class PromptResolvedDTO(BaseModel):
	prompt: PromptDTO
	version: PromptVersionDTO

	@property
	def reference(self) -> PromptReference:
		return PromptReference(name=self.prompt.name, version=self.version.version)

	def to_payload(self) -> Dict[str, Any]:
		return self.model_dump(mode="json")
