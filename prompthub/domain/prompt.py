from __future__ import annotations

import logging
from functools import cached_property
from typing import Any, Mapping, Optional, Set, Type

from jinja2 import Template
from pydantic import BaseModel, ValidationError

from prompthub.domain.errors import InvalidVariablesError, MissingVariablesError, PromptCompileError, UnknownVariablesError
from prompthub.domain.schemas import PromptReference, PromptResolvedDTO, VariableSpec
from prompthub.services import prompt_renderer
from prompthub.telemetry.metrics import prompt_compile_errors

logger = logging.getLogger(__name__)


class Prompt:
	"""A fetched prompt version, ready to be compiled locally."""

	def __init__(
		self,
		resolved: PromptResolvedDTO,
		*,
		requested: str | None = None,
		source: str = "remote",
		stale: bool = False,
		schema: Optional[Type[BaseModel]] = None,
	):
		self._resolved = resolved
		self.reference: PromptReference = resolved.reference
		self.requested = requested if requested is not None else str(self.reference)
		self.source = source
		self.stale = stale
		self.schema = schema

	@property
	def name(self) -> str:
		return self.reference.name

	@property
	def version(self) -> str:
		return self.reference.version

	@property
	def template(self) -> str:
		return self._resolved.version.template

	@property
	def variables(self) -> VariableSpec:
		return self._resolved.version.variables

	@property
	def description(self) -> Optional[str]:
		return self._resolved.prompt.description

	@cached_property
	def placeholders(self) -> Set[str]:
		return prompt_renderer.extract_placeholders(self.template)

	@cached_property
	def _compiled(self) -> Template:
		return prompt_renderer.compile_template(self.template)

	@property
	def required_variables(self) -> Set[str]:
		return set(self.variables.required) | (self.placeholders - set(self.variables.optional))

	def compile(self, variables: Mapping[str, Any] | None = None, *, strict: bool = False) -> str:
		values = dict(variables or {})
		ref = str(self.reference)
		try:
			if self.schema is not None:
				values = self._validate_schema(values)

			missing = self.required_variables - values.keys()
			if missing:
				raise MissingVariablesError(missing, reference=ref)

			extra = values.keys() - self.placeholders - self.variables.declared - self._schema_fields
			if extra:
				if strict:
					raise UnknownVariablesError(extra, reference=ref)
				logger.debug("prompt_compile_extra_variables", extra={"prompt": ref, "extra": sorted(extra)})

			return prompt_renderer.render(self._compiled, values)
		except PromptCompileError as exc:
			prompt_compile_errors.labels(reason=type(exc).__name__).inc()
			raise

	@property
	def _schema_fields(self) -> Set[str]:
		return set(self.schema.model_fields) if self.schema is not None else set()

	def _validate_schema(self, values: dict[str, Any]) -> dict[str, Any]:
		try:
			model = self.schema.model_validate(values)
		except ValidationError as exc:
			raise InvalidVariablesError(f"variables for {self.reference} failed validation: {exc}") from exc
		validated = model.model_dump(exclude_none=True)
		# keep keys the schema does not know about so strict mode can still see them
		return {**values, **validated}

	def to_payload(self) -> dict[str, Any]:
		return self._resolved.to_payload()

	def __repr__(self) -> str:
		return f"Prompt({self.reference}, source={self.source!r}{', stale' if self.stale else ''})"
