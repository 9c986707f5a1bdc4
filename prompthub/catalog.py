from __future__ import annotations

from typing import Callable, Dict, Optional, Type, TypeVar

from pydantic import BaseModel

from prompthub.domain.schemas import PromptReference

ModelT = TypeVar("ModelT", bound=Type[BaseModel])


class PromptCatalog:
	"""Known prompts for a project, keyed by ``name@version``.

	Each entry is a pydantic model describing the variables that version
	accepts. Prompts fetched through a client holding a catalog validate
	their variable mapping against the matching model before compiling.
	"""

	def __init__(self, entries: Optional[Dict[str, Type[BaseModel]]] = None):
		self._entries: Dict[str, Type[BaseModel]] = {}
		for ref, model in (entries or {}).items():
			self.register(ref, model)

	def register(self, reference: str, model: Type[BaseModel]) -> None:
		ref = PromptReference.parse(reference)
		if not ref.pinned:
			raise ValueError(f"catalog entries must be pinned to a version: {reference!r}")
		if not (isinstance(model, type) and issubclass(model, BaseModel)):
			raise TypeError("catalog schema must be a pydantic BaseModel subclass")
		self._entries[str(ref)] = model

	def prompt(self, reference: str) -> Callable[[ModelT], ModelT]:
		def deco(model: ModelT) -> ModelT:
			self.register(reference, model)
			return model
		return deco

	def schema_for(self, reference: PromptReference | str) -> Optional[Type[BaseModel]]:
		ref = PromptReference.parse(reference) if isinstance(reference, str) else reference
		return self._entries.get(str(ref))

	def __contains__(self, reference: object) -> bool:
		if not isinstance(reference, (str, PromptReference)):
			return False
		return self.schema_for(reference) is not None

	def __len__(self) -> int:
		return len(self._entries)
