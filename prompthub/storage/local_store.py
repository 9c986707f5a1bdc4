from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict

from prompthub.domain.errors import InvalidPromptReferenceError, PromptNotFoundError
from prompthub.domain.schemas import PromptReference, PromptResolvedDTO, VariableSpec, semver_key
from prompthub.services.prompt_renderer import validate_template

logger = logging.getLogger(__name__)

TEMPLATE_FILE = "content.j2"
VARIABLES_FILE = "variables.json"
METADATA_FILE = "prompt.json"


class LocalPromptStore:
	"""Prompts kept on disk as ``<root>/<name>/<version>/content.j2``.

	Each version directory may carry a ``variables.json`` holding the
	``{"required": [...], "optional": [...]}`` declaration; a prompt-level
	``prompt.json`` holds the description and tags.
	"""

	def __init__(self, root: str | Path):
		self.root = Path(root)

	def versions(self, name: str) -> list[str]:
		base = self.root / name
		if not base.is_dir():
			return []
		found = []
		for child in base.iterdir():
			if not (child / TEMPLATE_FILE).is_file():
				continue
			try:
				semver_key(child.name)
			except InvalidPromptReferenceError:
				logger.warning("local_prompt_bad_version_dir", extra={"path": str(child)})
				continue
			found.append(child.name)
		return sorted(found, key=semver_key)

	def resolve(self, ref: PromptReference) -> PromptReference:
		if ref.pinned:
			return ref
		versions = self.versions(ref.name)
		if not versions:
			raise PromptNotFoundError(f"no local versions for prompt {ref.name!r} under {self.root}")
		return PromptReference(name=ref.name, version=versions[-1])

	def load(self, ref: PromptReference) -> Dict[str, Any]:
		pinned = self.resolve(ref)
		vdir = self.root / pinned.name / pinned.version
		tpl_path = vdir / TEMPLATE_FILE
		if not tpl_path.is_file():
			raise PromptNotFoundError(f"prompt {pinned} not found in local store {self.root}")

		template = tpl_path.read_text(encoding="utf-8")
		variables = VariableSpec()
		var_path = vdir / VARIABLES_FILE
		if var_path.is_file():
			variables = VariableSpec.model_validate(json.loads(var_path.read_text(encoding="utf-8")))
			validate_template(template, variables)

		meta: Dict[str, Any] = {}
		meta_path = self.root / pinned.name / METADATA_FILE
		if meta_path.is_file():
			meta = json.loads(meta_path.read_text(encoding="utf-8"))

		resolved = PromptResolvedDTO.model_validate(
			{
				"prompt": {
					"id": meta.get("id"),
					"name": pinned.name,
					"description": meta.get("description"),
					"tags": meta.get("tags"),
				},
				"version": {
					"version": pinned.version,
					"template": template,
					"variables": variables.model_dump(),
				},
			}
		)
		return resolved.to_payload()

	def save(self, payload: Dict[str, Any]) -> Path:
		resolved = PromptResolvedDTO.model_validate(payload)
		vdir = self.root / resolved.prompt.name / resolved.version.version
		vdir.mkdir(parents=True, exist_ok=True)
		(vdir / TEMPLATE_FILE).write_text(resolved.version.template, encoding="utf-8")
		(vdir / VARIABLES_FILE).write_text(
			json.dumps(resolved.version.variables.model_dump(), indent=2) + "\n", encoding="utf-8"
		)
		meta = resolved.prompt.model_dump(exclude={"name"}, exclude_none=True)
		if meta:
			(self.root / resolved.prompt.name / METADATA_FILE).write_text(json.dumps(meta, indent=2) + "\n", encoding="utf-8")
		logger.info("local_prompt_saved", extra={"prompt": str(resolved.reference), "path": str(vdir)})
		return vdir
