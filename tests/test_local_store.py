import json

import pytest

from conftest import build_payload
from prompthub.domain.errors import MissingVariablesError, PromptNotFoundError, UnknownVariablesError
from prompthub.domain.schemas import PromptReference
from prompthub.storage.local_store import LocalPromptStore


def test_save_then_load(tmp_path):
	store = LocalPromptStore(tmp_path)
	payload = build_payload("greeting", "1.2.0", "Hi {{ name }}\n", required=["name"], description="Greets")
	path = store.save(payload)

	assert (path / "content.j2").read_text() == "Hi {{ name }}\n"
	loaded = store.load(PromptReference.parse("greeting@1.2.0"))
	assert loaded["version"]["template"] == "Hi {{ name }}\n"
	assert loaded["version"]["variables"] == {"required": ["name"], "optional": []}
	assert loaded["prompt"]["description"] == "Greets"


def test_latest_picks_highest_semver(tmp_path):
	store = LocalPromptStore(tmp_path)
	for v in ("0.2.0", "0.10.0", "0.9.9"):
		store.save(build_payload("greeting", v, f"v{v}"))
	(tmp_path / "greeting" / "draft").mkdir()
	(tmp_path / "greeting" / "draft" / "content.j2").write_text("ignored")

	assert store.versions("greeting") == ["0.2.0", "0.9.9", "0.10.0"]
	loaded = store.load(PromptReference.parse("greeting"))
	assert loaded["version"]["version"] == "0.10.0"


def test_missing_prompt(tmp_path):
	store = LocalPromptStore(tmp_path)
	with pytest.raises(PromptNotFoundError):
		store.load(PromptReference.parse("nope@1.0.0"))
	with pytest.raises(PromptNotFoundError):
		store.load(PromptReference.parse("nope"))


def test_declared_variables_checked_against_template(tmp_path):
	vdir = tmp_path / "greeting" / "1.0.0"
	vdir.mkdir(parents=True)
	(vdir / "content.j2").write_text("Hi {{ name }} from {{ company }}")
	(vdir / "variables.json").write_text(json.dumps({"required": ["name"], "optional": []}))
	store = LocalPromptStore(tmp_path)
	with pytest.raises(UnknownVariablesError):
		store.load(PromptReference.parse("greeting@1.0.0"))

	(vdir / "variables.json").write_text(json.dumps({"required": ["name", "company", "tone"]}))
	with pytest.raises(MissingVariablesError):
		store.load(PromptReference.parse("greeting@1.0.0"))


def test_template_without_variables_file(tmp_path):
	vdir = tmp_path / "plain" / "0.0.1"
	vdir.mkdir(parents=True)
	(vdir / "content.j2").write_text("static text")
	loaded = LocalPromptStore(tmp_path).load(PromptReference.parse("plain@0.0.1"))
	assert loaded["version"]["variables"] == {"required": [], "optional": []}
