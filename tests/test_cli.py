from dataclasses import replace

import pytest
from typer.testing import CliRunner

from prompthub import cli
from prompthub.services.prompt_client import PromptClient

runner = CliRunner()


@pytest.fixture(autouse=True)
def fake_backend(monkeypatch, service, config):
	seen = {}

	def _make_client(api_key, project_id, base_url, **overrides):
		seen["api_key"] = api_key
		seen["project_id"] = project_id
		return PromptClient(
			api_key or "",
			project_id or "",
			config=replace(config, **overrides),
			transport=service.transport(),
			retry_backoff=0,
		)

	monkeypatch.setattr(cli, "_make_client", _make_client)
	monkeypatch.setattr(cli, "setup_json_logger", lambda level=None: None)
	return seen


def test_compile_command(fake_backend):
	res = runner.invoke(cli.app, ["compile", "hello-world@0.0.1", "--var", "name=John", "--api-key", "k", "--project-id", "p"])
	assert res.exit_code == 0, res.output
	assert res.output == "Hello, John!"
	assert fake_backend == {"api_key": "k", "project_id": "p"}


def test_compile_missing_variable_exits_nonzero():
	res = runner.invoke(cli.app, ["compile", "hello-world@0.0.1"])
	assert res.exit_code == 1


def test_compile_bad_var_syntax():
	res = runner.invoke(cli.app, ["compile", "hello-world@0.0.1", "--var", "name"])
	assert res.exit_code != 0


def test_compile_not_found():
	res = runner.invoke(cli.app, ["compile", "missing@1.0.0"])
	assert res.exit_code == 1


def test_show_command():
	res = runner.invoke(cli.app, ["show", "hello-world"])
	assert res.exit_code == 0, res.output
	assert "hello-world@0.0.1" in res.output
	assert "required: name" in res.output
	assert "Hello, {{ name }}!" in res.output


def test_pull_command(tmp_path):
	res = runner.invoke(cli.app, ["pull", "hello-world@0.0.1", "--dir", str(tmp_path)])
	assert res.exit_code == 0, res.output
	assert (tmp_path / "hello-world" / "0.0.1" / "content.j2").read_text() == "Hello, {{ name }}!"


def test_show_prints_description(service):
	service.prompts["hello-world"]["0.0.1"]["prompt"]["description"] = "Greets a user by name"
	res = runner.invoke(cli.app, ["show", "hello-world@0.0.1"])
	assert res.exit_code == 0, res.output
	assert "Greets a user by name" in res.output
