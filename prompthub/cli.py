import asyncio
from dataclasses import replace
from typing import Dict, List, Optional

import typer
from rich import print
from rich.console import Console

from prompthub.config.base import ClientConfig
from prompthub.domain.errors import PromptHubError
from prompthub.services.prompt_client import PromptClient
from prompthub.storage.local_store import LocalPromptStore
from prompthub.telemetry.logger import setup_json_logger

app = typer.Typer(add_completion=False, help="Fetch and compile versioned prompts.")
err = Console(stderr=True)

ApiKeyOpt = typer.Option(None, "--api-key", envvar="PROMPTHUB_API_KEY", help="Project API key")
ProjectOpt = typer.Option(None, "--project-id", envvar="PROMPTHUB_PROJECT_ID", help="Project identifier")
BaseUrlOpt = typer.Option(None, "--base-url", help="Prompt service base URL")


def _parse_vars(pairs: List[str]) -> Dict[str, str]:
	out: Dict[str, str] = {}
	for pair in pairs:
		key, sep, value = pair.partition("=")
		if not sep or not key:
			raise typer.BadParameter(f"expected key=value, got {pair!r}", param_hint="--var")
		out[key] = value
	return out


def _make_client(api_key: Optional[str], project_id: Optional[str], base_url: Optional[str], **overrides) -> PromptClient:
	config = ClientConfig.from_env()
	if base_url:
		overrides["base_url"] = base_url.rstrip("/")
	if overrides:
		config = replace(config, **overrides)
	return PromptClient(api_key or config.api_key or "", project_id or config.project_id or "", config=config)


async def _fetch(client: PromptClient, reference: str):
	async with client:
		return await client.get_prompt(reference)


def _run(client: PromptClient, reference: str):
	try:
		return asyncio.run(_fetch(client, reference))
	except PromptHubError as exc:
		err.print(f"[red]error:[/red] {exc}")
		raise typer.Exit(code=1)


@app.callback()
def main(log_level: str = typer.Option("WARNING", "--log-level", envvar="LOG_LEVEL")):
	setup_json_logger(log_level)


@app.command("compile")
def compile_prompt(
	reference: str = typer.Argument(..., help="Prompt reference, name@version"),
	var: List[str] = typer.Option([], "--var", "-v", help="Variable as key=value, repeatable"),
	strict: bool = typer.Option(False, "--strict", help="Reject variables the prompt does not declare"),
	api_key: Optional[str] = ApiKeyOpt,
	project_id: Optional[str] = ProjectOpt,
	base_url: Optional[str] = BaseUrlOpt,
):
	"""Fetch a prompt and print it compiled with the given variables."""
	variables = _parse_vars(var)
	prompt = _run(_make_client(api_key, project_id, base_url), reference)
	try:
		typer.echo(prompt.compile(variables, strict=strict), nl=False)
	except PromptHubError as exc:
		err.print(f"[red]error:[/red] {exc}")
		raise typer.Exit(code=1)


@app.command()
def show(
	reference: str = typer.Argument(..., help="Prompt reference, name@version"),
	api_key: Optional[str] = ApiKeyOpt,
	project_id: Optional[str] = ProjectOpt,
	base_url: Optional[str] = BaseUrlOpt,
):
	"""Print a prompt's template and declared variables."""
	prompt = _run(_make_client(api_key, project_id, base_url), reference)
	print(f"[bold]{prompt.reference}[/bold] (source: {prompt.source})")
	if prompt.description:
		print(prompt.description)
	print(f"required: {', '.join(sorted(prompt.required_variables)) or '-'}")
	print(f"optional: {', '.join(prompt.variables.optional) or '-'}")
	typer.echo("")
	typer.echo(prompt.template)


@app.command()
def pull(
	reference: str = typer.Argument(..., help="Prompt reference, name@version"),
	prompts_dir: str = typer.Option(..., "--dir", help="Local prompts directory"),
	api_key: Optional[str] = ApiKeyOpt,
	project_id: Optional[str] = ProjectOpt,
	base_url: Optional[str] = BaseUrlOpt,
):
	"""Fetch a prompt from the service and store it in a local prompts directory."""
	client = _make_client(api_key, project_id, base_url, fetch_strategy="remote-only")
	prompt = _run(client, reference)
	path = LocalPromptStore(prompts_dir).save(prompt.to_payload())
	print(f"[bold]Saved[/bold] {prompt.reference} -> {path}")
