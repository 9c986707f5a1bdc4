from __future__ import annotations

from typing import Any, Dict, Mapping, Set

from jinja2 import Environment, Template, TemplateError, TemplateSyntaxError, meta

from prompthub.domain.errors import MissingVariablesError, TemplateRenderError, UnknownVariablesError
from prompthub.domain.schemas import VariableSpec

# jinja rewrites every line ending to newline_sequence, so keep one env per style
_envs: Dict[str, Environment] = {
	nl: Environment(autoescape=False, keep_trailing_newline=True, newline_sequence=nl)
	for nl in ("\n", "\r\n", "\r")
}


def _env_for(template: str) -> Environment:
	if "\r\n" in template:
		return _envs["\r\n"]
	if "\r" in template:
		return _envs["\r"]
	return _envs["\n"]


def extract_placeholders(template: str) -> Set[str]:
	env = _env_for(template)
	try:
		ast = env.parse(template)
	except TemplateSyntaxError as exc:
		raise TemplateRenderError(f"template syntax error at line {exc.lineno}: {exc.message}") from exc
	return set(meta.find_undeclared_variables(ast)) - set(env.globals)


def validate_template(template: str, variables: VariableSpec) -> None:
	placeholders = extract_placeholders(template)
	missing = set(variables.required) - placeholders
	extra = placeholders - variables.declared

	if missing:
		raise MissingVariablesError(missing)
	if extra:
		raise UnknownVariablesError(extra)


def compile_template(template: str) -> Template:
	try:
		return _env_for(template).from_string(template)
	except TemplateSyntaxError as exc:
		raise TemplateRenderError(f"template syntax error at line {exc.lineno}: {exc.message}") from exc


def render(template: str | Template, variables: Mapping[str, Any]) -> str:
	tpl = compile_template(template) if isinstance(template, str) else template
	try:
		# positional so a variable named "self" cannot collide with render()'s own argument
		return tpl.render(dict(variables))
	except TemplateError as exc:
		raise TemplateRenderError(f"failed to render template: {exc}") from exc
