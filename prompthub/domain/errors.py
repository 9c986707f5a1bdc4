from __future__ import annotations

from typing import Iterable, Optional


class PromptHubError(Exception):
	pass


class InvalidPromptReferenceError(PromptHubError, ValueError):
	pass


class PromptFetchError(PromptHubError):
	def __init__(self, message: str, status_code: Optional[int] = None):
		super().__init__(message)
		self.status_code = status_code


class AuthenticationError(PromptFetchError):
	pass


class PromptNotFoundError(PromptFetchError):
	pass


class TransientHTTPError(PromptFetchError):
	pass


class PromptCompileError(PromptHubError):
	pass


class MissingVariablesError(PromptCompileError):
	def __init__(self, missing: Iterable[str], reference: str | None = None):
		self.missing = sorted(missing)
		self.reference = reference
		where = f" for {reference}" if reference else ""
		super().__init__(f"missing variables{where}: {', '.join(self.missing)}")


class UnknownVariablesError(PromptCompileError):
	def __init__(self, extra: Iterable[str], reference: str | None = None):
		self.extra = sorted(extra)
		self.reference = reference
		where = f" for {reference}" if reference else ""
		super().__init__(f"undeclared variables{where}: {', '.join(self.extra)}")


class InvalidVariablesError(PromptCompileError):
	pass


class TemplateRenderError(PromptCompileError):
	pass
