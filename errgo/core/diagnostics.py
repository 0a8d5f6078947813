"""
Common diagnostic structure for the marker, resolver, config and assembler passes.

A diagnostic is a message plus a span; passes append them to plain lists and
the driver renders everything that was collected at the end.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .span import Span


@dataclass
class Diagnostic:
	"""Represents a diagnostic (error/warning) anchored to a source span."""

	message: str
	code: str | None = None
	# Which pass produced the diagnostic: "lex", "config", "resolve", "marker",
	# "item". Used by JSON output and tests.
	phase: str | None = None
	severity: str = "error"
	span: Span = field(default_factory=Span)  # Span() denotes unknown.
	notes: list[str] = field(default_factory=list)

	def __post_init__(self) -> None:
		if self.span is None:  # type: ignore[unreachable]
			self.span = Span()

	@property
	def is_error(self) -> bool:
		return self.severity == "error"

	def render(self, fallback_file: str | None = None) -> str:
		"""Render as `file:line:column: severity: message`."""
		file = self.span.file or fallback_file or "<unknown>"
		return f"{file}:{self.span.short()}: {self.severity}: {self.message}"


def has_errors(diagnostics: list[Diagnostic]) -> bool:
	return any(d.is_error for d in diagnostics)


__all__ = ["Diagnostic", "has_errors"]
