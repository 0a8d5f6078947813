# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Lightweight source span representation used by tokens and diagnostics.

A Span carries optional file/line/column info plus the character offsets of the
spanned text in the original source. Synthesized tokens use the sentinel
`Span()` (all fields unknown); the renderer relies on `start`/`end` to copy
original text verbatim.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class Span:
	"""Represents a source span (best-effort file/line/column plus offsets)."""

	file: Optional[str] = None
	line: Optional[int] = None
	column: Optional[int] = None
	end_line: Optional[int] = None
	end_column: Optional[int] = None
	start: Optional[int] = None
	end: Optional[int] = None

	@property
	def known(self) -> bool:
		"""True when the span points into real source text."""
		return self.start is not None and self.end is not None

	@classmethod
	def from_token(cls, tok: Any, file: Optional[str] = None) -> "Span":
		"""Construct a Span from a lark `Token` (or anything with the same attributes)."""
		return cls(
			file=file,
			line=getattr(tok, "line", None),
			column=getattr(tok, "column", None),
			end_line=getattr(tok, "end_line", None),
			end_column=getattr(tok, "end_column", None),
			start=getattr(tok, "start_pos", None),
			end=getattr(tok, "end_pos", None),
		)

	def join(self, other: "Span") -> "Span":
		"""
		Return a span covering both `self` and `other`.

		Unknown spans are absorbed: joining with `Span()` returns the other side.
		"""
		if not self.known:
			return other
		if not other.known:
			return self
		first, last = (self, other) if self.start <= other.start else (other, self)
		return Span(
			file=first.file or last.file,
			line=first.line,
			column=first.column,
			end_line=last.end_line,
			end_column=last.end_column,
			start=first.start,
			end=max(first.end, last.end),
		)

	def short(self) -> str:
		"""Format as `line:column` (`?:?` when unknown)."""
		line = self.line if self.line is not None else "?"
		col = self.column if self.column is not None else "?"
		return f"{line}:{col}"


__all__ = ["Span"]
