# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Token tree -> source text.

Two tokens that were neighbours in the original source are separated by the
original text between them (whitespace and comments), so untouched code comes
out byte-for-byte. Everywhere else (synthesized tokens, relocated fragments)
spacing is chosen by a small table that produces conventional Rust layout:
`a::b`, `f(x, y)`, `S { a: 1 }`, `#[attr]`.
"""

from __future__ import annotations

import re
from typing import Iterable, Optional

from .tokens import Delimiter, Group, Ident, Literal, Punct, TokenTree

_TRIVIA_RE = re.compile(r"(?:\s+|//[^\n]*|/\*[\s\S]*?\*/)*")

# Puncts that never take a space before them.
_TIGHT_BEFORE = {",", ";", ":", ".", "?"}
# Puncts that never take a space after them.
_TIGHT_AFTER = {"::", ".", "#", "$"}


class _Renderer:
	def __init__(self, source: Optional[str], collapse_newlines: bool) -> None:
		self.source = source
		self.collapse_newlines = collapse_newlines
		self.out: list[str] = []
		self.prev_kind: str | None = None
		self.prev_text = ""
		# End offset of the last emitted token when it came from `source`.
		self.prev_end: int | None = None
		self.gap_emitted = False

	def render(self, trees: Iterable[TokenTree]) -> str:
		for tree in trees:
			self._tree(tree)
		return "".join(self.out)

	def _tree(self, tree: TokenTree) -> None:
		if isinstance(tree, Ident):
			self._emit("ident", tree.text, tree.span.start, tree.span.end)
		elif isinstance(tree, Punct):
			self._emit("punct", tree.op, tree.span.start, tree.span.end)
		elif isinstance(tree, Literal):
			self._emit("literal", tree.text, tree.span.start, tree.span.end)
		elif isinstance(tree, Group):
			self._group(tree)
		else:
			raise TypeError(f"cannot render {type(tree).__name__}")

	def _group(self, group: Group) -> None:
		span = group.span
		if group.delimiter is Delimiter.NONE:
			if span.known:
				gap = self._source_gap(span.start)
				if gap is not None:
					self.out.append(gap)
					self.gap_emitted = True
			self.prev_end = None
			for child in group.stream:
				self._tree(child)
			self.gap_emitted = False
			if span.known:
				self.prev_end = span.end
			return
		if span.known:
			self._emit("open", group.delimiter.open, span.start, span.start + 1)
		else:
			self._emit("open", group.delimiter.open, None, None)
		for child in group.stream:
			self._tree(child)
		if span.known:
			self._emit("close", group.delimiter.close, span.end - 1, span.end)
		else:
			self._emit("close", group.delimiter.close, None, None)

	def _emit(self, kind: str, text: str, start: int | None, end: int | None) -> None:
		if self.gap_emitted:
			self.gap_emitted = False
		elif self.prev_kind is not None:
			gap = self._source_gap(start)
			if gap is None:
				gap = " " if _needs_space(self.prev_kind, self.prev_text, kind, text) else ""
			elif self.collapse_newlines and "\n" in gap and "//" not in gap and "/*" not in gap:
				gap = " " if _needs_space(self.prev_kind, self.prev_text, kind, text) else ""
			self.out.append(gap)
		self.out.append(text)
		self.prev_kind = kind
		self.prev_text = text
		self.prev_end = end

	def _source_gap(self, start: int | None) -> str | None:
		"""Original text between the previous token and `start`, if it is only trivia."""
		if self.source is None or start is None or self.prev_end is None:
			return None
		if self.prev_end > start:
			return None
		between = self.source[self.prev_end:start]
		if _TRIVIA_RE.fullmatch(between) is None:
			return None
		return between


def _needs_space(prev_kind: str, prev_text: str, kind: str, text: str) -> bool:
	if prev_kind == "open":
		# `{ a }` but `(a)` / `[a]`; empty groups stay tight.
		return prev_text == "{" and kind != "close"
	if kind == "close":
		return text == "}" and prev_kind != "open"
	if prev_kind == "punct" and prev_text in _TIGHT_AFTER:
		return False
	if kind == "punct":
		if text in _TIGHT_BEFORE:
			return False
		if text == "::":
			return prev_kind not in ("ident", "close") and prev_text != ">"
		if text == "!":
			return prev_kind != "ident"
		return True
	if kind == "open":
		if text == "{":
			return True
		if prev_kind in ("ident", "close"):
			return False
		return not (prev_kind == "punct" and prev_text in ("!", "#", ">"))
	if prev_kind == "punct" and prev_text in ("!", "&"):
		return False
	return True


def render_tokens(
	trees: Iterable[TokenTree],
	source: Optional[str] = None,
	collapse_newlines: bool = False,
) -> str:
	"""
	Render token trees back to text.

	`source` is the text the original tokens were lexed from; without it every
	boundary uses the spacing table. `collapse_newlines` folds multi-line gaps
	between original tokens into the table spacing (used for one-line
	declarations built from multi-line markers).
	"""
	return _Renderer(source, collapse_newlines).render(trees)


def render_spaced(trees: Iterable[TokenTree]) -> str:
	"""Render with a single space between all tokens (stable input for re-lexing)."""
	parts: list[str] = []
	for tree in trees:
		if isinstance(tree, Ident):
			parts.append(tree.text)
		elif isinstance(tree, Punct):
			parts.append(tree.op)
		elif isinstance(tree, Literal):
			parts.append(tree.text)
		elif isinstance(tree, Group):
			inner = render_spaced(tree.stream)
			if tree.delimiter is Delimiter.NONE:
				parts.append(inner)
			elif not inner:
				parts.append(tree.delimiter.open + tree.delimiter.close)
			else:
				parts.append(f"{tree.delimiter.open} {inner} {tree.delimiter.close}")
	return " ".join(p for p in parts if p)


__all__ = ["render_tokens", "render_spaced"]
