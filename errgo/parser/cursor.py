# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Cursor over one level of a token tree, plus the marker GrammarError.

Parsers built on the cursor see a `Group` as a single token, so "top level"
always means "not nested in a delimiter"; only angle brackets need explicit
depth tracking because `<`/`>` are plain puncts.
"""

from __future__ import annotations

from typing import List, Optional

from errgo.core.span import Span
from errgo.core.tokens import (
	KEYWORDS,
	Delimiter,
	Group,
	Ident,
	Literal,
	Punct,
	TokenStream,
	TokenTree,
	is_group,
	is_punct,
	stream_span,
)
from .ast import Attribute


class GrammarError(ValueError):
	"""
	Malformed marker contents.

	Carries the span the message is anchored at so the walker can turn it into
	a Diagnostic without losing the location.
	"""

	def __init__(self, message: str, *, span: Span) -> None:
		super().__init__(message)
		self.span = span


def describe(tree: Optional[TokenTree]) -> str:
	"""Short human-readable description of a token for error messages."""
	if tree is None:
		return "end of input"
	if isinstance(tree, Ident):
		if tree.text in KEYWORDS:
			return f"keyword `{tree.text}`"
		return f"`{tree.text}`"
	if isinstance(tree, Punct):
		return f"`{tree.op}`"
	if isinstance(tree, Literal):
		return f"literal `{tree.text}`"
	if isinstance(tree, Group):
		if tree.delimiter is Delimiter.NONE:
			return "expression"
		return f"`{tree.delimiter.open}`"
	return type(tree).__name__


class TokenCursor:
	def __init__(self, stream: TokenStream, span: Span = Span()) -> None:
		self.stream = stream
		self.pos = 0
		# Span of the enclosing region; errors at end of input point here.
		self.span = span

	def peek(self, offset: int = 0) -> Optional[TokenTree]:
		idx = self.pos + offset
		if 0 <= idx < len(self.stream):
			return self.stream[idx]
		return None

	def at_end(self) -> bool:
		return self.pos >= len(self.stream)

	def advance(self) -> TokenTree:
		tree = self.stream[self.pos]
		self.pos += 1
		return tree

	def rest(self) -> TokenStream:
		out = self.stream[self.pos :]
		self.pos = len(self.stream)
		return out

	def here(self) -> Span:
		"""Span of the next token, or of the region when at end of input."""
		tree = self.peek()
		if tree is None or not tree.span.known:
			return self.span
		return tree.span

	def eat_punct(self, op: str) -> Optional[Punct]:
		tree = self.peek()
		if is_punct(tree, op):
			self.pos += 1
			return tree  # type: ignore[return-value]
		return None

	def expect_punct(self, op: str, context: str = "") -> Punct:
		tok = self.eat_punct(op)
		if tok is None:
			suffix = f" {context}" if context else ""
			raise GrammarError(f"expected `{op}`{suffix}, found {describe(self.peek())}", span=self.here())
		return tok

	def expect_identifier(self, what: str = "identifier") -> Ident:
		tree = self.peek()
		if not isinstance(tree, Ident) or tree.text in KEYWORDS:
			raise GrammarError(f"expected {what}, found {describe(tree)}", span=self.here())
		self.pos += 1
		return tree

	def span_since(self, start: int) -> Span:
		return stream_span(self.stream[start : self.pos])

	def span_to_separator(self, start: int, sep: str = ",") -> Span:
		"""Span from `start` up to (not including) the next top-level `sep` or the end."""
		end = self.pos
		while end < len(self.stream) and not is_punct(self.stream[end], sep):
			end += 1
		span = stream_span(self.stream[start:end])
		return span if span.known else self.span


def parse_attributes(cursor: TokenCursor) -> List[Attribute]:
	"""Parse zero or more outer attributes `#[...]`."""
	attrs: List[Attribute] = []
	while is_punct(cursor.peek(), "#"):
		pound = cursor.advance()
		body = cursor.peek()
		if not is_group(body, Delimiter.BRACKET):
			raise GrammarError(f"expected `[` after `#`, found {describe(body)}", span=cursor.here())
		cursor.advance()
		attrs.append(Attribute(tokens=[pound, body]))
	return attrs


__all__ = ["GrammarError", "TokenCursor", "describe", "parse_attributes"]
