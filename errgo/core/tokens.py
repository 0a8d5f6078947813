# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Token tree: the tagged-union syntax representation every pass works on.

A source file is lexed into a flat token list and then folded into a tree in
which each delimited region becomes a `Group`. Leaves are `Ident`, `Punct`
and `Literal`. This mirrors how Rust macros see their input: nothing below
the token level is parsed unless a pass asks for it, so field types and
values can be carried around as opaque token lists.

`Delimiter.NONE` groups never come from source text. The marker walker uses
them to wrap a replacement so the whole replacement occupies a single node
whose span is the replaced range.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional

from .span import Span


class Delimiter(Enum):
	PAREN = ("(", ")")
	BRACE = ("{", "}")
	BRACKET = ("[", "]")
	NONE = ("", "")

	@property
	def open(self) -> str:
		return self.value[0]

	@property
	def close(self) -> str:
		return self.value[1]


class TokenTree:
	span: Span


@dataclass
class Ident(TokenTree):
	text: str
	span: Span = field(default_factory=Span)


@dataclass
class Punct(TokenTree):
	"""Operator or separator. Multi-character operators (`::`, `->`, `==`) are one Punct."""

	op: str
	span: Span = field(default_factory=Span)


@dataclass
class Literal(TokenTree):
	"""String/char/number literal or lifetime, kept as its source text."""

	text: str
	kind: str = "other"
	span: Span = field(default_factory=Span)


@dataclass
class Group(TokenTree):
	delimiter: Delimiter
	stream: List[TokenTree] = field(default_factory=list)
	# Covers the delimiters too: open delimiter at `span.start`, close at `span.end - 1`.
	span: Span = field(default_factory=Span)


TokenStream = List[TokenTree]

# Strict and reserved Rust keywords; none of them may name a variant or field.
KEYWORDS = frozenset(
	{
		"as", "async", "await", "break", "const", "continue", "crate", "dyn",
		"else", "enum", "extern", "false", "fn", "for", "if", "impl", "in",
		"let", "loop", "match", "mod", "move", "mut", "pub", "ref", "return",
		"self", "Self", "static", "struct", "super", "trait", "true", "type",
		"unsafe", "use", "where", "while", "abstract", "become", "box", "do",
		"final", "macro", "override", "priv", "typeof", "unsized", "virtual",
		"yield", "try", "_",
	}
)


def is_ident(tree: Optional[TokenTree], text: str | None = None) -> bool:
	if not isinstance(tree, Ident):
		return False
	return text is None or tree.text == text


def is_punct(tree: Optional[TokenTree], op: str) -> bool:
	return isinstance(tree, Punct) and tree.op == op


def is_group(tree: Optional[TokenTree], delimiter: Delimiter | None = None) -> bool:
	if not isinstance(tree, Group):
		return False
	return delimiter is None or tree.delimiter is delimiter


def is_identifier(tree: Optional[TokenTree]) -> bool:
	"""True for an identifier usable as a name (not a keyword)."""
	return isinstance(tree, Ident) and tree.text not in KEYWORDS


def is_path(tokens: List[TokenTree]) -> bool:
	"""True when `tokens` is exactly a simple path: `a`, `a::b`, `::a::b`."""
	i = 1 if tokens and is_punct(tokens[0], "::") else 0
	if i >= len(tokens) or not isinstance(tokens[i], Ident):
		return False
	i += 1
	while i < len(tokens):
		if not is_punct(tokens[i], "::") or i + 1 >= len(tokens) or not isinstance(tokens[i + 1], Ident):
			return False
		i += 2
	return True


def stream_span(trees: Iterable[TokenTree]) -> Span:
	"""Span covering every token in `trees` (unknown when all are synthesized)."""
	span = Span()
	for tree in trees:
		span = span.join(tree.span)
	return span


def path(*segments: str, leading_colon: bool = False) -> TokenStream:
	"""Build the tokens of a path such as `::core::convert::identity`."""
	out: TokenStream = []
	if leading_colon:
		out.append(Punct("::"))
	for i, seg in enumerate(segments):
		if i:
			out.append(Punct("::"))
		out.append(Ident(seg))
	return out


def separated(items: Iterable[TokenStream], sep: str = ",") -> TokenStream:
	"""Join token lists with a separator punct."""
	out: TokenStream = []
	for i, item in enumerate(items):
		if i:
			out.append(Punct(sep))
		out.extend(item)
	return out


__all__ = [
	"Delimiter",
	"TokenTree",
	"Ident",
	"Punct",
	"Literal",
	"Group",
	"TokenStream",
	"KEYWORDS",
	"is_ident",
	"is_punct",
	"is_group",
	"is_identifier",
	"is_path",
	"stream_span",
	"path",
	"separated",
]
