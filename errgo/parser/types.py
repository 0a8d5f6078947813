# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Rust type syntax, parsed with the `type` start rule of `grammar.lark`.

Only path types are modelled in detail (the return-type resolver needs their
segments and generic arguments); every other form is an `OtherType` tagged
with its kind. Types are parsed from text: callers holding tokens go through
`parse_type_tokens`, which re-renders them with single spaces.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from lark import Lark, Token, Transformer
from lark.exceptions import UnexpectedInput

from errgo.core.render import render_spaced
from errgo.core.span import Span
from errgo.core.tokens import TokenStream, stream_span
from .lexer import _GRAMMAR_SRC


class TypeExpr:
	pass


class GenericArg:
	pass


@dataclass
class TypeArg(GenericArg):
	ty: TypeExpr


@dataclass
class LifetimeArg(GenericArg):
	name: str


@dataclass
class BindingArg(GenericArg):
	"""Associated type binding, e.g. `Item = u8`."""

	name: str
	ty: TypeExpr


@dataclass
class ConstArg(GenericArg):
	text: str


@dataclass
class PathSegment:
	name: str
	# None: no `<...>` at all (distinct from an empty `<>`).
	args: Optional[List[GenericArg]] = None
	# `Fn(A) -> B` style parenthesized arguments.
	fn_sugar: bool = False

	@property
	def is_plain(self) -> bool:
		return self.args is None and not self.fn_sugar


@dataclass
class PathType(TypeExpr):
	segments: List[PathSegment]
	leading_colon: bool = False
	qself: Optional[TypeExpr] = None


@dataclass
class OtherType(TypeExpr):
	"""Reference, pointer, tuple, array/slice, never, impl, dyn or fn-pointer type."""

	kind: str
	children: List[TypeExpr] = field(default_factory=list)


@dataclass
class _QSelf:
	ty: TypeExpr


class TypeSyntaxError(ValueError):
	def __init__(self, message: str, *, span: Span = Span()) -> None:
		super().__init__(message)
		self.span = span


_TYPE_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	lexer="basic",
	start="type",
	maybe_placeholders=False,
)


def _types(children) -> List[TypeExpr]:
	return [c for c in children if isinstance(c, TypeExpr)]


class _TypeBuilder(Transformer):
	def path_type(self, children) -> PathType:
		leading = isinstance(children[0], Token) and children[0].type == "COLON2"
		return PathType(
			segments=[c for c in children if isinstance(c, PathSegment)],
			leading_colon=leading,
		)

	def qualified_path_type(self, children) -> PathType:
		return PathType(
			segments=[c for c in children if isinstance(c, PathSegment)],
			qself=children[0].ty,
		)

	def qself(self, children) -> _QSelf:
		return _QSelf(ty=_types(children)[0])

	def path_segment(self, children) -> PathSegment:
		args = children[1] if len(children) > 1 else None
		return PathSegment(name=children[0].value, args=args)

	def fn_sugar_segment(self, children) -> PathSegment:
		return PathSegment(name=children[0].value, fn_sugar=True)

	def generic_args(self, children) -> List[GenericArg]:
		return [c for c in children if isinstance(c, GenericArg)]

	def type_arg(self, children) -> TypeArg:
		return TypeArg(ty=children[0])

	def lifetime_arg(self, children) -> LifetimeArg:
		return LifetimeArg(name=children[0].value)

	def binding_arg(self, children) -> BindingArg:
		return BindingArg(name=children[0].value, ty=_types(children)[0])

	def const_arg(self, children) -> ConstArg:
		return ConstArg(text="".join(tok.value for tok in children))

	def braced_const_arg(self, children) -> ConstArg:
		return ConstArg(text=" ".join(tok.value for tok in children))

	def ref_type(self, children) -> OtherType:
		return OtherType("reference", _types(children))

	def ptr_type(self, children) -> OtherType:
		return OtherType("pointer", _types(children))

	def tuple_type(self, children) -> OtherType:
		return OtherType("tuple", _types(children))

	def array_type(self, children) -> OtherType:
		return OtherType("array", _types(children))

	def never_type(self, children) -> OtherType:
		return OtherType("never")

	def impl_type(self, children) -> OtherType:
		return OtherType("impl", _types(children))

	def dyn_type(self, children) -> OtherType:
		return OtherType("dyn", _types(children))

	def fn_ptr_type(self, children) -> OtherType:
		return OtherType("fn", _types(children))


def parse_type(text: str) -> TypeExpr:
	"""Parse a Rust type from source text."""
	try:
		tree = _TYPE_PARSER.parse(text)
	except UnexpectedInput as err:
		raise TypeSyntaxError(f"invalid type `{text.strip()}`: {err.__class__.__name__}") from err
	return _TypeBuilder().transform(tree)


def parse_type_tokens(tokens: TokenStream) -> TypeExpr:
	"""Parse a Rust type from a token list; errors are anchored at the tokens."""
	span = stream_span(tokens)
	if not tokens:
		raise TypeSyntaxError("expected type", span=span)
	try:
		return parse_type(render_spaced(tokens))
	except TypeSyntaxError as err:
		raise TypeSyntaxError(str(err), span=span) from err


__all__ = [
	"TypeExpr",
	"GenericArg",
	"TypeArg",
	"LifetimeArg",
	"BindingArg",
	"ConstArg",
	"PathSegment",
	"PathType",
	"OtherType",
	"TypeSyntaxError",
	"parse_type",
	"parse_type_tokens",
]
