# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Variant grammar: the contents of one `err!(...)` marker.

	marker := attribute* IDENT ( "(" unnamed_fields ")" | "{" named_fields "}" )? ( "=" expr )?

The field shape is picked by peeking at the token after the name: a brace
group selects named fields, a paren group unnamed fields, anything else a
unit variant. The discriminant is accepted after every shape.
"""

from __future__ import annotations

from typing import Optional

from errgo.core.span import Span
from errgo.core.tokens import Delimiter, Ident, TokenStream, is_group, is_ident, stream_span
from .ast import Fields, RawTokens, UnitFields, VariantDef
from .cursor import GrammarError, TokenCursor, describe, parse_attributes
from .fields import parse_named_fields, parse_unnamed_fields, take_expression
from .lexer import TokenizeError, tokenize


def _skip_visibility(cursor: TokenCursor) -> None:
	"""Variants carry no visibility; `pub` and `pub(crate)` are accepted and dropped."""
	if not is_ident(cursor.peek(), "pub"):
		return
	cursor.advance()
	if is_group(cursor.peek(), Delimiter.PAREN) and isinstance(cursor.peek(1), Ident):
		cursor.advance()


def parse_variant(stream: TokenStream, span: Span = Span()) -> VariantDef:
	"""
	Parse marker contents into a VariantDef.

	`span` is the span of the enclosing marker group; it anchors errors that
	happen at end of input (e.g. an empty marker).
	"""
	if not span.known:
		span = stream_span(stream)
	cursor = TokenCursor(stream, span)
	attrs = parse_attributes(cursor)
	_skip_visibility(cursor)
	name = cursor.expect_identifier("variant name")

	nxt = cursor.peek()
	fields: Fields
	if is_group(nxt, Delimiter.BRACE):
		cursor.advance()
		fields = parse_named_fields(nxt)
	elif is_group(nxt, Delimiter.PAREN):
		cursor.advance()
		fields = parse_unnamed_fields(nxt)
	else:
		fields = UnitFields()

	discriminant: Optional[RawTokens] = None
	eq = cursor.eat_punct("=")
	if eq is not None:
		expr = take_expression(cursor)
		if not expr:
			raise GrammarError(f"expected discriminant expression after `=` in `{name.text}`", span=eq.span)
		discriminant = RawTokens(expr)

	if not cursor.at_end():
		raise GrammarError(
			f"unexpected token {describe(cursor.peek())} after variant `{name.text}`",
			span=cursor.here(),
		)
	return VariantDef(
		name=name,
		attrs=attrs,
		fields=fields,
		discriminant=discriminant,
		span=stream_span(stream) if stream else span,
	)


def parse_variant_source(text: str, file: Optional[str] = None) -> VariantDef:
	"""Tokenize `text` and parse it as marker contents."""
	try:
		stream = tokenize(text, file)
	except TokenizeError as err:
		raise GrammarError(str(err), span=err.span) from err
	return parse_variant(stream)


__all__ = ["parse_variant", "parse_variant_source"]
