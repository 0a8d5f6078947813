# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Field-list parser for marker variants.

	named:    { #[attr] name: Type = value, ... }
	unnamed:  ( #[attr] Type = value, ... )

A type runs to the first standalone `=` outside `<...>`; a value runs to the
next top-level `,`. Any malformed entry fails the whole list, anchored at the
entry (from its first token up to the next comma).
"""

from __future__ import annotations

from typing import List

from errgo.core.span import Span
from errgo.core.tokens import Group, Ident, Punct, TokenStream, is_ident, is_punct
from .ast import NamedField, NamedFields, RawTokens, UnnamedField, UnnamedFields
from .cursor import GrammarError, TokenCursor, describe, parse_attributes
from .types import TypeSyntaxError, parse_type_tokens

# Prefix operators that can be applied to a closure expression: `&|a| a`, `*|a| a`.
_UNARY_BEFORE_CLOSURE = {"&", "&&", "*"}

# Tokens that close `depth` angle brackets and then start a `=`.
_GT_EQ_SPLITS = {">=": 1, ">>=": 2}


def _split_gt_eq(tok: Punct) -> TokenStream:
	"""Split `>=` / `>>=` into `>` puncts followed by `=`; spans stay on the pieces."""
	pieces: TokenStream = []
	span = tok.span
	for i, op in enumerate([">"] * _GT_EQ_SPLITS[tok.op] + ["="]):
		if span.known:
			piece = Span(
				file=span.file,
				line=span.line,
				column=span.column + i if span.column is not None else None,
				end_line=span.line,
				end_column=span.column + i + 1 if span.column is not None else None,
				start=span.start + i,
				end=span.start + i + 1,
			)
		else:
			piece = Span()
		pieces.append(Punct(op, piece))
	return pieces


def _take_type(cursor: TokenCursor) -> TokenStream:
	"""Collect type tokens up to (not including) the `=` that ends the type."""
	out: TokenStream = []
	depth = 0
	while not cursor.at_end():
		tree = cursor.peek()
		if isinstance(tree, Punct):
			if tree.op == "=" and depth == 0:
				break
			if tree.op == "," and depth == 0:
				break
			if tree.op in _GT_EQ_SPLITS and depth == _GT_EQ_SPLITS[tree.op]:
				# `Vec<u8>= x`: the lexer glued the closing `>` to the `=`.
				pieces = _split_gt_eq(tree)
				cursor.stream[cursor.pos : cursor.pos + 1] = pieces
				continue
			if tree.op == "<":
				depth += 1
			elif tree.op == ">" and depth:
				depth -= 1
		out.append(cursor.advance())
	return out


def _closure_may_start(out: TokenStream) -> bool:
	"""True when a `|` at this point opens closure parameters rather than a binary or."""
	if not out:
		return True
	last = out[-1]
	if is_ident(last, "move"):
		return True
	if is_ident(last, "mut") and len(out) > 1 and is_punct(out[-2], "&"):
		return True
	return isinstance(last, Punct) and last.op in _UNARY_BEFORE_CLOSURE


def take_expression(cursor: TokenCursor) -> TokenStream:
	"""
	Collect expression tokens up to the next top-level `,`.

	Commas inside turbofish arguments (`f::<A, B>()`) and between closure
	parameter bars (`|a, b| a + b`) do not end the value.
	"""
	out: TokenStream = []
	angle = 0
	in_params = False
	while not cursor.at_end():
		tree = cursor.peek()
		if isinstance(tree, Punct):
			if tree.op == "," and angle == 0 and not in_params:
				break
			if tree.op == "|":
				if in_params:
					in_params = False
				elif _closure_may_start(out):
					in_params = True
			elif tree.op == "<" and (angle or (out and is_punct(out[-1], "::"))):
				angle += 1
			elif tree.op == ">" and angle:
				angle -= 1
		out.append(cursor.advance())
	return out


def _check_type(ty: TokenStream, entry_span: Span) -> None:
	try:
		parse_type_tokens(ty)
	except TypeSyntaxError as err:
		raise GrammarError(f"expected type: {err}", span=entry_span) from err


def _finish_entry(cursor: TokenCursor, start: int, what: str) -> tuple[TokenStream, TokenStream]:
	"""Parse `Type = value` for the entry that began at `start`."""
	ty = _take_type(cursor)
	if not ty:
		raise GrammarError(
			f"expected type for {what}, found {describe(cursor.peek())}",
			span=cursor.span_to_separator(start),
		)
	if cursor.eat_punct("=") is None:
		raise GrammarError(
			f"expected `=` and a value after the type of {what}, found {describe(cursor.peek())}",
			span=cursor.span_to_separator(start),
		)
	_check_type(ty, cursor.span_to_separator(start))
	value = take_expression(cursor)
	if not value:
		raise GrammarError(
			f"expected expression after `=` for {what}",
			span=cursor.span_to_separator(start),
		)
	return ty, value


def _expect_separator(cursor: TokenCursor) -> bool:
	"""Consume the `,` after an entry; False when the list is finished."""
	if cursor.at_end():
		return False
	cursor.expect_punct(",", "between fields")
	return not cursor.at_end()


def parse_named_fields(group: Group) -> NamedFields:
	cursor = TokenCursor(group.stream, group.span)
	fields: List[NamedField] = []
	while not cursor.at_end():
		start = cursor.pos
		attrs = parse_attributes(cursor)
		name = cursor.peek()
		if not isinstance(name, Ident):
			raise GrammarError(
				f"expected field name, found {describe(name)}",
				span=cursor.span_to_separator(start),
			)
		try:
			cursor.expect_identifier("field name")
			cursor.expect_punct(":", f"after field name `{name.text}`")
		except GrammarError as err:
			raise GrammarError(str(err), span=cursor.span_to_separator(start)) from err
		ty, value = _finish_entry(cursor, start, f"field `{name.text}`")
		fields.append(
			NamedField(
				attrs=attrs,
				name=name,
				ty=RawTokens(ty),
				value=RawTokens(value),
				span=cursor.span_since(start),
			)
		)
		if not _expect_separator(cursor):
			break
	return NamedFields(fields)


def parse_unnamed_fields(group: Group) -> UnnamedFields:
	cursor = TokenCursor(group.stream, group.span)
	fields: List[UnnamedField] = []
	while not cursor.at_end():
		start = cursor.pos
		attrs = parse_attributes(cursor)
		ty, value = _finish_entry(cursor, start, f"field {len(fields)}")
		fields.append(
			UnnamedField(
				attrs=attrs,
				ty=RawTokens(ty),
				value=RawTokens(value),
				span=cursor.span_since(start),
			)
		)
		if not _expect_separator(cursor):
			break
	return UnnamedFields(fields)


__all__ = ["parse_named_fields", "parse_unnamed_fields", "take_expression"]
