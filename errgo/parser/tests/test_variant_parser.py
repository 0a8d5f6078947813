# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Marker grammar: shape selection by lookahead, metadata and discriminants.
"""

from __future__ import annotations

import pytest

from errgo.core.render import render_spaced
from errgo.parser.ast import NamedFields, UnitFields, UnnamedFields
from errgo.parser.cursor import GrammarError
from errgo.parser.variant import parse_variant, parse_variant_source
from errgo.parser.lexer import tokenize


def test_unit_variant():
	v = parse_variant_source("NotEnoughRazors")
	assert v.name.text == "NotEnoughRazors"
	assert isinstance(v.fields, UnitFields)
	assert v.discriminant is None
	assert v.attrs == []


def test_named_variant():
	v = parse_variant_source("NotEnoughBuckets { got: usize = empty_buckets, required: usize = num_yaks }")
	assert isinstance(v.fields, NamedFields)
	assert [f.name.text for f in v.fields.fields] == ["got", "required"]


def test_unnamed_variant():
	v = parse_variant_source("IoErr(SomeErrType = e)")
	assert isinstance(v.fields, UnnamedFields)
	assert len(v.fields.fields) == 1


def test_explicitly_empty_lists_are_not_unit():
	assert isinstance(parse_variant_source("Foo()").fields, UnnamedFields)
	assert isinstance(parse_variant_source("Foo {}").fields, NamedFields)


def test_metadata_precedes_name():
	v = parse_variant_source('#[error("io failed")] #[doc = "x"] IoErr(io::Error = e)')
	assert v.name.text == "IoErr"
	assert [render_spaced(a.tokens) for a in v.attrs] == [
		'# [ error ( "io failed" ) ]',
		'# [ doc = "x" ]',
	]


@pytest.mark.parametrize(
	"src, expr",
	[
		("Code = 3", "3"),
		("Code = 1 << 4", "1 < < 4"),
		("Code(u8 = 1) = 7", "7"),
		("Code { a: u8 = 1 } = 7", "7"),
	],
)
def test_discriminant_after_any_shape(src: str, expr: str):
	v = parse_variant_source(src)
	assert v.discriminant is not None
	assert render_spaced(v.discriminant.tokens) == expr


def test_span_covers_contents():
	src = "err!(Foo(u8 = 1))"
	group = tokenize(src)[2]
	v = parse_variant(group.stream, group.span)
	assert src[v.span.start : v.span.end] == "Foo(u8 = 1)"


def _error(src: str) -> tuple[str, str]:
	with pytest.raises(GrammarError) as exc:
		parse_variant_source(src)
	span = exc.value.span
	return str(exc.value), src[span.start : span.end] if span.known else ""


def test_missing_name():
	message, _ = _error("")
	assert message == "expected variant name, found end of input"


def test_empty_marker_is_anchored_at_group():
	src = "err!()"
	group = tokenize(src)[2]
	with pytest.raises(GrammarError) as exc:
		parse_variant(group.stream, group.span)
	assert src[exc.value.span.start : exc.value.span.end] == "()"


def test_keyword_name():
	message, anchored = _error("struct")
	assert "keyword `struct`" in message
	assert anchored == "struct"


def test_trailing_tokens():
	message, anchored = _error("Foo Bar")
	assert message == "unexpected token `Bar` after variant `Foo`"
	assert anchored == "Bar"


def test_missing_discriminant():
	message, anchored = _error("Foo =")
	assert "expected discriminant expression" in message
	assert anchored == "="


def test_unbalanced_delimiters():
	message, _ = _error("Foo(u8 = 1")
	assert "unclosed delimiter" in message


def test_attribute_without_brackets():
	message, _ = _error("# Foo")
	assert "expected `[` after `#`" in message


def test_field_errors_propagate():
	message, anchored = _error("Foo { bar = 1 }")
	assert "expected `:`" in message
	assert anchored == "bar = 1"


def test_discriminant_stops_at_top_level_comma():
	message, anchored = _error("V = 1, W")
	assert message == "unexpected token `,` after variant `V`"
	assert anchored == ","


def test_discriminant_keeps_nested_commas():
	v = parse_variant_source("V = f(1, 2)")
	assert v.discriminant is not None
	assert render_spaced(v.discriminant.tokens) == "f ( 1 , 2 )"


@pytest.mark.parametrize(
	"src, name",
	[
		("pub V", "V"),
		("pub(crate) V(u8 = 1)", "V"),
		('#[error("x")] pub(super) V { a: u8 = 1 }', "V"),
	],
)
def test_visibility_is_accepted_and_dropped(src: str, name: str):
	v = parse_variant_source(src)
	assert v.name.text == name
