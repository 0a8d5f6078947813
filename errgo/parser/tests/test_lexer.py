# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from errgo.core.tokens import Delimiter, Group, Ident, Literal, Punct
from errgo.parser.lexer import TokenizeError, tokenize


def test_groups_are_folded():
	stream = tokenize("f(a, [b]) { c }")
	assert isinstance(stream[0], Ident) and stream[0].text == "f"
	paren = stream[1]
	assert isinstance(paren, Group) and paren.delimiter is Delimiter.PAREN
	assert [type(t) for t in paren.stream] == [Ident, Punct, Group]
	assert paren.stream[2].delimiter is Delimiter.BRACKET
	brace = stream[2]
	assert brace.delimiter is Delimiter.BRACE
	assert [t.text for t in brace.stream] == ["c"]


def test_multi_character_operators_are_single_puncts():
	stream = tokenize("a::b -> c => d == e != f .. g ..= h")
	ops = [t.op for t in stream if isinstance(t, Punct)]
	assert ops == ["::", "->", "=>", "==", "!=", "..", "..="]


def test_closing_angles_stay_separate():
	stream = tokenize("Vec<Vec<u8>>")
	assert [t.op for t in stream if isinstance(t, Punct)] == ["<", "<", ">", ">"]


def test_keywords_are_identifiers():
	stream = tokenize("pub fn as mut dyn impl")
	assert all(isinstance(t, Ident) for t in stream)
	assert [t.text for t in stream] == ["pub", "fn", "as", "mut", "dyn", "impl"]


def test_literal_kinds():
	stream = tokenize("\"s\" 'c' 'a 1u8 0x1F 2.5 r#\"raw\"# b\"x\" b'y'")
	assert [(t.kind, t.text) for t in stream] == [
		("string", '"s"'),
		("char", "'c'"),
		("lifetime", "'a"),
		("number", "1u8"),
		("number", "0x1F"),
		("number", "2.5"),
		("string", 'r#"raw"#'),
		("string", 'b"x"'),
		("char", "b'y'"),
	]


def test_raw_identifier():
	stream = tokenize("r#type")
	assert isinstance(stream[0], Ident) and stream[0].text == "r#type"


def test_comments_are_dropped():
	stream = tokenize("a // line\n /* block */ b")
	assert [t.text for t in stream] == ["a", "b"]


def test_block_comments_nest():
	stream = tokenize("a /* x /* y */ z */ b")
	assert [t.text for t in stream] == ["a", "b"]


def test_unicode_identifiers():
	src = "let café = ŝtato;"
	stream = tokenize(src)
	assert [t.text for t in stream if isinstance(t, Ident)] == ["let", "café", "ŝtato"]
	assert src[stream[1].span.start : stream[1].span.end] == "café"


def test_for_is_an_identifier():
	stream = tokenize("for x")
	assert isinstance(stream[0], Ident) and stream[0].text == "for"


def test_spans_cover_delimiters():
	src = "x (y)"
	stream = tokenize(src, "lib.rs")
	group = stream[1]
	assert src[group.span.start : group.span.end] == "(y)"
	assert group.span.file == "lib.rs"
	assert (group.span.line, group.span.column) == (1, 3)
	assert isinstance(group.stream[0], Ident)
	assert group.stream[0].span.start == 3


def test_string_contents_are_not_tokenized():
	stream = tokenize('"a ( b"')
	assert len(stream) == 1 and isinstance(stream[0], Literal)


@pytest.mark.parametrize(
	"src, message",
	[
		("f(a", "unclosed delimiter `(`"),
		("f(a]", "mismatched closing delimiter `]`"),
		("a)", "unexpected closing delimiter `)`"),
		("a ` b", "unexpected character"),
	],
)
def test_tokenize_errors(src: str, message: str):
	with pytest.raises(TokenizeError) as exc:
		tokenize(src)
	assert message in str(exc.value)
	assert exc.value.span.known
