# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Source text -> token tree.

Lexing is done by lark's basic lexer using the terminals of `grammar.lark`
(start rule `tokens`); this module then folds the flat token sequence into
`Group`s by matching delimiters. Comments and whitespace are dropped here:
the renderer recovers them from the source text using token offsets.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Tuple

from lark import Lark, Token
from lark.exceptions import UnexpectedCharacters

from errgo.core.span import Span
from errgo.core.tokens import Delimiter, Group, Ident, Literal, Punct, TokenStream

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()

_LEXER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	lexer="basic",
	start="tokens",
	maybe_placeholders=False,
)

_OPEN = {
	"LPAR": Delimiter.PAREN,
	"LBRACE": Delimiter.BRACE,
	"LSQB": Delimiter.BRACKET,
}
_CLOSE = {
	"RPAR": Delimiter.PAREN,
	"RBRACE": Delimiter.BRACE,
	"RSQB": Delimiter.BRACKET,
}
# Keyword terminals exist only so the type grammar can name them; in the
# token tree they are ordinary identifiers.
_KEYWORD_TYPES = {"AS", "CONST", "DYN", "EXTERN", "FN", "FOR", "IMPL", "MUT", "UNSAFE"}
_LITERAL_KINDS = {
	"STRING": "string",
	"RAW_STRING": "string",
	"CHAR": "char",
	"NUMBER": "number",
	"LIFETIME": "lifetime",
}


class TokenizeError(ValueError):
	"""Source text could not be lexed or has unbalanced delimiters."""

	def __init__(self, message: str, *, span: Span) -> None:
		super().__init__(message)
		self.span = span


def _leaf(tok: Token, file: Optional[str]):
	span = Span.from_token(tok, file)
	if tok.type == "IDENT" or tok.type in _KEYWORD_TYPES:
		return Ident(tok.value, span)
	kind = _LITERAL_KINDS.get(tok.type)
	if kind is not None:
		return Literal(tok.value, kind, span)
	return Punct(tok.value, span)


def _group_span(open_tok: Token, close_tok: Token, file: Optional[str]) -> Span:
	return Span(
		file=file,
		line=open_tok.line,
		column=open_tok.column,
		end_line=close_tok.end_line,
		end_column=close_tok.end_column,
		start=open_tok.start_pos,
		end=close_tok.end_pos,
	)


def tokenize(source: str, file: Optional[str] = None) -> TokenStream:
	"""
	Lex `source` into a token tree.

	Raises TokenizeError on characters no terminal matches and on unbalanced
	or mismatched delimiters.
	"""
	root: TokenStream = []
	current = root
	# (delimiter, opening token, enclosing stream) for every open group.
	stack: List[Tuple[Delimiter, Token, TokenStream]] = []
	try:
		for tok in _LEXER.lex(source):
			if tok.type in _OPEN:
				stack.append((_OPEN[tok.type], tok, current))
				current = []
				continue
			if tok.type in _CLOSE:
				delim = _CLOSE[tok.type]
				if not stack:
					raise TokenizeError(
						f"unexpected closing delimiter `{tok.value}`",
						span=Span.from_token(tok, file),
					)
				open_delim, open_tok, parent = stack.pop()
				if open_delim is not delim:
					raise TokenizeError(
						f"mismatched closing delimiter `{tok.value}`, expected `{open_delim.close}` "
						f"(opened at {open_tok.line}:{open_tok.column})",
						span=Span.from_token(tok, file),
					)
				parent.append(Group(delim, current, _group_span(open_tok, tok, file)))
				current = parent
				continue
			current.append(_leaf(tok, file))
	except UnexpectedCharacters as err:
		pos = err.pos_in_stream
		raise TokenizeError(
			f"unexpected character {source[pos]!r}",
			span=Span(file=file, line=err.line, column=err.column, start=pos, end=pos + 1),
		) from err
	if stack:
		open_delim, open_tok, _parent = stack[-1]
		raise TokenizeError(
			f"unclosed delimiter `{open_delim.open}`",
			span=Span.from_token(open_tok, file),
		)
	return root


__all__ = ["TokenizeError", "tokenize"]
