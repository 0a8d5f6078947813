# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Source-level expansion of `#[err_as_you_go]` functions.

For every annotated function the assembler:

  1. parses the attribute arguments (`errgo.config`),
  2. resolves the error type from the `-> Result<T, E>` return type,
  3. rewrites the markers in the body (`errgo.walker`),
  4. emits `enum E { ... }` followed by the rewritten function.

Text outside the annotated items is copied untouched. When step 1 or 2 fails
the function is left as written except that the attribute is removed, and a
diagnostic is reported; the rest of the file is still processed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from errgo.core.diagnostics import Diagnostic, has_errors
from errgo.core.render import render_tokens
from errgo.core.span import Span
from errgo.core.tokens import (
	Delimiter,
	Group,
	Ident,
	Literal,
	TokenStream,
	TokenTree,
	is_group,
	is_ident,
	is_path,
	is_punct,
	stream_span,
)
from errgo.parser.lexer import TokenizeError, tokenize
from .config import Config, ConfigError, parse_config
from .resolve import resolve_error_name
from .walker import MARKER_NAME, MarkerWalker

log = logging.getLogger(__name__)

DEFAULT_ATTRIBUTE = "err_as_you_go"
VARIANT_INDENT = "    "

_QUALIFIERS = {"const", "async", "unsafe", "default"}


@dataclass
class FunctionReport:
	"""What happened to one annotated function."""

	name: str
	error_name: Optional[str] = None
	variants: List[str] = field(default_factory=list)
	expanded: bool = False


@dataclass
class ExpansionResult:
	text: str
	diagnostics: List[Diagnostic] = field(default_factory=list)
	functions: List[FunctionReport] = field(default_factory=list)

	@property
	def ok(self) -> bool:
		return not has_errors(self.diagnostics)


@dataclass
class _Item:
	"""Token positions of one annotated item within its enclosing stream."""

	stream: TokenStream
	start: int  # first outer attribute of the item
	attr: int  # the `#` of our attribute
	args: Optional[TokenStream]
	args_span: Span
	header: int  # first token after our attribute


@dataclass
class _FnHeader:
	name: Ident
	vis: TokenStream
	ret: Optional[TokenStream]
	body: Group
	body_index: int


def _attribute_args(bracket: TokenTree, attribute: str) -> Tuple[bool, Optional[TokenStream], Span]:
	"""
	Match `[attribute]`, `[attribute(...)]` or `[path::attribute(...)]`.

	Returns (matched, argument tokens or None, span of the arguments).
	"""
	if not is_group(bracket, Delimiter.BRACKET):
		return False, None, Span()
	inner = bracket.stream  # type: ignore[union-attr]
	end = len(inner)
	if inner and isinstance(inner[-1], Group):
		end -= 1
	name = inner[:end]
	if not is_path(name) or not is_ident(name[-1], attribute):
		return False, None, Span()
	if end == len(inner):
		return True, None, Span()
	args = inner[-1]
	if args.delimiter is not Delimiter.PAREN:  # type: ignore[union-attr]
		raise ConfigError(f"expected `(` after `{attribute}`", span=args.span)
	return True, args.stream, args.span  # type: ignore[union-attr]


def _outer_attribute_at(stream: TokenStream, i: int) -> bool:
	return (
		i + 1 < len(stream)
		and is_punct(stream[i], "#")
		and is_group(stream[i + 1], Delimiter.BRACKET)
	)


def _item_start(stream: TokenStream, attr: int) -> int:
	start = attr
	while start >= 2 and _outer_attribute_at(stream, start - 2):
		start -= 2
	return start


def _parse_header(stream: TokenStream, i: int, attribute: str) -> Tuple[Optional[_FnHeader], str, Span]:
	"""
	Parse `vis? qualifiers* fn name generics? (params) (-> ret)? where? { body }`.

	Returns (header, "", Span()) or (None, message, span) when the item is not
	a function with a body.
	"""
	n = len(stream)
	while _outer_attribute_at(stream, i):
		i += 2
	item_span = stream[i].span if i < n else Span()

	vis: TokenStream = []
	if is_ident(stream[i] if i < n else None, "pub"):
		vis.append(stream[i])
		i += 1
		if i < n and is_group(stream[i], Delimiter.PAREN):
			vis.append(stream[i])
			i += 1
	while i < n:
		tree = stream[i]
		if isinstance(tree, Ident) and tree.text in _QUALIFIERS:
			i += 1
		elif is_ident(tree, "extern"):
			i += 1
			if i < n and isinstance(stream[i], Literal):
				i += 1
		else:
			break
	if i >= n or not is_ident(stream[i], "fn"):
		return None, f"`#[{attribute}]` can only be applied to functions", item_span
	i += 1
	name = stream[i] if i < n else None
	if not isinstance(name, Ident):
		return None, "expected function name after `fn`", item_span
	i += 1

	if i < n and is_punct(stream[i], "<"):
		depth = 0
		while i < n:
			if is_punct(stream[i], "<"):
				depth += 1
			elif is_punct(stream[i], ">"):
				depth -= 1
				if depth == 0:
					i += 1
					break
			i += 1
	if i >= n or not is_group(stream[i], Delimiter.PAREN):
		return None, f"expected parameter list of `{name.text}`", name.span
	i += 1

	ret: Optional[TokenStream] = None
	if i < n and is_punct(stream[i], "->"):
		i += 1
		ret = []
		depth = 0
		while i < n:
			tree = stream[i]
			if depth == 0 and (
				is_group(tree, Delimiter.BRACE) or is_ident(tree, "where") or is_punct(tree, ";")
			):
				break
			if is_punct(tree, "<"):
				depth += 1
			elif is_punct(tree, ">"):
				depth -= 1
			ret.append(tree)
			i += 1
	if i < n and is_ident(stream[i], "where"):
		while i < n and not is_group(stream[i], Delimiter.BRACE) and not is_punct(stream[i], ";"):
			i += 1
	if i >= n or not is_group(stream[i], Delimiter.BRACE):
		return None, f"function `{name.text}` has no body", name.span
	header = _FnHeader(name=name, vis=vis, ret=ret, body=stream[i], body_index=i)  # type: ignore[arg-type]
	return header, "", Span()


def _line_indent(source: str, offset: int) -> str:
	line_start = source.rfind("\n", 0, offset) + 1
	prefix = source[line_start:offset]
	return prefix if prefix.strip() == "" else ""


class _Assembler:
	def __init__(self, source: str, file: Optional[str], attribute: str) -> None:
		self.source = source
		self.file = file
		self.attribute = attribute
		self.diagnostics: List[Diagnostic] = []
		self.functions: List[FunctionReport] = []
		# (start, end, replacement) edits against `source`, non-overlapping.
		self.edits: List[Tuple[int, int, str]] = []

	def run(self, stream: TokenStream) -> str:
		self._scan(stream)
		text = self.source
		for start, end, replacement in sorted(self.edits, reverse=True):
			text = text[:start] + replacement + text[end:]
		return text

	def _scan(self, stream: TokenStream) -> None:
		i = 0
		while i < len(stream):
			if _outer_attribute_at(stream, i):
				try:
					matched, args, args_span = _attribute_args(stream[i + 1], self.attribute)
				except ConfigError as err:
					item = _Item(stream, _item_start(stream, i), i, None, Span(), i + 2)
					self._fail(item, Diagnostic(message=str(err), code="E-CONFIG", phase="config", span=err.span))
					i = self._skip_item(stream, i + 2)
					continue
				if matched:
					item = _Item(stream, _item_start(stream, i), i, args, args_span, i + 2)
					i = self._expand_item(item)
					continue
			tree = stream[i]
			if isinstance(tree, Group):
				self._scan(tree.stream)
			i += 1

	def _skip_item(self, stream: TokenStream, i: int) -> int:
		"""Index just past the item starting at `i` (its body or its `;`)."""
		while i < len(stream):
			tree = stream[i]
			i += 1
			if is_group(tree, Delimiter.BRACE) or is_punct(tree, ";"):
				break
		return i

	def _fail(self, item: _Item, diag: Diagnostic) -> None:
		"""Report `diag` and drop our attribute, leaving the item as written."""
		self.diagnostics.append(diag)
		stream = item.stream
		start = stream[item.attr].span.start
		if item.header < len(stream):
			end = stream[item.header].span.start
		else:
			end = stream[item.attr + 1].span.end
		self.edits.append((start, end, ""))

	def _expand_item(self, item: _Item) -> int:
		stream = item.stream
		header, message, span = _parse_header(stream, item.header, self.attribute)
		if header is None:
			self._fail(item, Diagnostic(message=message, code="E-ITEM", phase="item", span=span))
			return self._skip_item(stream, item.header)
		next_index = header.body_index + 1
		report = FunctionReport(name=header.name.text)
		self.functions.append(report)

		try:
			config = parse_config(item.args or [], item.args_span)
		except ConfigError as err:
			self._fail(item, Diagnostic(message=str(err), code="E-CONFIG", phase="config", span=err.span))
			return next_index
		log.debug("%s: config %s", header.name.text, config)

		error_name = resolve_error_name(header.ret)
		if error_name is None:
			ret_span = stream_span(header.ret or [])
			if header.ret:
				message = (
					f"cannot determine the error type of `{header.name.text}`: "
					f"expected a return type of the form `Result<T, ErrorName>`"
				)
			else:
				message = f"function `{header.name.text}` has no return type; expected `Result<T, ErrorName>`"
			self._fail(
				item,
				Diagnostic(
					message=message,
					code="E-RESULT-TYPE",
					phase="resolve",
					span=ret_span if ret_span.known else header.name.span,
				),
			)
			return next_index
		report.error_name = error_name.text
		log.debug("%s: error type %s", header.name.text, error_name.text)

		walker = MarkerWalker(error_name.text, MARKER_NAME)
		walker.walk(header.body.stream)
		self.diagnostics.extend(walker.diagnostics)
		report.variants = [d.name for d in walker.declarations]
		report.expanded = True
		log.debug(
			"%s: %d variant(s), %d rejected marker(s)",
			header.name.text,
			len(walker.declarations),
			len(walker.diagnostics),
		)

		start = stream[item.start].span.start
		indent = _line_indent(self.source, start)
		enum_text = self._render_enum(error_name.text, config, header.vis, walker, indent)
		fn_text = self._render_function(item, header)
		self.edits.append((start, header.body.span.end, f"{enum_text}\n\n{indent}{fn_text}"))
		return next_index

	def _render(self, tokens: TokenStream) -> str:
		return render_tokens(tokens, self.source, collapse_newlines=True)

	def _render_enum(
		self,
		name: str,
		config: Config,
		fn_vis: TokenStream,
		walker: MarkerWalker,
		indent: str,
	) -> str:
		lines: List[str] = []
		if config.derives:
			lines.append("#[derive(" + ", ".join(self._render(d) for d in config.derives) + ")]")
		for attr in config.attributes or []:
			lines.append(self._render(attr.tokens))
		vis_tokens = config.visibility if config.visibility is not None else fn_vis
		vis = self._render(vis_tokens) + " " if vis_tokens else ""
		if not walker.declarations:
			lines.append(f"{vis}enum {name} {{}}")
			return f"\n{indent}".join(lines)
		lines.append(f"{vis}enum {name} {{")
		for decl in walker.declarations:
			for attr in decl.attrs:
				lines.append(VARIANT_INDENT + self._render(attr))
			lines.append(VARIANT_INDENT + decl.render_variant(self.source) + ",")
		lines.append("}")
		return f"\n{indent}".join(lines)

	def _render_function(self, item: _Item, header: _FnHeader) -> str:
		stream = item.stream
		start = stream[item.start].span.start
		attr_start = stream[item.attr].span.start
		attr_end = stream[item.header].span.start
		head = self.source[start:attr_start] + self.source[attr_end : header.body.span.start]
		return head + render_tokens([header.body], self.source)


def expand_source(
	source: str,
	file: Optional[str] = None,
	attribute: str = DEFAULT_ATTRIBUTE,
) -> ExpansionResult:
	"""
	Expand every `#[attribute]` function in `source`.

	Never raises for malformed input: problems are returned as diagnostics and
	the affected text is left as written.
	"""
	try:
		stream = tokenize(source, file)
	except TokenizeError as err:
		log.debug("%s: tokenize failed: %s", file or "<input>", err)
		diag = Diagnostic(message=str(err), code="E-LEX", phase="lex", span=err.span)
		return ExpansionResult(text=source, diagnostics=[diag])
	assembler = _Assembler(source, file, attribute)
	text = assembler.run(stream)
	return ExpansionResult(text=text, diagnostics=assembler.diagnostics, functions=assembler.functions)


__all__ = ["DEFAULT_ATTRIBUTE", "FunctionReport", "ExpansionResult", "expand_source"]
