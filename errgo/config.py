# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Arguments of the `#[err_as_you_go(...)]` attribute.

	#[err_as_you_go(derive(Debug, Clone), attributes(#[non_exhaustive]), visibility(pub(crate)))]

Every option is optional and may appear at most once; aliases of an option
(`attrs`, `attr`, `vis`) count as the same option.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

from errgo.core.span import Span
from errgo.core.tokens import (
	Delimiter,
	Group,
	Ident,
	TokenStream,
	is_group,
	is_ident,
	is_path,
	is_punct,
	stream_span,
)
from errgo.parser.ast import Attribute
from errgo.parser.cursor import GrammarError, TokenCursor, describe, parse_attributes

_OPTIONS: Dict[str, str] = {
	"derive": "derive",
	"attributes": "attributes",
	"attrs": "attributes",
	"attr": "attributes",
	"visibility": "visibility",
	"vis": "visibility",
}


class ConfigError(ValueError):
	def __init__(self, message: str, *, span: Span) -> None:
		super().__init__(message)
		self.span = span


@dataclass
class Config:
	"""
	Parsed options. None means "not given"; an empty `visibility` list means
	an explicitly private enum.
	"""

	derives: Optional[List[TokenStream]] = None
	attributes: Optional[List[Attribute]] = None
	visibility: Optional[TokenStream] = None


def _split_commas(stream: TokenStream) -> List[TokenStream]:
	entries: List[TokenStream] = [[]]
	for tree in stream:
		if is_punct(tree, ","):
			entries.append([])
		else:
			entries[-1].append(tree)
	if not entries[-1]:
		entries.pop()
	return entries


def _parse_derive(group: Group) -> List[TokenStream]:
	entries = _split_commas(group.stream)
	if not entries:
		raise ConfigError("`derive` needs at least one trait path", span=group.span)
	for entry in entries:
		if not entry or not is_path(entry):
			span = stream_span(entry) if entry else group.span
			raise ConfigError(f"expected trait path in `derive`, found {describe(entry[0] if entry else None)}", span=span)
	return entries


def _parse_attributes(group: Group) -> List[Attribute]:
	cursor = TokenCursor(group.stream, group.span)
	attrs: List[Attribute] = []
	while not cursor.at_end():
		try:
			found = parse_attributes(cursor)
		except GrammarError as err:
			raise ConfigError(str(err), span=err.span) from err
		if not found:
			raise ConfigError(f"expected `#[...]` attribute, found {describe(cursor.peek())}", span=cursor.here())
		attrs.extend(found)
		cursor.eat_punct(",")
	if not attrs:
		raise ConfigError("`attributes` needs at least one attribute", span=group.span)
	return attrs


def _parse_visibility(group: Group) -> TokenStream:
	stream = group.stream
	if not stream:
		return []
	if not is_ident(stream[0], "pub"):
		raise ConfigError(f"expected visibility, found {describe(stream[0])}", span=stream[0].span)
	if len(stream) == 1:
		return list(stream)
	restriction = stream[1]
	if len(stream) > 2 or not is_group(restriction, Delimiter.PAREN):
		extra = stream[1] if len(stream) == 2 else stream[2]
		raise ConfigError(f"unexpected {describe(extra)} in visibility", span=extra.span)
	inner = restriction.stream  # type: ignore[union-attr]
	if len(inner) == 1 and isinstance(inner[0], Ident) and inner[0].text in ("crate", "self", "super"):
		return list(stream)
	if inner and is_ident(inner[0], "in") and is_path(inner[1:]):
		return list(stream)
	raise ConfigError("expected `crate`, `self`, `super` or `in path` in `pub(...)`", span=restriction.span)


def parse_config(stream: TokenStream, span: Span = Span()) -> Config:
	"""Parse the attribute arguments (the contents of its paren group)."""
	config = Config()
	seen: Dict[str, Ident] = {}
	cursor = TokenCursor(stream, span)
	while not cursor.at_end():
		key = cursor.peek()
		if not isinstance(key, Ident):
			raise ConfigError(f"expected option name, found {describe(key)}", span=cursor.here())
		option = _OPTIONS.get(key.text)
		if option is None:
			raise ConfigError(
				f"unexpected argument `{key.text}`, expected `derive`, `attributes` or `visibility`",
				span=key.span,
			)
		if option in seen:
			raise ConfigError(f"`{option}` specified more than once", span=key.span)
		seen[option] = key
		cursor.advance()
		group = cursor.peek()
		if not is_group(group, Delimiter.PAREN):
			raise ConfigError(f"expected `(` after `{key.text}`, found {describe(group)}", span=cursor.here())
		cursor.advance()
		if option == "derive":
			config.derives = _parse_derive(group)  # type: ignore[arg-type]
		elif option == "attributes":
			config.attributes = _parse_attributes(group)  # type: ignore[arg-type]
		else:
			config.visibility = _parse_visibility(group)  # type: ignore[arg-type]
		if not cursor.at_end() and cursor.eat_punct(",") is None:
			raise ConfigError(f"expected `,` between options, found {describe(cursor.peek())}", span=cursor.here())
	return config


__all__ = ["Config", "ConfigError", "parse_config"]
