# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Marker walker: finds `err!(...)` occurrences in a function body and rewrites them.

The walk is a mutating pass over the body's token tree. Every marker is
parsed and its declaration collected; the three marker tokens are then
replaced in place by one invisible group holding the construction expression.

A marker that fails to parse is reported and replaced by an inert
`::core::stringify!(..)` of its contents, so one bad marker never hides the
others.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

from errgo.core.diagnostics import Diagnostic
from errgo.core.tokens import (
	Delimiter,
	Group,
	Ident,
	Punct,
	TokenStream,
	TokenTree,
	is_group,
	is_ident,
	is_punct,
	path,
)
from errgo.parser.ast import NamedFields, RawTokens, UnnamedFields, VariantDef
from errgo.parser.cursor import GrammarError
from errgo.parser.variant import parse_variant
from .project import Declaration, project_construction, project_declaration

log = logging.getLogger(__name__)

MARKER_NAME = "err"


def _payloads(defn: VariantDef) -> List[RawTokens]:
	"""Value and discriminant payloads in source order."""
	out: List[RawTokens] = []
	if isinstance(defn.fields, (NamedFields, UnnamedFields)):
		out.extend(f.value for f in defn.fields.fields)
	if defn.discriminant is not None:
		out.append(defn.discriminant)
	return out


class MarkerWalker:
	"""
	Rewrites markers of one function body.

	After `walk`, `declarations` holds one Declaration per successful marker in
	encounter order (duplicates included) and `diagnostics` one entry per
	failed marker.
	"""

	def __init__(self, error_name: str, marker: str = MARKER_NAME) -> None:
		self.error_name = error_name
		self.marker = marker
		self.prefix: TokenStream = [Ident(error_name)]
		self.declarations: List[Declaration] = []
		self.diagnostics: List[Diagnostic] = []

	def walk(self, stream: TokenStream) -> None:
		i = 0
		while i < len(stream):
			tree = stream[i]
			if self._is_marker(stream, i):
				name, group = stream[i], stream[i + 2]
				stream[i : i + 3] = [self._expand(name, group)]  # type: ignore[arg-type]
			elif isinstance(tree, Group) and tree.delimiter is not Delimiter.NONE:
				self.walk(tree.stream)
			i += 1

	def _is_marker(self, stream: TokenStream, i: int) -> bool:
		if i + 2 >= len(stream):
			return False
		if not is_ident(stream[i], self.marker) or not is_punct(stream[i + 1], "!"):
			return False
		group = stream[i + 2]
		if not is_group(group) or group.delimiter is Delimiter.NONE:  # type: ignore[union-attr]
			return False
		# `foo::err!(..)` and `x.err!(..)` are someone else's macro.
		if i > 0 and (is_punct(stream[i - 1], "::") or is_punct(stream[i - 1], ".")):
			return False
		return True

	def _expand(self, name: Ident, group: Group) -> TokenTree:
		span = name.span.join(group.span)
		try:
			defn = parse_variant(group.stream, group.span)
		except GrammarError as err:
			log.debug("marker at %s rejected: %s", span.short(), err)
			self.diagnostics.append(
				Diagnostic(
					message=str(err),
					code="E-MARKER-GRAMMAR",
					phase="marker",
					span=err.span if err.span.known else span,
				)
			)
			inert = path("core", "stringify", leading_colon=True)
			inert += [Punct("!"), Group(Delimiter.PAREN, list(group.stream))]
			return Group(Delimiter.NONE, inert, span)

		# Outer markers precede the markers nested in their values.
		index = len(self.declarations)
		for payload in _payloads(defn):
			self.walk(payload.tokens)
		decl = project_declaration(defn)
		self.declarations.insert(index, decl)
		log.debug("marker at %s -> %s::%s", span.short(), self.error_name, defn.name.text)

		call = path("core", "convert", "identity", leading_colon=True)
		call.append(Group(Delimiter.PAREN, project_construction(defn, self.prefix)))
		return Group(Delimiter.NONE, call, span)


@dataclass
class WalkResult:
	declarations: List[Declaration] = field(default_factory=list)
	diagnostics: List[Diagnostic] = field(default_factory=list)


def expand_markers(body: TokenStream, error_name: str, marker: str = MARKER_NAME) -> WalkResult:
	"""Rewrite every marker in `body` (in place) and return what was collected."""
	walker = MarkerWalker(error_name, marker)
	walker.walk(body)
	return WalkResult(declarations=walker.declarations, diagnostics=walker.diagnostics)


__all__ = ["MARKER_NAME", "MarkerWalker", "WalkResult", "expand_markers"]
