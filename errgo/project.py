# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Dual projection of a parsed marker.

Each `VariantDef` yields two token sequences:

  declaration   `NotEnoughBuckets { got: usize, required: usize }`
  construction  `ShaveYaksError::NotEnoughBuckets { got: empty_buckets, required: num_yaks }`

The declaration keeps types and attributes and drops values; the
construction keeps values and drops types and attributes. Name, type and
value tokens are reused from the marker so their spans survive; separators
and delimiters are synthesized.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from errgo.core.render import render_tokens
from errgo.core.tokens import Delimiter, Group, Punct, TokenStream, separated
from errgo.parser.ast import (
	Attribute,
	NamedFields,
	UnitFields,
	UnnamedFields,
	VariantDef,
)


@dataclass
class Declaration:
	"""One enum variant declaration, ready to be placed inside `enum Name { ... }`."""

	name: str
	# Variant-level attributes, one token list per `#[...]`.
	attrs: List[TokenStream] = field(default_factory=list)
	# Name, fields and discriminant.
	tokens: TokenStream = field(default_factory=list)

	def to_tokens(self) -> TokenStream:
		out: TokenStream = []
		for attr in self.attrs:
			out.extend(attr)
		out.extend(self.tokens)
		return out

	def render(self, source: Optional[str] = None) -> str:
		"""Render attributes and variant on a single line."""
		return render_tokens(self.to_tokens(), source, collapse_newlines=True)

	def render_variant(self, source: Optional[str] = None) -> str:
		"""Render the variant without its attributes."""
		return render_tokens(self.tokens, source, collapse_newlines=True)


def _attr_tokens(attrs: List[Attribute]) -> TokenStream:
	out: TokenStream = []
	for attr in attrs:
		out.extend(attr.tokens)
	return out


def project_declaration(defn: VariantDef) -> Declaration:
	tokens: TokenStream = [defn.name]
	fields = defn.fields
	if isinstance(fields, NamedFields):
		entries = [
			_attr_tokens(f.attrs) + [f.name, Punct(":")] + list(f.ty.tokens)
			for f in fields.fields
		]
		tokens.append(Group(Delimiter.BRACE, separated(entries)))
	elif isinstance(fields, UnnamedFields):
		entries = [_attr_tokens(f.attrs) + list(f.ty.tokens) for f in fields.fields]
		tokens.append(Group(Delimiter.PAREN, separated(entries)))
	elif not isinstance(fields, UnitFields):
		raise TypeError(f"unknown field shape {type(fields).__name__}")
	if defn.discriminant is not None:
		tokens.append(Punct("="))
		tokens.extend(defn.discriminant.tokens)
	return Declaration(
		name=defn.name.text,
		attrs=[list(a.tokens) for a in defn.attrs],
		tokens=tokens,
	)


def project_construction(defn: VariantDef, prefix: TokenStream) -> TokenStream:
	"""
	Build `Prefix::Name`, `Prefix::Name { f: v, .. }` or `Prefix::Name(v, ..)`.

	An empty `prefix` yields the bare variant path.
	"""
	tokens: TokenStream = list(prefix)
	if tokens:
		tokens.append(Punct("::"))
	tokens.append(defn.name)
	fields = defn.fields
	if isinstance(fields, NamedFields):
		entries = [[f.name, Punct(":")] + list(f.value.tokens) for f in fields.fields]
		tokens.append(Group(Delimiter.BRACE, separated(entries)))
	elif isinstance(fields, UnnamedFields):
		entries = [list(f.value.tokens) for f in fields.fields]
		tokens.append(Group(Delimiter.PAREN, separated(entries)))
	return tokens


def project(defn: VariantDef, prefix: TokenStream) -> Tuple[Declaration, TokenStream]:
	return project_declaration(defn), project_construction(defn, prefix)


__all__ = ["Declaration", "project_declaration", "project_construction", "project"]
