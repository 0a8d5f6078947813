"""
Marker AST: the structured form of one `err!(...)` occurrence.

Types, values and attributes are never interpreted; they are kept as the
token lists the marker was written with (`RawTokens`, `Attribute`) and only
moved between the two projections.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from errgo.core.span import Span
from errgo.core.tokens import Ident, TokenStream, stream_span


@dataclass
class RawTokens:
	"""Opaque type or expression payload."""

	tokens: TokenStream

	@property
	def span(self) -> Span:
		return stream_span(self.tokens)


@dataclass
class Attribute:
	"""Outer attribute `#[...]`: the `#` punct and the bracket group."""

	tokens: TokenStream

	@property
	def span(self) -> Span:
		return stream_span(self.tokens)


@dataclass
class NamedField:
	attrs: List[Attribute]
	name: Ident
	ty: RawTokens
	value: RawTokens
	span: Span = field(default_factory=Span)


@dataclass
class UnnamedField:
	attrs: List[Attribute]
	ty: RawTokens
	value: RawTokens
	span: Span = field(default_factory=Span)


class Fields:
	"""Field shape of a variant: unit, named (`{}`) or unnamed (`()`)."""


@dataclass
class UnitFields(Fields):
	pass


@dataclass
class NamedFields(Fields):
	fields: List[NamedField] = field(default_factory=list)


@dataclass
class UnnamedFields(Fields):
	fields: List[UnnamedField] = field(default_factory=list)


@dataclass
class VariantDef:
	"""
	One marker occurrence, parsed.

	Examples:
	  NotEnoughRazors
	  #[error("io")] IoErr(std::io::Error = e)
	  NotEnoughBuckets { got: usize = empty_buckets, required: usize = num_yaks }
	  Code = 3
	"""

	name: Ident
	attrs: List[Attribute] = field(default_factory=list)
	fields: Fields = field(default_factory=UnitFields)
	discriminant: Optional[RawTokens] = None
	span: Span = field(default_factory=Span)


__all__ = [
	"RawTokens",
	"Attribute",
	"NamedField",
	"UnnamedField",
	"Fields",
	"UnitFields",
	"NamedFields",
	"UnnamedFields",
	"VariantDef",
]
